"""Geometry module: hit records and sphere intersection.

Components:
    hittable: HitRecord structure and normal orientation
    sphere: Sphere structure and ray-sphere intersection
"""

from .hittable import HitRecord, miss_record, set_face_normal
from .sphere import Sphere, hit_sphere, make_sphere

__all__ = [
    "HitRecord",
    "miss_record",
    "set_face_normal",
    "Sphere",
    "hit_sphere",
    "make_sphere",
]

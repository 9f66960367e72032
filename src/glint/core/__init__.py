"""Core rendering module.

Components:
    vec3: Vector aliases, vector algebra and random sampling helpers
    ray: Ray data structure
    integrator: Sky background, path tracing loop and sampling kernels
    renderer: Batch renderer with progress reporting

All per-ray operations are Taichi functions and run inside kernels.
"""

from .ray import Ray, make_ray, ray_at
from .vec3 import (
    Color,
    Point3,
    cross,
    dot,
    length,
    length_squared,
    near_zero,
    random_in_unit_disk,
    random_in_unit_sphere,
    random_range,
    random_unit_vector,
    random_vec3,
    reflect,
    reflectance,
    refract,
    unit_vector,
    vec3,
)

# Note: integrator and renderer are NOT imported here; they allocate Taichi
# fields at import time and must be imported after ti.init().

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "Point3",
    "Color",
    "length",
    "length_squared",
    "unit_vector",
    "dot",
    "cross",
    "reflect",
    "refract",
    "reflectance",
    "near_zero",
    "random_range",
    "random_vec3",
    "random_in_unit_sphere",
    "random_unit_vector",
    "random_in_unit_disk",
]

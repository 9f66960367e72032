"""Hit record shared by every intersection routine.

A Taichi function cannot return an optional value, so "no intersection" is
carried in-band: ``hit == 0`` marks a miss and the other fields are then
meaningless. Every primitive and the scene-level resolver return this record.

The stored normal always opposes the incoming ray. ``front_face`` records
whether the ray arrived from the side the primitive's outward normal points
to; it is derived by :func:`set_face_normal` and never set independently.
"""

import taichi as ti

from glint.core.vec3 import Point3, dot, vec3


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: 1 if the ray intersected a surface, 0 for a miss.
        t: Ray parameter of the intersection.
        p: The intersection point.
        normal: Unit surface normal, oriented against the incoming ray.
        front_face: 1 if the ray hit the outward-facing side, 0 otherwise.
        material_id: Material of the surface that was hit (-1 on a miss).
    """

    hit: ti.i32
    t: ti.f32
    p: Point3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32


@ti.func
def set_face_normal(ray_direction: vec3, outward_normal: vec3):
    """Orient an outward normal against the incoming ray.

    Args:
        ray_direction: Direction of the incoming ray.
        outward_normal: The primitive's outward normal at the hit point
            (unit length).

    Returns:
        A tuple ``(front_face, normal)``: ``front_face`` is 1 when the ray
        travels against the outward normal, and ``normal`` is the outward
        normal flipped as needed so that it opposes the ray.
    """
    front_face = 1
    normal = outward_normal
    if dot(ray_direction, outward_normal) >= 0.0:
        front_face = 0
        normal = -outward_normal
    return front_face, normal


@ti.func
def miss_record() -> HitRecord:
    """A HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        p=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
    )

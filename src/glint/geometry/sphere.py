"""Sphere primitive with closed-form ray-sphere intersection.

The ray-sphere intersection is found by solving:
    |origin + t * direction - center|^2 = radius^2

which expands to the quadratic ``a*t^2 + 2*half_b*t + c = 0`` with:
    oc     = origin - center
    a      = |direction|^2
    half_b = dot(oc, direction)
    c      = |oc|^2 - radius^2

The near root is preferred; the far root is used when the near one falls
outside ``[t_min, t_max]`` (for example when the ray starts inside).

A negative radius is supported: the outward normal
``(p - center) / radius`` then points inward, which turns the sphere into a
hollow shell. Nesting a negative-radius dielectric sphere inside a positive
one gives a thin glass bubble.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5, material_id=0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti

from glint.core.ray import Ray, ray_at
from glint.core.vec3 import Point3, dot, length_squared, vec3
from glint.geometry.hittable import HitRecord, set_face_normal


@ti.dataclass
class Sphere:
    """A sphere defined by center point, signed radius and material.

    Attributes:
        center: The center point of the sphere.
        radius: The radius. Negative values flip the normals (hollow shell).
        material_id: Unified material ID used for shading.
    """

    center: Point3
    radius: ti.f32
    material_id: ti.i32


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Intersect a ray with a sphere.

    Args:
        ray: The ray to test. The direction need not be normalized.
        sphere: The sphere to test against.
        t_min: Smallest accepted ray parameter (inclusive).
        t_max: Largest accepted ray parameter (inclusive).

    Returns:
        A HitRecord for the nearest root in ``[t_min, t_max]``, or a miss
        record (``hit == 0``) if the discriminant is negative or neither
        root is in range.
    """
    oc = ray.origin - sphere.center
    a = length_squared(ray.direction)
    half_b = dot(oc, ray.direction)
    c = length_squared(oc) - sphere.radius * sphere.radius
    discriminant = half_b * half_b - a * c

    # Initialize result fields (Taichi requires outer-scope declaration)
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    is_front_face = 0

    if discriminant >= 0.0:
        sqrtd = ti.sqrt(discriminant)

        root = (-half_b - sqrtd) / a
        valid = root >= t_min and root <= t_max
        if not valid:
            root = (-half_b + sqrtd) / a
            valid = root >= t_min and root <= t_max

        if valid:
            did_hit = 1
            hit_t = root
            hit_point = ray_at(ray, root)
            # Signed radius: negative spheres get inward normals
            outward_normal = (hit_point - sphere.center) / sphere.radius
            is_front_face, hit_normal = set_face_normal(ray.direction, outward_normal)

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        p=hit_point,
        normal=hit_normal,
        front_face=is_front_face,
        material_id=sphere.material_id,
    )


@ti.func
def make_sphere(center: Point3, radius: ti.f32, material_id: ti.i32) -> Sphere:
    """Create a sphere inside a Taichi function."""
    return Sphere(center=center, radius=radius, material_id=material_id)

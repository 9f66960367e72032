"""Ray data structure.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.core.ray import Ray, ray_at
    >>> from glint.core.vec3 import vec3
    >>> ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    >>> # ray_at(ray, 5.0) inside a kernel gives (0, 0, -5)
"""

import taichi as ti

from glint.core.vec3 import Point3, vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Not required to be unit length;
            sphere intersection and the materials accept any non-zero length.
    """

    origin: Point3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> Point3:
    """Point along the ray at parameter t: ``origin + t * direction``."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: Point3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a Taichi function."""
    return Ray(origin=origin, direction=direction)

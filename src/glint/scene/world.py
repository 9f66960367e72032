"""The world: a flat list of spheres and the nearest-hit resolver.

Spheres are stored in Taichi fields using a Structure-of-Arrays layout. The
list is scanned linearly; there is no acceleration structure. The resolver
shrinks its upper bound every time a closer hit is found, so each sphere is
only tested against the part of the ray in front of the best hit so far.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.scene.world import add_sphere, clear_world, hit_world
    >>> clear_world()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, material_id=0)
    >>> # Use hit_world within a Taichi kernel
"""

import math

import taichi as ti

from glint.core.ray import Ray
from glint.core.vec3 import vec3
from glint.geometry.hittable import HitRecord, miss_record
from glint.geometry.sphere import Sphere, hit_sphere

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_world() -> None:
    """Remove all spheres from the world.

    Resets the sphere count to zero. The field data is overwritten when new
    spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(center: tuple[float, float, float], radius: float, material_id: int = 0) -> int:
    """Append a sphere to the world.

    Args:
        center: The center point of the sphere as (x, y, z).
        radius: The signed radius. Negative values make a hollow shell.
        material_id: The unified material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
        ValueError: If the radius is zero or any value is not finite.
    """
    if not all(math.isfinite(component) for component in center):
        raise ValueError(f"Sphere center {center} has non-finite components")
    if not math.isfinite(radius) or radius == 0.0:
        raise ValueError(
            f"Sphere radius = {radius} is degenerate. "
            "The radius must be finite and non-zero."
        )

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = vec3(center[0], center[1], center[2])
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the world."""
    return int(num_spheres[None])


@ti.func
def get_sphere(index: ti.i32) -> Sphere:
    return Sphere(
        center=sphere_centers[index],
        radius=sphere_radii[index],
        material_id=sphere_material_ids[index],
    )


@ti.func
def hit_world(ray: Ray, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Find the nearest intersection of a ray with any sphere in the world.

    Each sphere is queried with ``t_max`` replaced by the closest hit so far,
    so the returned record is the global minimum-``t`` hit. The bound is
    inclusive, so on an exact tie the sphere added last wins.

    Args:
        ray: The ray to test.
        t_min: Smallest accepted ray parameter.
        t_max: Largest accepted ray parameter.

    Returns:
        The nearest HitRecord, or a miss record if nothing was hit.
    """
    closest_so_far = t_max
    result = miss_record()

    for i in range(num_spheres[None]):
        rec = hit_sphere(ray, get_sphere(i), t_min, closest_so_far)
        if rec.hit == 1:
            closest_so_far = rec.t
            result = rec

    return result

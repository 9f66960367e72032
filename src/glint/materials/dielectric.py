"""Dielectric (glass/water) material implementation.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when ratio * sin(theta) > 1

The material randomly chooses between reflection and refraction based on
the Fresnel reflectance probability, which increases at grazing angles.
Dielectrics never absorb: the attenuation is always white.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_dielectric(
    >>> #     ior, incident_dir, normal, front_face
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from glint.core.vec3 import dot, reflect, reflectance, refract, unit_vector, vec3


@ti.func
def refraction_ratio(refractive_index: ti.f32, front_face: ti.i32) -> ti.f32:
    """Ratio of indices for a ray crossing the surface.

    Entering the material (front face) gives ``1 / ior``; leaving it gives
    ``ior``.
    """
    ratio = refractive_index
    if front_face == 1:
        ratio = 1.0 / refractive_index
    return ratio


@ti.func
def cannot_refract(
    refractive_index: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
) -> ti.i32:
    """Check for total internal reflection.

    Args:
        refractive_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The surface normal facing the incoming ray (unit length).
        front_face: 1 if the ray hits the outside of the surface.

    Returns:
        1 if ``ratio * sin(theta) > 1``, 0 otherwise.
    """
    ratio = refraction_ratio(refractive_index, front_face)
    unit_direction = unit_vector(incident_direction)
    cos_theta = tm.min(dot(-unit_direction, normal), 1.0)
    sin_theta = ti.sqrt(1.0 - cos_theta * cos_theta)
    result = 0
    if ratio * sin_theta > 1.0:
        result = 1
    return result


@ti.func
def scatter_dielectric(
    refractive_index: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
):
    """Reflect or refract an incoming ray at a dielectric boundary.

    Reflects on total internal reflection, or when a uniform draw falls
    below the Schlick reflectance; refracts otherwise.

    Args:
        refractive_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The surface normal facing the incoming ray (unit length).
        front_face: 1 if the ray hits the outside of the surface,
            0 if it is leaving the material.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The reflected or refracted direction.
        - attenuation: White (no absorption).
        - did_scatter: Always 1.
    """
    attenuation = vec3(1.0, 1.0, 1.0)
    ratio = refraction_ratio(refractive_index, front_face)

    unit_direction = unit_vector(incident_direction)
    cos_theta = tm.min(dot(-unit_direction, normal), 1.0)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    if (
        cannot_refract(refractive_index, incident_direction, normal, front_face) == 1
        or ti.random(ti.f32) < reflectance(cos_theta, ratio)
    ):
        scattered_direction = reflect(unit_direction, normal)
    else:
        scattered_direction = refract(unit_direction, normal, ratio)

    return scattered_direction, attenuation, 1


# =============================================================================
# Refractive Index Registry
# =============================================================================

MAX_DIELECTRIC_MATERIALS = 1024

dielectric_indices = ti.field(dtype=ti.f32, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    num_dielectric_materials[None] = 0


def add_dielectric_material(refractive_index: float = 1.5) -> int:
    """Store an index of refraction and return its index in this registry.

    Typical values are 1.0 (air), 1.33 (water), 1.5 (glass) and 2.4
    (diamond). Indices below 1 are accepted: an air bubble inside water is
    a sphere with ``refractive_index = 1.0 / 1.33``.

    Raises:
        RuntimeError: If the registry is full.
        ValueError: If the index of refraction is not positive.
    """
    if refractive_index <= 0.0:
        raise ValueError(f"Index of refraction = {refractive_index} is not positive")

    slot = get_dielectric_material_count()
    if slot >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_indices[slot] = refractive_index
    num_dielectric_materials[None] = slot + 1
    return slot


def get_dielectric_material_count() -> int:
    return int(num_dielectric_materials[None])


@ti.func
def get_dielectric_index(material_idx: ti.i32) -> ti.f32:
    return dielectric_indices[material_idx]

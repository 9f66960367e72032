"""Metal (specular reflective) material implementation.

The reflection formula is:
    R = I - 2(I . N)N

where I is the incident direction and N is the surface normal. Rough metals
add ``fuzz * random_in_unit_sphere()`` to the mirror direction. When the
perturbed direction ends up below the surface the path is absorbed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.materials.metal import scatter_metal
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_metal(
    >>> #     albedo, fuzz, incident_dir, normal
    >>> # )
"""

import taichi as ti

from glint.core.vec3 import Color, dot, random_in_unit_sphere, reflect, vec3
from glint.materials.lambertian import validate_albedo


@ti.func
def scatter_metal(albedo: Color, fuzz: ti.f32, incident_direction: vec3, normal: vec3):
    """Reflect an incoming ray off a metal surface.

    With ``fuzz == 0`` the perturbation term vanishes and the result is the
    exact mirror direction.

    Args:
        albedo: The reflective color.
        fuzz: The roughness in [0, 1].
        incident_direction: The incoming ray direction (any length).
        normal: The surface normal facing the incoming ray (unit length).

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: Mirror direction plus the fuzz offset.
        - attenuation: The albedo.
        - did_scatter: 1 if the direction leaves the surface, 0 if absorbed.
    """
    reflected = reflect(incident_direction, normal)
    scattered_direction = reflected + fuzz * random_in_unit_sphere()

    did_scatter = 0
    if dot(scattered_direction, normal) > 0.0:
        did_scatter = 1

    return scattered_direction, albedo, did_scatter


# =============================================================================
# Albedo and Fuzz Registry
# =============================================================================

MAX_METAL_MATERIALS = 1024

metal_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_METAL_MATERIALS)
metal_fuzzes = ti.field(dtype=ti.f32, shape=MAX_METAL_MATERIALS)
num_metal_materials = ti.field(dtype=ti.i32, shape=())


def clear_metal_materials() -> None:
    num_metal_materials[None] = 0


def add_metal_material(albedo: tuple[float, float, float], fuzz: float = 0.0) -> int:
    """Store a metal's albedo and fuzz and return its index in this registry.

    Fuzz above 1 is clamped to 1.

    Raises:
        RuntimeError: If the registry is full.
        ValueError: If the albedo is invalid or fuzz is negative.
    """
    rgb = validate_albedo(albedo)
    if fuzz < 0.0:
        raise ValueError(f"Fuzz = {fuzz} is negative. Fuzz must be in [0, 1].")

    slot = get_metal_material_count()
    if slot >= MAX_METAL_MATERIALS:
        raise RuntimeError(f"Maximum number of metal materials ({MAX_METAL_MATERIALS}) exceeded")

    metal_albedos[slot] = rgb
    metal_fuzzes[slot] = min(fuzz, 1.0)
    num_metal_materials[None] = slot + 1
    return slot


def get_metal_material_count() -> int:
    return int(num_metal_materials[None])


@ti.func
def get_metal_albedo(material_idx: ti.i32) -> Color:
    return metal_albedos[material_idx]


@ti.func
def get_metal_fuzz(material_idx: ti.i32) -> ti.f32:
    return metal_fuzzes[material_idx]

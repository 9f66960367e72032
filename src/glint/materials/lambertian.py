"""Lambertian (ideal diffuse) material implementation.

Diffuse surfaces scatter along ``normal + random_unit_vector()``, which
produces a cosine-weighted distribution around the normal. With that
sampling the attenuation reduces to the albedo, so no explicit BRDF or PDF
term appears in the integrator.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glint.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_lambertian(albedo, normal)
"""

import taichi as ti

from glint.core.vec3 import Color, near_zero, random_unit_vector, vec3


@ti.func
def scatter_lambertian(albedo: Color, normal: vec3):
    """Sample a scattered direction for a Lambertian surface.

    If the random unit vector nearly cancels the normal, the normal itself
    is used so the bounce ray never has a zero-length direction.

    Args:
        albedo: The diffuse reflectance color.
        normal: The surface normal at the hit point (unit length).

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: ``normal + random_unit_vector()`` (not normalized).
        - attenuation: The albedo.
        - did_scatter: Always 1; diffuse surfaces never absorb the path.
    """
    scattered_direction = normal + random_unit_vector()

    # Catch degenerate scatter direction
    if near_zero(scattered_direction):
        scattered_direction = normal

    return scattered_direction, albedo, 1


# =============================================================================
# Albedo Registry
# =============================================================================

MAX_LAMBERTIAN_MATERIALS = 1024

lambertian_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def validate_albedo(albedo: tuple[float, float, float]) -> tuple[float, float, float]:
    """Check that an albedo is an RGB triple with every channel in [0, 1].

    A channel above 1 would reflect more light than it receives.

    Returns:
        The albedo as a tuple of floats.

    Raises:
        ValueError: If the albedo does not have 3 channels or a channel is
            outside [0, 1].
    """
    channels = tuple(float(c) for c in albedo)
    if len(channels) != 3:
        raise ValueError(f"Albedo must have 3 channels, got {albedo!r}")
    bad = [c for c in channels if not 0.0 <= c <= 1.0]
    if bad:
        raise ValueError(f"Albedo {channels} has channels outside [0, 1]: {bad}")
    return channels


def clear_lambertian_materials() -> None:
    num_lambertian_materials[None] = 0


def add_lambertian_material(albedo: tuple[float, float, float]) -> int:
    """Store a diffuse albedo and return its index in this registry.

    Raises:
        RuntimeError: If the registry is full.
        ValueError: If the albedo is invalid (see validate_albedo).
    """
    rgb = validate_albedo(albedo)

    slot = get_lambertian_material_count()
    if slot >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded")

    lambertian_albedos[slot] = rgb
    num_lambertian_materials[None] = slot + 1
    return slot


def get_lambertian_material_count() -> int:
    return int(num_lambertian_materials[None])


@ti.func
def get_lambertian_albedo(material_idx: ti.i32) -> Color:
    return lambertian_albedos[material_idx]

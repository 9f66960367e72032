"""Material tags and scatter dispatch.

Materials form a closed tagged union: every material ID maps to a
``MaterialType`` tag plus an index into that type's parameter registry
(``lambertian_albedos``, ``metal_albedos``/``metal_fuzzes``,
``dielectric_indices``). The :func:`scatter` function is the single entry
point the integrator uses; it switches on the tag and calls the matching
variant.

Material IDs are shared by reference: any number of spheres may point at the
same ID, and registered parameters are never modified during a render.
"""

from enum import IntEnum

import taichi as ti

from glint.core.ray import Ray
from glint.core.vec3 import vec3
from glint.geometry.hittable import HitRecord
from glint.materials.dielectric import (
    clear_dielectric_materials,
    get_dielectric_index,
    scatter_dielectric,
)
from glint.materials.lambertian import (
    clear_lambertian_materials,
    get_lambertian_albedo,
    scatter_lambertian,
)
from glint.materials.metal import (
    clear_metal_materials,
    get_metal_albedo,
    get_metal_fuzz,
    scatter_metal,
)


class MaterialType(IntEnum):
    """Tag stored per material ID; selects the branch taken by scatter()."""

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


# Maximum number of materials across all types
MAX_MATERIALS = 3072

# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the type-local index for material_id i
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def register_material(material_type: MaterialType, type_index: int) -> int:
    """Assign a unified material ID to an entry of a type registry.

    Args:
        material_type: The tag of the material.
        type_index: The index returned by the type's ``add_*_material``.

    Returns:
        The new unified material ID.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    material_id = num_materials[None]
    if material_id >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_types[material_id] = int(material_type)
    material_type_indices[material_id] = type_index
    num_materials[None] = material_id + 1
    return material_id


def get_material_count() -> int:
    """Get the number of registered materials of all types."""
    return int(num_materials[None])


def clear_materials() -> None:
    """Clear every material registry and the unified ID table."""
    clear_lambertian_materials()
    clear_metal_materials()
    clear_dielectric_materials()
    num_materials[None] = 0


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material tag for a material ID, or -1 if the ID is invalid."""
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the type-local registry index for a material ID, or -1 if invalid."""
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result


@ti.func
def scatter(ray_in: Ray, rec: HitRecord):
    """Ask the material at a hit point whether and how the path continues.

    The scattered ray always starts at ``rec.p``, so only its direction is
    returned.

    Args:
        ray_in: The incoming ray.
        rec: The hit record (must have ``hit == 1``).

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where
        ``did_scatter == 0`` means the material absorbed the path. Unknown
        material IDs absorb.
    """
    mat_type = get_material_type(rec.material_id)
    type_index = get_material_type_index(rec.material_id)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0

    if mat_type == int(MaterialType.LAMBERTIAN):
        albedo = get_lambertian_albedo(type_index)
        scattered_direction, attenuation, did_scatter = scatter_lambertian(albedo, rec.normal)

    elif mat_type == int(MaterialType.METAL):
        albedo = get_metal_albedo(type_index)
        fuzz = get_metal_fuzz(type_index)
        scattered_direction, attenuation, did_scatter = scatter_metal(
            albedo, fuzz, ray_in.direction, rec.normal
        )

    elif mat_type == int(MaterialType.DIELECTRIC):
        refractive_index = get_dielectric_index(type_index)
        scattered_direction, attenuation, did_scatter = scatter_dielectric(
            refractive_index, ray_in.direction, rec.normal, rec.front_face
        )

    return scattered_direction, attenuation, did_scatter

"""Materials module: how surfaces scatter light.

Components:
    lambertian: Ideal diffuse reflection
    metal: Mirror reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance
    material: Material tags, the unified material table and scatter dispatch

Each variant provides a scatter function returning
``(scattered_direction, attenuation, did_scatter)`` and a registry of
parameters stored in Taichi fields.
"""

from .dielectric import (
    add_dielectric_material,
    cannot_refract,
    clear_dielectric_materials,
    get_dielectric_index,
    get_dielectric_material_count,
    refraction_ratio,
    scatter_dielectric,
)
from .lambertian import (
    add_lambertian_material,
    clear_lambertian_materials,
    get_lambertian_albedo,
    get_lambertian_material_count,
    scatter_lambertian,
    validate_albedo,
)
from .material import (
    MAX_MATERIALS,
    MaterialType,
    clear_materials,
    get_material_count,
    get_material_type,
    get_material_type_index,
    register_material,
    scatter,
)
from .metal import (
    add_metal_material,
    clear_metal_materials,
    get_metal_albedo,
    get_metal_fuzz,
    get_metal_material_count,
    scatter_metal,
)

__all__ = [
    # Lambertian
    "add_lambertian_material",
    "clear_lambertian_materials",
    "get_lambertian_albedo",
    "get_lambertian_material_count",
    "scatter_lambertian",
    "validate_albedo",
    # Metal
    "add_metal_material",
    "clear_metal_materials",
    "get_metal_albedo",
    "get_metal_fuzz",
    "get_metal_material_count",
    "scatter_metal",
    # Dielectric
    "add_dielectric_material",
    "cannot_refract",
    "clear_dielectric_materials",
    "get_dielectric_index",
    "get_dielectric_material_count",
    "refraction_ratio",
    "scatter_dielectric",
    # Dispatch
    "MAX_MATERIALS",
    "MaterialType",
    "clear_materials",
    "get_material_count",
    "get_material_type",
    "get_material_type_index",
    "register_material",
    "scatter",
]

"""Materials module for light scattering.

Components:
    lambertian: Ideal diffuse reflection
    metal: Mirror reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance
    material: Material arena and the scatter() dispatch

Each variant has a frozen host-side dataclass that validates its parameters
and a Taichi scatter function. All scatter functions take and return the
random generator state explicitly.
"""

from .dielectric import Dielectric, refraction_ratio_for, scatter_dielectric
from .lambertian import Lambertian, scatter_lambertian
from .material import (
    DEFAULT_MATERIAL,
    DEFAULT_MATERIAL_ID,
    MAX_MATERIALS,
    Material,
    MaterialType,
    clear_materials,
    get_material_count,
    material_type_of,
    scatter,
    upload_materials,
)
from .metal import MAX_FUZZ, Metal, scatter_metal

__all__ = [
    # Variants
    "Lambertian",
    "Metal",
    "Dielectric",
    "Material",
    "MaterialType",
    # Scatter functions
    "scatter",
    "scatter_lambertian",
    "scatter_metal",
    "scatter_dielectric",
    "refraction_ratio_for",
    # Arena
    "upload_materials",
    "clear_materials",
    "get_material_count",
    "material_type_of",
    "DEFAULT_MATERIAL",
    "DEFAULT_MATERIAL_ID",
    "MAX_MATERIALS",
    "MAX_FUZZ",
]

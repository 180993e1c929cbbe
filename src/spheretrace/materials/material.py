"""Material arena and scatter dispatch.

Materials form a closed set of variants (Lambertian, Metal, Dielectric). On
the host they are frozen dataclasses; on the device they live in a single
structure-of-arrays arena addressed by integer handle:

    material_types[id]    -> MaterialType tag
    material_albedos[id]  -> albedo (Lambertian, Metal)
    material_fuzz[id]     -> fuzz (Metal)
    material_iors[id]     -> index of refraction (Dielectric)

scatter() switches on the tag and calls the matching per-type routine, so the
integrator never needs to know which variants exist.

Example:
    >>> from spheretrace.materials.material import upload_materials
    >>> upload_materials([Lambertian((0.5, 0.5, 0.5)), Dielectric(1.5)])
    >>> # Within a Taichi kernel:
    >>> # direction, attenuation, did_scatter, rng = scatter(
    >>> #     material_id, incident_dir, normal, front_face, rng
    >>> # )
"""

from collections.abc import Sequence
from enum import IntEnum

import numpy as np
import taichi as ti
import taichi.math as tm

from spheretrace.materials.dielectric import Dielectric, scatter_dielectric
from spheretrace.materials.lambertian import Lambertian, scatter_lambertian
from spheretrace.materials.metal import Metal, scatter_metal

# Type alias for 3D vectors
vec3 = tm.vec3

Material = Lambertian | Metal | Dielectric


class MaterialType(IntEnum):
    """Tag identifying which scatter routine a material uses."""

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


# Handle 0 always resolves; spheres added without a material use it
DEFAULT_MATERIAL_ID = 0
DEFAULT_MATERIAL = Lambertian(albedo=(0.5, 0.5, 0.5))

# Maximum number of materials in the arena
MAX_MATERIALS = 1024

material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_fuzz = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_iors = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def material_type_of(material: Material) -> MaterialType:
    """Return the tag for a host-side material value.

    Raises:
        TypeError: If material is not one of the supported variants.
    """
    if isinstance(material, Lambertian):
        return MaterialType.LAMBERTIAN
    if isinstance(material, Metal):
        return MaterialType.METAL
    if isinstance(material, Dielectric):
        return MaterialType.DIELECTRIC
    raise TypeError(f"Unsupported material: {material!r}")


def clear_materials() -> None:
    """Reset the device arena to empty."""
    num_materials[None] = 0


def upload_materials(materials: Sequence[Material]) -> None:
    """Write a list of materials into the device arena.

    Index i of the sequence becomes material handle i.

    Raises:
        RuntimeError: If the list exceeds MAX_MATERIALS.
        TypeError: If an entry is not a supported material.
    """
    count = len(materials)
    if count > MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    types = np.zeros(MAX_MATERIALS, dtype=np.int32)
    albedos = np.zeros((MAX_MATERIALS, 3), dtype=np.float32)
    fuzz = np.zeros(MAX_MATERIALS, dtype=np.float32)
    iors = np.ones(MAX_MATERIALS, dtype=np.float32)

    for i, material in enumerate(materials):
        types[i] = int(material_type_of(material))
        if isinstance(material, (Lambertian, Metal)):
            albedos[i] = material.albedo
        if isinstance(material, Metal):
            fuzz[i] = material.fuzz
        if isinstance(material, Dielectric):
            iors[i] = material.ior

    material_types.from_numpy(types)
    material_albedos.from_numpy(albedos)
    material_fuzz.from_numpy(fuzz)
    material_iors.from_numpy(iors)
    num_materials[None] = count


def get_material_count() -> int:
    """Get the number of materials currently in the device arena."""
    return int(num_materials[None])


@ti.func
def scatter(
    material_id: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
    rng: ti.u32,
):
    """Scatter a ray off the material with the given handle.

    Args:
        material_id: Handle into the material arena.
        incident_direction: The incoming ray direction.
        normal: The unit surface normal, facing the ray.
        front_face: 1 if the ray hit the outer surface, 0 otherwise.
        rng: Generator state.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter, next_rng).
        did_scatter is 0 when the ray is absorbed.
    """
    mat_type = material_types[material_id]

    scattered_direction = vec3(0.0, 0.0, 0.0)
    attenuation = vec3(0.0, 0.0, 0.0)
    did_scatter = 0
    next_rng = rng

    if mat_type == int(MaterialType.LAMBERTIAN):
        scattered_direction, attenuation, next_rng = scatter_lambertian(
            material_albedos[material_id], normal, rng
        )
        did_scatter = 1

    elif mat_type == int(MaterialType.METAL):
        scattered_direction, attenuation, did_scatter, next_rng = scatter_metal(
            material_albedos[material_id],
            material_fuzz[material_id],
            incident_direction,
            normal,
            rng,
        )

    elif mat_type == int(MaterialType.DIELECTRIC):
        scattered_direction, attenuation, did_scatter, next_rng = scatter_dielectric(
            material_iors[material_id], incident_direction, normal, front_face, rng
        )

    return scattered_direction, attenuation, did_scatter, next_rng

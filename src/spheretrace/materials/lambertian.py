"""Lambertian (ideal diffuse) material implementation.

A Lambertian surface scatters light in all directions above the surface with
a cosine-weighted distribution. The scattered direction is built as

    direction = normal + random_unit_vector()

which samples the cosine lobe without a rejection loop. Because the sampling
density matches the BRDF, the per-bounce weight collapses to the albedo.

Example:
    >>> from spheretrace.materials.lambertian import Lambertian
    >>> grey = Lambertian(albedo=(0.5, 0.5, 0.5))
    >>> # Within a Taichi kernel:
    >>> # direction, attenuation, rng = scatter_lambertian(albedo, normal, rng)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import near_zero
from spheretrace.core.sampler import random_unit_vector

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class Lambertian:
    """Lambertian (ideal diffuse) material properties.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).

    Raises:
        ValueError: If any albedo component is outside [0, 1].
    """

    albedo: tuple[float, float, float]

    def __post_init__(self) -> None:
        if len(self.albedo) != 3:
            raise ValueError(f"Albedo must have 3 components, got {len(self.albedo)}")
        for i, component in enumerate(self.albedo):
            if not 0.0 <= component <= 1.0:
                raise ValueError(
                    f"Albedo component {i} = {component} is outside [0, 1]. "
                    "This would violate energy conservation."
                )
        object.__setattr__(self, "albedo", tuple(float(c) for c in self.albedo))


@ti.func
def scatter_lambertian(albedo: vec3, normal: vec3, rng: ti.u32):
    """Sample a scattered direction for a Lambertian surface.

    If the random unit vector nearly cancels the normal the scattered
    direction falls back to the normal itself so the next ray is never
    degenerate.

    Args:
        albedo: The diffuse reflectance color (RGB).
        normal: The unit surface normal at the hit point, facing the ray.
        rng: Generator state.

    Returns:
        A tuple of (scattered_direction, attenuation, next_rng). The
        direction is not normalized; the attenuation equals the albedo.
    """
    offset, next_rng = random_unit_vector(rng)
    scattered_direction = normal + offset

    if near_zero(scattered_direction):
        scattered_direction = normal

    return scattered_direction, albedo, next_rng

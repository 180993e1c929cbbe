"""Metal (specular reflective) material implementation.

Metals mirror the incoming ray about the surface normal:

    R = I - 2(I . N)N

A fuzz parameter perturbs the mirror direction by a random unit vector scaled
by fuzz, blurring the reflection. Perturbed rays that end up pointing into the
surface are absorbed.

Example:
    >>> from spheretrace.materials.metal import Metal
    >>> gold = Metal(albedo=(0.8, 0.6, 0.2), fuzz=0.3)
    >>> # Within a Taichi kernel:
    >>> # direction, attenuation, did_scatter, rng = scatter_metal(
    >>> #     albedo, fuzz, incident_dir, normal, rng
    >>> # )
"""

import logging
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import normalize, reflect
from spheretrace.core.sampler import random_unit_vector

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Fuzz values above this are clamped
MAX_FUZZ = 1.0


@dataclass(frozen=True)
class Metal:
    """Metal (specular reflective) material properties.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: Reflection blur. 0 is a perfect mirror; values above 1 are
            clamped to 1.

    Raises:
        ValueError: If any albedo component is outside [0, 1] or fuzz is
            negative.
    """

    albedo: tuple[float, float, float]
    fuzz: float = 0.0

    def __post_init__(self) -> None:
        if len(self.albedo) != 3:
            raise ValueError(f"Albedo must have 3 components, got {len(self.albedo)}")
        for i, component in enumerate(self.albedo):
            if not 0.0 <= component <= 1.0:
                raise ValueError(
                    f"Albedo component {i} = {component} is outside [0, 1]. "
                    "This would violate energy conservation."
                )
        if not self.fuzz >= 0.0:
            raise ValueError(f"Fuzz = {self.fuzz} must be non-negative.")
        if self.fuzz > MAX_FUZZ:
            logger.warning("Metal fuzz %.3f clamped to %.1f", self.fuzz, MAX_FUZZ)
            object.__setattr__(self, "fuzz", MAX_FUZZ)
        object.__setattr__(self, "albedo", tuple(float(c) for c in self.albedo))
        object.__setattr__(self, "fuzz", float(self.fuzz))


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzz: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    rng: ti.u32,
):
    """Compute the scattered ray direction for a metal surface.

    Args:
        albedo: The reflective color (RGB).
        fuzz: Reflection blur in [0, 1].
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal, facing the ray.
        rng: Generator state.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter, next_rng)
        where did_scatter is 0 if the fuzzed direction points below the
        surface and the ray is absorbed.
    """
    reflected = reflect(normalize(incident_direction), normal)
    offset, next_rng = random_unit_vector(rng)
    scattered_direction = reflected + fuzz * offset

    did_scatter = 1
    if tm.dot(scattered_direction, normal) <= 0.0:
        did_scatter = 0

    return scattered_direction, albedo, did_scatter, next_rng

"""Dielectric (glass/water) material implementation.

Dielectrics either reflect or refract an incoming ray:

    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Total internal reflection when the refracted sine would exceed 1
    - Schlick's approximation for the reflect/refract probability

The medium does not absorb light, so the attenuation is always white.

Example:
    >>> from spheretrace.materials.dielectric import Dielectric
    >>> glass = Dielectric(ior=1.5)
    >>> # Within a Taichi kernel:
    >>> # direction, attenuation, did_scatter, rng = scatter_dielectric(
    >>> #     ior, incident_dir, normal, front_face, rng
    >>> # )
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from spheretrace.core.ray import normalize, reflect, refract, schlick_reflectance
from spheretrace.core.sampler import random_f32

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass(frozen=True)
class Dielectric:
    """Dielectric (glass/water) material properties.

    Attributes:
        ior: Index of refraction. Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
            Values below 1 model a bubble of a thinner medium.

    Raises:
        ValueError: If ior is not a positive finite number.
    """

    ior: float = 1.5

    def __post_init__(self) -> None:
        if not (math.isfinite(self.ior) and self.ior > 0.0):
            raise ValueError(f"Index of refraction = {self.ior} must be positive.")
        object.__setattr__(self, "ior", float(self.ior))


@ti.func
def refraction_ratio_for(ior: ti.f32, front_face: ti.i32) -> ti.f32:
    """Return eta_incident / eta_transmitted for a hit on this surface.

    Entering the medium (front face) gives 1/ior, leaving it gives ior.
    """
    ratio = 1.0 / ior
    if front_face == 0:
        ratio = ior
    return ratio


@ti.func
def scatter_dielectric(
    ior: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
    rng: ti.u32,
):
    """Compute the scattered ray direction for a dielectric surface.

    Args:
        ior: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal, facing the ray.
        front_face: 1 if the ray hits the outside of the surface,
            0 if it travels inside the material.
        rng: Generator state.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter, next_rng).
        did_scatter is always 1 and attenuation is always white.
    """
    attenuation = vec3(1.0, 1.0, 1.0)
    refraction_ratio = refraction_ratio_for(ior, front_face)

    unit_direction = normalize(incident_direction)
    cos_theta = tm.min(tm.dot(-unit_direction, normal), 1.0)
    sin_theta = tm.sqrt(1.0 - cos_theta * cos_theta)

    cannot_refract = refraction_ratio * sin_theta > 1.0
    u, next_rng = random_f32(rng)

    scattered_direction = vec3(0.0, 0.0, 0.0)
    if cannot_refract or u < schlick_reflectance(cos_theta, refraction_ratio):
        scattered_direction = reflect(unit_direction, normal)
    else:
        scattered_direction = refract(unit_direction, normal, refraction_ratio)

    return scattered_direction, attenuation, 1, next_rng

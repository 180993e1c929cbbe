"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and vector utilities
    sampler: Explicitly threaded PCG random streams
    integrator: Light transport, RenderSettings and the Renderer
    progressive: Multi-pass accumulation on top of the Renderer

All compute-intensive operations use Taichi kernels for GPU acceleration.
"""

from .ray import (
    NEAR_ZERO_EPSILON,
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    ray_at,
    reflect,
    refract,
    schlick_reflectance,
    vec3,
)
from .sampler import pcg_hash, random_f32, random_range, random_unit_vector, seed_rng

# Note: integrator and progressive are NOT imported here to avoid circular imports.
# Import directly from spheretrace.core.integrator or spheretrace.core.progressive.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "refract",
    "schlick_reflectance",
    "near_zero",
    "NEAR_ZERO_EPSILON",
    "pcg_hash",
    "seed_rng",
    "random_f32",
    "random_range",
    "random_unit_vector",
]

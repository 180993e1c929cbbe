"""Explicit random number generation for Monte Carlo sampling.

Random state is a 32-bit PCG word that is threaded through every function
that consumes randomness: each call takes the current state and returns the
advanced one alongside its sample. Nothing here touches global state, so a
render is reproducible for a fixed seed and independent pixels never share a
stream, regardless of how Taichi schedules them across threads.

Example:
    >>> @ti.kernel
    ... def sample() -> ti.f32:
    ...     rng = seed_rng(42, 0, 0)
    ...     u, rng = random_f32(rng)
    ...     return u
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3

# PCG-RXS-M-XS constants
_PCG_MULTIPLIER = 747796405
# 2891336453, kept as its i32 bit pattern so the literal fits Taichi's default int
_PCG_INCREMENT = 2891336453 - (1 << 32)
_PCG_OUTPUT_MULTIPLIER = 277803737

# 2^-24: maps the top 24 bits of a word onto [0, 1)
_INV_2_POW_24 = 1.0 / 16777216.0


@ti.func
def _pcg_step(state: ti.u32) -> ti.u32:
    return state * ti.cast(_PCG_MULTIPLIER, ti.u32) + ti.cast(_PCG_INCREMENT, ti.u32)


@ti.func
def _pcg_output(state: ti.u32) -> ti.u32:
    shift = (state >> ti.cast(28, ti.u32)) + ti.cast(4, ti.u32)
    word = ((state >> shift) ^ state) * ti.cast(_PCG_OUTPUT_MULTIPLIER, ti.u32)
    return (word >> ti.cast(22, ti.u32)) ^ word


@ti.func
def pcg_hash(value: ti.u32) -> ti.u32:
    """Hash a 32-bit word with one PCG round."""
    return _pcg_output(_pcg_step(value))


@ti.func
def seed_rng(seed: ti.i32, stream: ti.i32, sequence: ti.i32) -> ti.u32:
    """Derive an independent generator state.

    Args:
        seed: The user-facing render seed.
        stream: Stream selector, typically the linear pixel index.
        sequence: Second selector, typically the render pass index.

    Returns:
        An initial generator state for random_f32().
    """
    h = pcg_hash(ti.cast(seed, ti.u32))
    h = pcg_hash(h ^ ti.cast(stream, ti.u32))
    h = pcg_hash(h ^ ti.cast(sequence, ti.u32))
    return h


@ti.func
def random_f32(rng: ti.u32):
    """Draw a uniform float in [0, 1).

    Returns:
        A tuple (value, next_rng).
    """
    next_rng = _pcg_step(rng)
    word = _pcg_output(next_rng)
    value = ti.cast(word >> ti.cast(8, ti.u32), ti.f32) * _INV_2_POW_24
    return value, next_rng


@ti.func
def random_range(rng: ti.u32, lo: ti.f32, hi: ti.f32):
    """Draw a uniform float in [lo, hi).

    Returns:
        A tuple (value, next_rng).
    """
    u, next_rng = random_f32(rng)
    return lo + (hi - lo) * u, next_rng


@ti.func
def random_unit_vector(rng: ti.u32):
    """Draw a direction uniformly distributed on the unit sphere.

    Uses the inverse-CDF construction (uniform z, uniform azimuth) so it
    never needs a rejection loop.

    Returns:
        A tuple (unit_vector, next_rng).
    """
    u1, rng1 = random_f32(rng)
    u2, rng2 = random_f32(rng1)
    z = 1.0 - 2.0 * u1
    r = ti.sqrt(ti.max(0.0, 1.0 - z * z))
    phi = 2.0 * tm.pi * u2
    return vec3(r * ti.cos(phi), r * ti.sin(phi), z), rng2

"""Unit tests for metal (specular reflective) material.

Tests cover:
- Host-side validation of albedo and fuzz
- Fuzz clamping with a logged warning
- Perfect mirror reflection
- Absorption of rays fuzzed below the surface
"""

import logging

import numpy as np
import pytest
import taichi as ti


class TestMetalMaterial:
    def test_defaults_to_mirror(self):
        from spheretrace.materials.metal import Metal

        mat = Metal(albedo=(0.8, 0.8, 0.8))
        assert mat.fuzz == 0.0

    def test_rejects_negative_fuzz(self):
        from spheretrace.materials.metal import Metal

        with pytest.raises(ValueError):
            Metal(albedo=(0.8, 0.8, 0.8), fuzz=-0.1)

    def test_rejects_nan_fuzz(self):
        from spheretrace.materials.metal import Metal

        with pytest.raises(ValueError):
            Metal(albedo=(0.8, 0.8, 0.8), fuzz=float("nan"))

    def test_rejects_bad_albedo(self):
        from spheretrace.materials.metal import Metal

        with pytest.raises(ValueError):
            Metal(albedo=(0.8, 1.5, 0.8))

    def test_clamps_large_fuzz_with_warning(self, caplog):
        from spheretrace.materials.metal import MAX_FUZZ, Metal

        with caplog.at_level(logging.WARNING, logger="spheretrace.materials.metal"):
            mat = Metal(albedo=(0.8, 0.8, 0.8), fuzz=3.0)

        assert mat.fuzz == MAX_FUZZ
        assert any("clamped" in record.getMessage() for record in caplog.records)


class TestScatterMetal:
    def test_mirror_reflection(self):
        """Test fuzz 0 reflects the normalized incident direction exactly."""
        from spheretrace.core.sampler import seed_rng
        from spheretrace.materials.metal import scatter_metal, vec3

        direction = ti.field(dtype=ti.math.vec3, shape=())
        attenuation = ti.field(dtype=ti.math.vec3, shape=())
        did_scatter = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            d, a, s, _ = scatter_metal(
                vec3(0.9, 0.8, 0.7),
                0.0,
                vec3(2.0, -2.0, 0.0),
                vec3(0.0, 1.0, 0.0),
                seed_rng(0, 0, 0),
            )
            direction[None] = d
            attenuation[None] = a
            did_scatter[None] = s

        test_kernel()
        inv_sqrt2 = 1.0 / np.sqrt(2.0)
        assert np.allclose(direction[None].to_numpy(), [inv_sqrt2, inv_sqrt2, 0.0], atol=1e-5)
        assert np.allclose(attenuation[None].to_numpy(), [0.9, 0.8, 0.7], atol=1e-6)
        assert did_scatter[None] == 1

    def test_fuzzed_directions_absorbed_below_surface(self):
        """Test every kept direction is above the surface and some grazing ones are absorbed."""
        from spheretrace.core.sampler import seed_rng
        from spheretrace.materials.metal import scatter_metal, vec3

        n = 2048
        directions = ti.field(dtype=ti.math.vec3, shape=n)
        scattered = ti.field(dtype=ti.i32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                # Grazing incidence with full fuzz
                d, _, s, _ = scatter_metal(
                    vec3(1.0, 1.0, 1.0),
                    1.0,
                    vec3(1.0, -0.05, 0.0),
                    vec3(0.0, 1.0, 0.0),
                    seed_rng(3, i, 0),
                )
                directions[i] = d
                scattered[i] = s

        test_kernel()
        d = directions.to_numpy()
        s = scattered.to_numpy()
        assert np.all(d[s == 1][:, 1] > 0.0)
        assert np.all(d[s == 0][:, 1] <= 0.0)
        assert 0 < s.sum() < n

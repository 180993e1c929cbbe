"""Integration tests for end-to-end rendering pipeline.

This module tests the complete rendering pipeline from scene creation through
final image output. Tests are designed to be fast (low resolution, few
samples) while still exercising the full pipeline.

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

import importlib.util
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

EXAMPLE_SCRIPT = Path(__file__).resolve().parent.parent / "examples" / "render_spheres.py"


def _load_example():
    spec = importlib.util.spec_from_file_location("render_spheres", EXAMPLE_SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestShowcaseIntegration:
    """End-to-end renders of the material showcase."""

    def test_renders_and_saves(self, tmp_path):
        from spheretrace.core.integrator import Renderer, RenderSettings
        from spheretrace.scene.presets import create_material_showcase_scene

        settings = RenderSettings(width=32, height=18, samples_per_pixel=4, max_depth=10)
        scene, camera = create_material_showcase_scene()
        camera.aspect_ratio = settings.aspect_ratio

        renderer = Renderer(settings)
        assert renderer.render(scene, camera)

        path = tmp_path / "out.ppm"
        renderer.save_ppm(path)
        lines = path.read_text().splitlines()
        assert lines[:3] == ["P3", "32 18", "255"]
        assert len(lines) == 3 + 32 * 18
        values = [int(v) for line in lines[3:] for v in line.split()]
        assert all(0 <= v <= 255 for v in values)

    def test_no_nan_or_negative(self):
        from spheretrace.core.integrator import Renderer, RenderSettings
        from spheretrace.scene.presets import create_material_showcase_scene

        settings = RenderSettings(width=24, height=12, samples_per_pixel=8, max_depth=20, seed=5)
        scene, camera = create_material_showcase_scene()
        camera.aspect_ratio = settings.aspect_ratio

        renderer = Renderer(settings)
        renderer.render(scene, camera)
        pixels = renderer.pixels_numpy()
        assert not np.any(np.isnan(pixels))
        assert not np.any(np.isinf(pixels))
        assert np.all(pixels >= 0.0)
        assert np.any(pixels > 0.0)

    def test_ground_darker_than_sky(self):
        from spheretrace.core.integrator import Renderer, RenderSettings
        from spheretrace.scene.presets import create_single_sphere_scene

        settings = RenderSettings(width=32, height=18, samples_per_pixel=8, max_depth=10)
        scene, camera = create_single_sphere_scene(settings.aspect_ratio, with_ground=True)

        renderer = Renderer(settings)
        renderer.render(scene, camera)
        rgb8 = renderer.to_rgb8().astype(int)
        top = rgb8[0].mean()
        bottom = rgb8[-1].mean()
        assert bottom < top


class TestExampleScript:
    """The render_spheres example as a user would run it."""

    def test_render_spheres_writes_files(self, tmp_path):
        example = _load_example()
        ppm = tmp_path / "render.ppm"
        png = tmp_path / "render.png"

        output = example.render_spheres(
            width=16,
            height=9,
            samples=2,
            max_depth=4,
            scene_name="single",
            output_path=str(ppm),
            png_path=str(png),
        )

        assert output == ppm
        assert ppm.read_text().startswith("P3\n16 9\n255\n")
        with Image.open(png) as img:
            assert img.size == (16, 9)

    def test_parse_args_defaults(self):
        example = _load_example()
        args = example.parse_args([])
        assert (args.width, args.height) == (1280, 720)
        assert args.samples == 100
        assert args.max_depth == 50
        assert args.output == "./out.ppm"
        assert args.scene == "showcase"

    def test_parse_args_rejects_unknown_scene(self):
        example = _load_example()
        with pytest.raises(SystemExit):
            example.parse_args(["--scene", "teapot"])

    def test_invalid_settings_reported(self, tmp_path):
        from spheretrace.core.integrator import RenderSettings

        with pytest.raises(ValueError):
            RenderSettings(width=0)

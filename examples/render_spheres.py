#!/usr/bin/env python3
"""Render a sphere scene to a PPM (and optionally PNG) file.

This script demonstrates end-to-end rendering with spheretrace. It builds one
of the preset scenes, renders it and writes the tone-mapped result.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH         Image width in pixels (default: 1280)
    --height HEIGHT       Image height in pixels (default: 720)
    --samples SAMPLES     Samples per pixel (default: 100)
    --max-depth DEPTH     Maximum bounces per path (default: 50)
    --seed SEED           Random seed (default: 0)
    --scene NAME          "single" or "showcase" (default: showcase)
    --output OUTPUT       PPM output path (default: ./out.ppm)
    --png PNG             Also write a PNG to this path
    --cpu                 Use the CPU backend even if a GPU is available
    --quiet               Only log warnings and errors

Example:
    python -m examples.render_spheres --width 400 --height 225 --samples 20
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_spheres")

SCENES = ("single", "showcase")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a sphere scene with the spheretrace path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=1280, help="Image width in pixels (default: 1280)")
    parser.add_argument("--height", type=int, default=720, help="Image height in pixels (default: 720)")
    parser.add_argument("--samples", type=int, default=100, help="Samples per pixel (default: 100)")
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum bounces per path (default: 50)",
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    parser.add_argument(
        "--scene",
        choices=SCENES,
        default="showcase",
        help="Scene to render (default: showcase)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="./out.ppm",
        help="PPM output path (default: ./out.ppm)",
    )
    parser.add_argument("--png", type=str, default=None, help="Also write a PNG to this path")
    parser.add_argument("--cpu", action="store_true", help="Force the CPU backend")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    return parser.parse_args(argv)


def render_spheres(
    width: int = 1280,
    height: int = 720,
    samples: int = 100,
    max_depth: int = 50,
    seed: int = 0,
    scene_name: str = "showcase",
    output_path: str = "./out.ppm",
    png_path: str | None = None,
) -> Path:
    """Render a preset scene and save it.

    Returns:
        Path to the saved PPM file.
    """
    # Lazy imports to allow Taichi initialization first
    from spheretrace.core.integrator import Renderer, RenderSettings
    from spheretrace.scene.presets import (
        create_material_showcase_scene,
        create_single_sphere_scene,
    )

    settings = RenderSettings(
        width=width,
        height=height,
        samples_per_pixel=samples,
        max_depth=max_depth,
        seed=seed,
    )

    logger.info("Creating %s scene (%dx%d)", scene_name, width, height)
    if scene_name == "single":
        scene, camera = create_single_sphere_scene(settings.aspect_ratio, with_ground=True)
    else:
        scene, camera = create_material_showcase_scene()
        camera.aspect_ratio = settings.aspect_ratio

    renderer = Renderer(settings)
    renderer.render(scene, camera)

    output_file = Path(output_path)
    renderer.save_ppm(output_file)
    if png_path is not None:
        renderer.save_png(png_path)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        try:
            ti.init(arch=ti.gpu)
            logger.info("Using GPU backend")
        except Exception:
            logger.info("GPU backend unavailable, using CPU backend")
            ti.init(arch=ti.cpu)

    try:
        output = render_spheres(
            width=args.width,
            height=args.height,
            samples=args.samples,
            max_depth=args.max_depth,
            seed=args.seed,
            scene_name=args.scene,
            output_path=args.output,
            png_path=args.png,
        )
    except (OSError, ValueError, RuntimeError) as e:
        logger.error("Render failed: %s", e)
        return 1

    logger.info("Saved to: %s", output.absolute())
    return 0


if __name__ == "__main__":
    sys.exit(main())

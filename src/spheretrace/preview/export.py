"""Image export utilities for rendered images.

This module writes tone-mapped renders to disk.

Supported formats:
    - PPM (plain-text P3, 8-bit)
    - PNG (8-bit via Pillow)

Both formats are written from the same tone-mapped bytes. Exporting only reads
the renderer's buffer, so rendering can continue afterwards.

Example:
    >>> from spheretrace.preview.export import save_ppm, save_png
    >>> from spheretrace.core.integrator import Renderer
    >>>
    >>> renderer = Renderer()
    >>> renderer.render(scene, camera)
    >>> save_ppm(renderer, "out.ppm")
    >>> save_png(renderer, "out.png")
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from spheretrace.core.integrator import Renderer

logger = logging.getLogger(__name__)

# Output file written by the example CLI when no path is given
DEFAULT_PPM_PATH = "./out.ppm"

PathLike = str | os.PathLike[str]


def _check_rgb8(rgb8: npt.NDArray[np.uint8]) -> None:
    if rgb8.ndim != 3 or rgb8.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {rgb8.shape}")


def format_ppm(rgb8: npt.NDArray[np.uint8]) -> str:
    """Format an 8-bit image as plain-text P3 PPM.

    The header is "P3", the dimensions as "<width> <height>" and the maximum
    value 255, each on its own line. One "r g b" line per pixel follows in
    row-major order, top row first.

    Args:
        rgb8: Image array of shape (height, width, 3).

    Returns:
        The complete PPM document.
    """
    _check_rgb8(rgb8)
    height, width = rgb8.shape[:2]

    lines = [f"P3\n{width} {height}\n255\n"]
    for r, g, b in rgb8.reshape(-1, 3).tolist():
        lines.append(f"{r} {g} {b}\n")
    return "".join(lines)


def write_ppm(rgb8: npt.NDArray[np.uint8], path: PathLike = DEFAULT_PPM_PATH) -> None:
    """Write an 8-bit image to a P3 PPM file.

    Raises:
        OSError: If the file cannot be written.
    """
    document = format_ppm(rgb8)
    with open(path, "w", encoding="ascii", newline="\n") as f:
        f.write(document)
    logger.info("Wrote %dx%d PPM to %s", rgb8.shape[1], rgb8.shape[0], path)


def write_png(rgb8: npt.NDArray[np.uint8], path: PathLike) -> None:
    """Write an 8-bit image to a PNG file using Pillow.

    Raises:
        OSError: If the file cannot be written.
    """
    _check_rgb8(rgb8)
    pil_image = PILImage.fromarray(np.ascontiguousarray(rgb8))
    pil_image.save(path, format="PNG")
    logger.info("Wrote %dx%d PNG to %s", rgb8.shape[1], rgb8.shape[0], path)


def save_ppm(renderer: Renderer, path: PathLike = DEFAULT_PPM_PATH) -> None:
    """Save the renderer's current image as a P3 PPM file.

    Args:
        renderer: Any object with a to_rgb8() method (Renderer or
            ProgressiveRenderer).
        path: Output file path.

    Raises:
        OSError: If the file cannot be written.
    """
    write_ppm(renderer.to_rgb8(), path)


def save_png(renderer: Renderer, path: PathLike) -> None:
    """Save the renderer's current image as a PNG file.

    Raises:
        OSError: If the file cannot be written.
    """
    write_png(renderer.to_rgb8(), path)

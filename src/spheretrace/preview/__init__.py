"""Preview module for tone mapping and image export.

Components:
    display: Tone mapping from radiance sums to 8-bit color
    export: P3 PPM and PNG writers

Example:
    >>> from spheretrace.preview import save_ppm, save_png
    >>> from spheretrace.core.integrator import Renderer
    >>>
    >>> renderer = Renderer()
    >>> renderer.render(scene, camera)
    >>> save_ppm(renderer, "out.ppm")
    >>> save_png(renderer, "out.png")
"""

from spheretrace.preview.display import MAX_INTENSITY, tone_map, tone_map_pixel
from spheretrace.preview.export import (
    DEFAULT_PPM_PATH,
    format_ppm,
    save_png,
    save_ppm,
    write_png,
    write_ppm,
)

__all__ = [
    # Tone mapping
    "tone_map",
    "tone_map_pixel",
    "MAX_INTENSITY",
    # Export functions
    "format_ppm",
    "write_ppm",
    "write_png",
    "save_ppm",
    "save_png",
    "DEFAULT_PPM_PATH",
]

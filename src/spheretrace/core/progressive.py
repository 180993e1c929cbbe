"""Progressive renderer for iterative sample accumulation.

This module provides a convenient wrapper around the Renderer that supports:
- Progressive rendering that refines over time
- Progress callbacks for UI updates
- Generator-based iteration with a stopping point between passes
- Easy reset and re-render functionality

Each pass adds samples_per_pixel samples to the same buffer, using a fresh
pass index for its random streams.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.core.progressive import ProgressiveRenderer
    >>> from spheretrace.core.integrator import RenderSettings
    >>> from spheretrace.scene.presets import create_material_showcase_scene
    >>>
    >>> scene, camera = create_material_showcase_scene()
    >>> settings = RenderSettings(width=400, height=225, samples_per_pixel=4)
    >>> renderer = ProgressiveRenderer(scene, camera, settings)
    >>> renderer.render(25)  # 100 SPP
    >>> image = renderer.get_image_uint8()
"""

from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from spheretrace.camera.pinhole import Camera
from spheretrace.core.integrator import Renderer, RenderSettings
from spheretrace.preview.export import DEFAULT_PPM_PATH, PathLike
from spheretrace.scene.manager import Scene

# Type alias for progress callback
# Callback receives (current_samples, target_samples)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A progressive renderer that accumulates passes over time.

    Attributes:
        scene: The scene being rendered.
        camera: The camera being rendered from. Changes to it are picked up
            by the next pass; call reset() to drop samples taken with the
            old view.
    """

    def __init__(
        self,
        scene: Scene,
        camera: Camera,
        settings: RenderSettings | None = None,
    ) -> None:
        self.scene = scene
        self.camera = camera
        self._renderer = Renderer(settings)
        self._renderer.clear()

    @property
    def renderer(self) -> Renderer:
        """The underlying single-pass Renderer."""
        return self._renderer

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._renderer.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._renderer.height

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return self._renderer.samples_accumulated

    def reset(self) -> None:
        """Clear the accumulated samples without changing the image size."""
        self._renderer.clear()

    def _render_pass(self) -> None:
        self._renderer.render(self.scene, self.camera, accumulate=True)

    def render(
        self,
        num_passes: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render passes progressively with optional progress callback.

        Accumulates the specified number of passes into the existing buffer.
        Can be called multiple times to continue refining the image.

        Args:
            num_passes: Number of passes to add.
            callback: Optional callback function called after each pass.
                Receives (current_total_samples, target_total_samples).

        Example:
            >>> def progress(current, target):
            ...     print(f"Progress: {current}/{target} samples")
            >>> renderer.render(10, callback=progress)
        """
        for current, target in self.render_progressive(num_passes):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_passes: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Render passes progressively, yielding progress after each one.

        Closing the generator stops rendering after the current pass.

        Args:
            num_passes: Number of passes to add.

        Yields:
            Tuple of (current_total_samples, target_total_samples).

        Example:
            >>> for current, target in renderer.render_progressive(10):
            ...     print(f"Progress: {current}/{target} samples")
            ...     if current >= 64:
            ...         break
        """
        if num_passes <= 0:
            return

        spp = self._renderer.settings.samples_per_pixel
        target_samples = self.sample_count + num_passes * spp

        for _ in range(num_passes):
            self._render_pass()
            yield (self.sample_count, target_samples)

    def pixels_numpy(self) -> npt.NDArray[np.float32]:
        """Get the raw radiance sums as an array of shape (height, width, 3)."""
        return self._renderer.pixels_numpy()

    def to_rgb8(self) -> npt.NDArray[np.uint8]:
        """Tone-map the accumulated image to 8-bit color."""
        return self._renderer.to_rgb8()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an 8-bit NumPy array of shape (H, W, 3)."""
        return self.to_rgb8()

    def save_ppm(self, path: PathLike = DEFAULT_PPM_PATH) -> None:
        """Save the accumulated image as a P3 PPM file."""
        self._renderer.save_ppm(path)

    def save_png(self, path: PathLike) -> None:
        """Save the accumulated image as a PNG file."""
        self._renderer.save_png(path)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count})"
        )

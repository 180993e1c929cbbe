"""Path tracing integrator for Monte Carlo light transport.

This module implements the main rendering kernel: bounded-depth path tracing
of a sphere scene lit only by a procedural sky.

Each camera ray is followed through the scene. At every surface the material
either scatters it, multiplying the path throughput by its attenuation, or
absorbs it. A ray that escapes picks up the sky color scaled by the
throughput. Paths that are absorbed or run out of bounces contribute black.

Key features:
    - Material dispatch (Lambertian, Metal, Dielectric)
    - Jittered supersampling for anti-aliasing
    - Explicit per-pixel random streams, so renders are reproducible
    - Row-chunked passes with cooperative cancellation
    - Progressive accumulation across passes

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.core.integrator import Renderer, RenderSettings
    >>> from spheretrace.scene.presets import create_single_sphere_scene
    >>>
    >>> scene, camera = create_single_sphere_scene()
    >>> renderer = Renderer(RenderSettings(width=320, height=180, samples_per_pixel=16))
    >>> renderer.render(scene, camera)
    True
    >>> renderer.save_ppm("out.ppm")
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from spheretrace.camera.pinhole import Camera, get_ray, setup_camera
from spheretrace.core.ray import Ray, normalize
from spheretrace.core.sampler import random_f32, seed_rng
from spheretrace.materials.material import scatter
from spheretrace.preview.display import tone_map, tone_map_pixel
from spheretrace.preview.export import DEFAULT_PPM_PATH, PathLike, save_png, save_ppm
from spheretrace.scene.intersection import T_MAX, T_MIN, hit_objects
from spheretrace.scene.manager import Scene

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Sky gradient endpoints: horizon (white) to zenith (light blue)
SKY_WHITE = vec3(1.0, 1.0, 1.0)
SKY_BLUE = vec3(0.5, 0.7, 1.0)

# Seeds are passed to the kernels as i32
MAX_SEED = 2**31 - 1

# Called between row chunks; returning True abandons the pass
CancelCallback = Callable[[], bool]


@dataclass(frozen=True)
class RenderSettings:
    """Image size and sampling parameters for a Renderer.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Jittered camera rays traced per pixel per pass.
        max_depth: Maximum number of surface interactions per path. A depth
            of 0 renders black.
        seed: Base seed for the per-pixel random streams, in [0, MAX_SEED].
        rows_per_chunk: Rows rendered per kernel launch. Cancellation is
            checked between chunks.

    Settings are frozen: a Renderer sizes its buffers from them once.

    Raises:
        ValueError: If any field is out of range.
    """

    width: int = 1280
    height: int = 720
    samples_per_pixel: int = 100
    max_depth: int = 50
    seed: int = 0
    rows_per_chunk: int = 64

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Image size {self.width}x{self.height} must be at least 1x1")
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel = {self.samples_per_pixel} must be >= 1")
        if self.max_depth < 0:
            raise ValueError(f"max_depth = {self.max_depth} must be >= 0")
        if self.rows_per_chunk < 1:
            raise ValueError(f"rows_per_chunk = {self.rows_per_chunk} must be >= 1")
        if not isinstance(self.seed, int) or not 0 <= self.seed <= MAX_SEED:
            raise ValueError(f"seed = {self.seed!r} must be an integer in [0, {MAX_SEED}]")

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Background radiance for a ray that leaves the scene.

    Blends linearly from white at the bottom (unit y = -1) to light blue at
    the top (unit y = +1).
    """
    unit_direction = normalize(direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * SKY_WHITE + t * SKY_BLUE


@ti.func
def ray_color(ray: Ray, max_depth: ti.i32, rng: ti.u32):
    """Estimate the radiance arriving along a ray.

    Follows the path for at most max_depth surface interactions, carrying
    the product of attenuations as throughput.

    Args:
        ray: The camera (or scattered) ray.
        max_depth: Remaining bounce budget.
        rng: Generator state.

    Returns:
        A tuple of (color, next_rng).
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    origin = ray.origin
    direction = ray.direction
    next_rng = rng

    # Active flag for path continuation (Taichi doesn't support break in ti.func loops)
    active = 1

    for _ in range(max_depth):
        if active == 1:
            rec = hit_objects(origin, direction, T_MIN, T_MAX)

            if rec.hit == 0:
                color = throughput * sky_color(direction)
                active = 0
            else:
                scattered_direction, attenuation, did_scatter, next_rng = scatter(
                    rec.material_id, direction, rec.normal, rec.front_face, next_rng
                )

                if did_scatter == 0:
                    # Ray was absorbed
                    active = 0
                else:
                    throughput *= attenuation
                    origin = rec.point
                    direction = scattered_direction

    return color, next_rng


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(
    pixels: ti.template(),
    row_start: ti.i32,
    row_end: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples_per_pixel: ti.i32,
    max_depth: ti.i32,
    seed: ti.i32,
    pass_index: ti.i32,
):
    """Write per-pixel radiance sums for rows [row_start, row_end).

    Row 0 is the top of the image. Every pixel derives its own random stream
    from (seed, pixel index, pass index), so the result does not depend on
    which rows share a launch.
    """
    inv_w = 1.0 / ti.cast(ti.max(width - 1, 1), ti.f32)
    inv_h = 1.0 / ti.cast(ti.max(height - 1, 1), ti.f32)

    for y, x in ti.ndrange((row_start, row_end), width):
        rng = seed_rng(seed, y * width + x, pass_index)
        total = vec3(0.0, 0.0, 0.0)

        for _ in range(samples_per_pixel):
            r0, rng = random_f32(rng)
            r1, rng = random_f32(rng)
            s = (ti.cast(x, ti.f32) + r0) * inv_w
            t = 1.0 - (ti.cast(y, ti.f32) + r1) * inv_h

            color, rng = ray_color(get_ray(s, t), max_depth, rng)
            total += color

        pixels[y, x] = total


@ti.kernel
def _commit_pass(src: ti.template(), dst: ti.template(), accumulate: ti.i32):
    for I in ti.grouped(dst):
        if accumulate == 1:
            dst[I] += src[I]
        else:
            dst[I] = src[I]


@ti.kernel
def _fill_gradient(pixels: ti.template(), width: ti.i32, height: ti.i32):
    for y, x in pixels:
        fx = ti.cast(x, ti.f32) / ti.cast(width, ti.f32)
        fy = ti.cast(y, ti.f32) / ti.cast(height, ti.f32)
        pixels[y, x] = vec3(fx * fx, fy * fy, 0.0)


# =============================================================================
# Renderer
# =============================================================================


class Renderer:
    """Renders a scene into an accumulating radiance buffer.

    The buffer holds un-normalized per-channel sums, row-major with row 0 at
    the top. Tone mapping divides by samples_accumulated. Until the first
    pass completes the buffer holds a placeholder gradient.

    Attributes:
        settings: The RenderSettings in use.
    """

    channels = 3

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self.settings = settings if settings is not None else RenderSettings()
        shape = (self.settings.height, self.settings.width)

        # Visible buffer and the per-pass scratch buffer it is committed from
        self._pixels = ti.Vector.field(3, dtype=ti.f32, shape=shape)
        self._scratch = ti.Vector.field(3, dtype=ti.f32, shape=shape)

        self._samples_accumulated = 0
        self._pass_count = 0
        self._show_placeholder()

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples={self.samples_accumulated})"
        )

    def _show_placeholder(self) -> None:
        _fill_gradient(self._pixels, self.width, self.height)
        self._samples_accumulated = 1
        self._pass_count = 0

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.settings.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.settings.height

    @property
    def samples_accumulated(self) -> int:
        """Number of samples per pixel summed into the buffer."""
        return self._samples_accumulated

    @property
    def pass_count(self) -> int:
        """Number of completed passes in the buffer since it was last overwritten."""
        return self._pass_count

    def clear(self) -> None:
        """Zero the buffer and forget all accumulated samples."""
        self._pixels.fill(0.0)
        self._samples_accumulated = 0
        self._pass_count = 0

    def render(
        self,
        scene: Scene,
        camera: Camera,
        *,
        accumulate: bool = False,
        cancel: CancelCallback | None = None,
    ) -> bool:
        """Render one pass of samples_per_pixel samples for every pixel.

        The scene and camera are uploaded first, so any changes made since
        the last pass are picked up. Rows are traced in chunks into a
        scratch buffer; the visible buffer only changes once every chunk is
        done.

        Args:
            scene: The scene to render.
            camera: The camera to render from.
            accumulate: Add this pass to the existing samples instead of
                replacing them.
            cancel: Optional callable checked before each chunk. If it
                returns True the pass is abandoned.

        Returns:
            True if the pass completed, False if it was cancelled. A
            cancelled pass leaves the buffer untouched.

        Raises:
            ValueError: If the camera framing is degenerate.
        """
        s = self.settings
        scene.upload()
        setup_camera(camera)

        accumulate_pass = accumulate and self._pass_count > 0
        pass_index = self._pass_count if accumulate_pass else 0

        logger.info(
            "Rendering %dx%d, %d spp, max depth %d, pass %d",
            s.width,
            s.height,
            s.samples_per_pixel,
            s.max_depth,
            pass_index,
        )
        start = time.perf_counter()

        for row_start in range(0, s.height, s.rows_per_chunk):
            if cancel is not None and cancel():
                logger.info("Render cancelled at row %d/%d", row_start, s.height)
                return False
            row_end = min(row_start + s.rows_per_chunk, s.height)
            logger.debug("Rendering rows %d-%d/%d", row_start, row_end - 1, s.height)
            _render_rows(
                self._scratch,
                row_start,
                row_end,
                s.width,
                s.height,
                s.samples_per_pixel,
                s.max_depth,
                s.seed,
                pass_index,
            )

        _commit_pass(self._scratch, self._pixels, int(accumulate_pass))
        if accumulate_pass:
            self._samples_accumulated += s.samples_per_pixel
            self._pass_count += 1
        else:
            self._samples_accumulated = s.samples_per_pixel
            self._pass_count = 1

        logger.info(
            "Pass finished in %.2fs (%d samples per pixel accumulated)",
            time.perf_counter() - start,
            self._samples_accumulated,
        )
        return True

    # =========================================================================
    # Buffer Access
    # =========================================================================

    def _divisor(self) -> int:
        return max(self._samples_accumulated, 1)

    def pixels_numpy(self) -> npt.NDArray[np.float32]:
        """Get the raw radiance sums as an array of shape (height, width, 3)."""
        return self._pixels.to_numpy()

    def get_pixel_rgb8(self, x: int, y: int) -> tuple[int, int, int]:
        """Tone-mapped color of one pixel, with y = 0 the top row.

        Raises:
            IndexError: If (x, y) lies outside the image.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        value = self._pixels[y, x]
        return tone_map_pixel((value[0], value[1], value[2]), self._divisor())

    def to_rgb8(self) -> npt.NDArray[np.uint8]:
        """Tone-map the whole buffer to an array of shape (height, width, 3)."""
        return tone_map(self.pixels_numpy(), self._divisor())

    def save_ppm(self, path: PathLike = DEFAULT_PPM_PATH) -> None:
        """Write the current image as a P3 PPM file.

        Raises:
            OSError: If the file cannot be written.
        """
        save_ppm(self, path)

    def save_png(self, path: PathLike) -> None:
        """Write the current image as a PNG file.

        Raises:
            OSError: If the file cannot be written.
        """
        save_png(self, path)

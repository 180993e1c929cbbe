"""Pinhole camera model for perspective projection ray generation.

This module implements a pinhole camera that generates primary rays for rendering.
The camera supports:
- Look-at positioning (lookfrom, lookat, vup)
- Vertical field of view specification
- Arbitrary aspect ratios

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The basis is derived lazily. Every property setter marks the camera dirty and
the next call to basis() recomputes it, so a stale basis is never used.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from spheretrace.camera.pinhole import Camera, setup_camera, get_ray
    >>>
    >>> camera = Camera(lookfrom=(0.0, 0.0, 3.0), lookat=(0.0, 0.0, 0.0), vfov=60.0)
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through image center
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from spheretrace.core.ray import Ray, make_ray

# Cross products shorter than this mean vup is parallel to the view direction
_DEGENERATE_EPSILON = 1e-8

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class CameraBasis:
    """Derived viewport geometry for a camera.

    Attributes:
        origin: Eye position.
        u: Right direction.
        v: Up direction.
        w: Backward direction (opposite view direction).
        horizontal: Full viewport width vector.
        vertical: Full viewport height vector.
        lower_left_corner: Lower-left corner of the viewport at unit distance.
    """

    origin: np.ndarray
    u: np.ndarray
    v: np.ndarray
    w: np.ndarray
    horizontal: np.ndarray
    vertical: np.ndarray
    lower_left_corner: np.ndarray


def _as_vector(value, name: str) -> tuple[float, float, float]:
    if len(value) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(value)}")
    vector = (float(value[0]), float(value[1]), float(value[2]))
    if not all(math.isfinite(c) for c in vector):
        raise ValueError(f"{name} = {vector} must be finite")
    return vector


class Camera:
    """A pinhole (perspective) camera.

    Attributes:
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation.
        vfov: Vertical field of view in degrees, in (0, 180).
        aspect_ratio: Width divided by height of the output image.

    Raises:
        ValueError: If the framing is degenerate (eye on the target, vup
            parallel to the view direction, vfov outside (0, 180) or a
            non-positive aspect ratio).
    """

    def __init__(
        self,
        lookfrom: tuple[float, float, float] = (0.0, 0.0, 0.0),
        lookat: tuple[float, float, float] = (0.0, 0.0, -1.0),
        vup: tuple[float, float, float] = (0.0, 1.0, 0.0),
        vfov: float = 90.0,
        aspect_ratio: float = 16.0 / 9.0,
    ) -> None:
        self._lookfrom = _as_vector(lookfrom, "lookfrom")
        self._lookat = _as_vector(lookat, "lookat")
        self._vup = _as_vector(vup, "vup")
        self._vfov = float(vfov)
        self._aspect_ratio = float(aspect_ratio)
        self._basis: CameraBasis | None = None
        self._dirty = True
        self.basis()

    def __repr__(self) -> str:
        return (
            f"Camera(lookfrom={self._lookfrom}, lookat={self._lookat}, vup={self._vup}, "
            f"vfov={self._vfov}, aspect_ratio={self._aspect_ratio})"
        )

    @property
    def lookfrom(self) -> tuple[float, float, float]:
        return self._lookfrom

    @lookfrom.setter
    def lookfrom(self, value: tuple[float, float, float]) -> None:
        self._lookfrom = _as_vector(value, "lookfrom")
        self._dirty = True

    @property
    def lookat(self) -> tuple[float, float, float]:
        return self._lookat

    @lookat.setter
    def lookat(self, value: tuple[float, float, float]) -> None:
        self._lookat = _as_vector(value, "lookat")
        self._dirty = True

    @property
    def vup(self) -> tuple[float, float, float]:
        return self._vup

    @vup.setter
    def vup(self, value: tuple[float, float, float]) -> None:
        self._vup = _as_vector(value, "vup")
        self._dirty = True

    @property
    def vfov(self) -> float:
        return self._vfov

    @vfov.setter
    def vfov(self, value: float) -> None:
        self._vfov = float(value)
        self._dirty = True

    @property
    def aspect_ratio(self) -> float:
        return self._aspect_ratio

    @aspect_ratio.setter
    def aspect_ratio(self, value: float) -> None:
        self._aspect_ratio = float(value)
        self._dirty = True

    @property
    def needs_recompute(self) -> bool:
        """True if a parameter changed since the basis was last derived."""
        return self._dirty

    def basis(self) -> CameraBasis:
        """Return the viewport geometry, recomputing it if the camera is dirty.

        The viewport is a virtual image plane at unit distance from the
        camera. Ray directions are computed by interpolating across it.

        Raises:
            ValueError: If the framing is degenerate.
        """
        if self._dirty or self._basis is None:
            self._basis = self._compute_basis()
            self._dirty = False
        return self._basis

    def _compute_basis(self) -> CameraBasis:
        if not 0.0 < self._vfov < 180.0:
            raise ValueError(f"vfov = {self._vfov} must be in (0, 180) degrees")
        if not (math.isfinite(self._aspect_ratio) and self._aspect_ratio > 0.0):
            raise ValueError(f"aspect_ratio = {self._aspect_ratio} must be positive")

        # Convert FOV from degrees to radians
        theta = math.radians(self._vfov)
        h = math.tan(theta / 2.0)

        # Viewport dimensions at unit distance
        viewport_height = 2.0 * h
        viewport_width = self._aspect_ratio * viewport_height

        lookfrom = np.array(self._lookfrom, dtype=np.float64)
        lookat = np.array(self._lookat, dtype=np.float64)
        vup = np.array(self._vup, dtype=np.float64)

        # w points from lookat toward lookfrom (backward)
        w = lookfrom - lookat
        w_length = np.linalg.norm(w)
        if w_length == 0.0:
            raise ValueError("lookfrom and lookat must be different points")
        w = w / w_length

        # u points right (perpendicular to w and vup)
        u = np.cross(vup, w)
        u_length = np.linalg.norm(u)
        if u_length < _DEGENERATE_EPSILON:
            raise ValueError(f"vup = {self._vup} is parallel to the view direction")
        u = u / u_length

        # v points up in the camera's frame
        v = np.cross(w, u)

        horizontal = viewport_width * u
        vertical = viewport_height * v
        lower_left = lookfrom - horizontal / 2.0 - vertical / 2.0 - w

        return CameraBasis(
            origin=lookfrom,
            u=u,
            v=v,
            w=w,
            horizontal=horizontal,
            vertical=vertical,
            lower_left_corner=lower_left,
        )

    def get_ray(self, s: float, t: float) -> tuple[np.ndarray, np.ndarray]:
        """Build the primary ray through viewport coordinates (s, t).

        s runs left to right and t bottom to top, both in [0, 1]. The
        direction is not normalized.

        Returns:
            Tuple of (origin, direction) as float64 arrays.
        """
        b = self.basis()
        direction = b.lower_left_corner + s * b.horizontal + t * b.vertical - b.origin
        return b.origin.copy(), direction


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Upload the camera's current viewport geometry to Taichi fields.

    Recomputes the basis first if the camera was mutated. Must be called
    from Python (not from within a Taichi kernel) before rendering.

    Raises:
        ValueError: If the framing is degenerate.
    """
    b = camera.basis()
    _camera_origin[None] = b.origin.tolist()
    _viewport_horizontal[None] = b.horizontal.tolist()
    _viewport_vertical[None] = b.vertical.tolist()
    _lower_left_corner[None] = b.lower_left_corner.tolist()


@ti.func
def get_ray(s: ti.f32, t: ti.f32) -> Ray:
    """Generate a ray through viewport coordinates (s, t).

    - s = 0: left edge, s = 1: right edge
    - t = 0: bottom edge, t = 1: top edge

    Args:
        s: Horizontal coordinate in [0, 1].
        t: Vertical coordinate in [0, 1].

    Returns:
        A Ray from the camera origin toward the viewport point. The
        direction is left unnormalized.
    """
    origin = _camera_origin[None]
    direction = (
        _lower_left_corner[None]
        + s * _viewport_horizontal[None]
        + t * _viewport_vertical[None]
        - origin
    )
    return make_ray(origin, direction)


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the uploaded camera state for debugging.

    Returns:
        Dictionary with origin, horizontal, vertical and lower_left.
    """
    info = {}
    for name, field in (
        ("origin", _camera_origin),
        ("horizontal", _viewport_horizontal),
        ("vertical", _viewport_vertical),
        ("lower_left", _lower_left_corner),
    ):
        vec = field[None]
        info[name] = (float(vec[0]), float(vec[1]), float(vec[2]))
    return info

"""Tone mapping from accumulated radiance sums to 8-bit color.

The pixel buffer stores per-channel sums of radiance samples. Turning them
into displayable bytes takes four steps:

    1. Divide by the number of samples
    2. Gamma 2 encode (square root)
    3. Clamp to [0, 0.999]
    4. Scale by 256 and truncate

tone_map_pixel() runs a single pixel through tone_map(), so a per-pixel
preview and a whole-buffer export always produce the same bytes.

Example:
    >>> import numpy as np
    >>> from spheretrace.preview.display import tone_map, tone_map_pixel
    >>> tone_map_pixel((0.5, 0.5, 0.5), samples=1)
    (181, 181, 181)
    >>> tone_map(np.full((2, 2, 3), 4.0), samples=4)[0, 0]
    array([255, 255, 255], dtype=uint8)
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

# Largest value kept after gamma encoding, so 256 * value stays below 256
MAX_INTENSITY = 0.999


def tone_map(
    sums: npt.ArrayLike,
    samples: int,
) -> npt.NDArray[np.uint8]:
    """Convert accumulated radiance sums to 8-bit color.

    Args:
        sums: Per-channel radiance sums, any shape ending in 3.
        samples: Number of samples accumulated into each sum.

    Returns:
        Array of the same shape with dtype uint8.

    Raises:
        ValueError: If samples is less than 1.
    """
    if samples < 1:
        raise ValueError(f"samples = {samples} must be at least 1")

    scaled = np.asarray(sums, dtype=np.float64) / float(samples)

    # Gamma 2; negative sums can only come from numerical noise
    encoded = np.sqrt(np.maximum(scaled, 0.0))

    clamped = np.clip(encoded, 0.0, MAX_INTENSITY)
    return (256.0 * clamped).astype(np.uint8)


def tone_map_pixel(
    rgb_sum: Sequence[float],
    samples: int,
) -> tuple[int, int, int]:
    """Tone map a single pixel's radiance sum.

    Raises:
        ValueError: If samples is less than 1.
    """
    r, g, b = tone_map(np.asarray(rgb_sum, dtype=np.float64).reshape(1, 3), samples)[0]
    return int(r), int(g), int(b)

"""
Thresholding and masking: HSV range masks, to-zero thresholding and a
two-threshold (Canny style) edge detector.
"""

from typing import Sequence, Union
import numpy as np

from ..errors import InvalidParameterError
from ..models.image import Image
from .color_space_service import to_grayscale
from .filtering_service import sobel

Bounds = Union[float, Sequence[float], np.ndarray]

_TAN_22_5 = 0.4142135623730951
_TAN_67_5 = 2.414213562373095

_NEIGHBOURS_8 = ((-1, -1), (-1, 0), (-1, 1),
                 (0, -1), (0, 1),
                 (1, -1), (1, 0), (1, 1))


def validate_bounds(values: Bounds, channels: int, name: str) -> np.ndarray:
    arr = np.atleast_1d(np.asarray(values, dtype=np.float64))
    if arr.ndim != 1 or arr.shape[0] != channels:
        raise InvalidParameterError(
            f"{name} must have {channels} value(s), one per channel, got {np.shape(values)}"
        )
    return arr


def range_mask(image: Image, low: Bounds, high: Bounds) -> Image:
    """
    Mask of pixels whose every channel lies in [low, high] (inclusive).

    Returns:
        Image: single channel uint8, 255 inside the range and 0 elsewhere.
    """
    low = validate_bounds(low, image.channels, "low")
    high = validate_bounds(high, image.channels, "high")
    px = image.pixels
    if px.ndim == 2:
        inside = (px >= low[0]) & (px <= high[0])
    else:
        inside = np.all((px >= low) & (px <= high), axis=2)
    return Image(inside.astype(np.uint8) * 255)


def to_zero_threshold(image: Image, threshold: float) -> Image:
    """Keep values >= threshold, zero the rest. Single channel only."""
    if not image.is_single_channel:
        raise InvalidParameterError(f"to_zero_threshold needs a single channel image, got {image.channels}")
    px = image.plane()
    return Image(np.where(px >= threshold, px, 0).astype(px.dtype))


def _non_max_suppression(dx: np.ndarray, dy: np.ndarray, mag: np.ndarray) -> np.ndarray:
    """
    Keep pixels that are a local maximum of |dx| + |dy| across the edge.
    Gradient direction is binned into horizontal, vertical and the two diagonals.
    """
    m = np.pad(mag, 1, mode="constant")
    left, right = m[1:-1, :-2], m[1:-1, 2:]
    up, down = m[:-2, 1:-1], m[2:, 1:-1]
    up_left, down_right = m[:-2, :-2], m[2:, 2:]
    up_right, down_left = m[:-2, 2:], m[2:, :-2]

    ax = np.abs(dx).astype(np.float64)
    ay = np.abs(dy).astype(np.float64)
    horizontal = ay < ax * _TAN_22_5
    vertical = ay > ax * _TAN_67_5
    same_sign = np.bitwise_xor(dx, dy) >= 0

    keep_h = (mag > left) & (mag >= right)
    keep_v = (mag > up) & (mag >= down)
    keep_d = np.where(same_sign,
                      (mag > up_left) & (mag > down_right),
                      (mag > up_right) & (mag > down_left))
    return np.select([horizontal, vertical], [keep_h, keep_v], default=keep_d)


def _hysteresis(strong: np.ndarray, weak: np.ndarray) -> np.ndarray:
    """Grow strong pixels through 8-connected weak ones."""
    h, w = strong.shape
    result = strong.copy()
    stack = list(zip(*np.nonzero(strong)))
    while stack:
        y, x = stack.pop()
        for oy, ox in _NEIGHBOURS_8:
            ny, nx = y + oy, x + ox
            if 0 <= ny < h and 0 <= nx < w and weak[ny, nx] and not result[ny, nx]:
                result[ny, nx] = True
                stack.append((ny, nx))
    return result


def edges(image: Image, low_thresh: float = 75.0, high_thresh: float = 200.0) -> Image:
    """
    Canny edge map: Sobel 3x3 gradients, L1 magnitude, non-maximum
    suppression, double threshold and hysteresis.

    Args:
        image (Image): Grayscale image (color input is converted first).
        low_thresh (float): Weak edge threshold; pixels must exceed it.
        high_thresh (float): Strong edge threshold; seeds for hysteresis.

    Returns:
        Image: single channel uint8, 255 on edges.
    """
    if low_thresh > high_thresh:
        low_thresh, high_thresh = high_thresh, low_thresh
    gray = image if image.is_single_channel else to_grayscale(image)

    dx, dy = sobel(gray)
    mag = np.abs(dx).astype(np.int64) + np.abs(dy)

    thin = _non_max_suppression(dx, dy, mag)
    weak = thin & (mag > low_thresh)
    strong = weak & (mag > high_thresh)

    edge_map = _hysteresis(strong, weak)
    return Image(edge_map.astype(np.uint8) * 255)

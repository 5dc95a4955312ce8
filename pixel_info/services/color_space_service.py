"""
Color-space conversions on BGR images.

Integer arithmetic follows the usual 8-bit fixed-point convention so that
results match what thresholds tuned on OpenCV output expect.
"""

import numpy as np

from ..errors import InvalidParameterError
from ..models.image import Image

_GRAY_SHIFT = 14
_GRAY_B, _GRAY_G, _GRAY_R = 1868, 9617, 4899  # 0.114, 0.587, 0.299 scaled by 2^14

_HSV_SHIFT = 12
_HSV_HRANGE = 180


def _division_tables():
    idx = np.arange(256, dtype=np.float64)
    with np.errstate(divide="ignore"):
        sdiv = np.where(idx == 0, 0, np.rint((255 << _HSV_SHIFT) / idx))
        hdiv = np.where(idx == 0, 0, np.rint((_HSV_HRANGE << _HSV_SHIFT) / (6.0 * idx)))
    return sdiv.astype(np.int64), hdiv.astype(np.int64)


_SDIV_TABLE, _HDIV_TABLE = _division_tables()


def _split_bgr(image: Image):
    if image.channels < 3:
        raise InvalidParameterError(f"Expected a BGR image, got {image.channels} channel(s)")
    px = image.pixels.astype(np.int64)
    return px[:, :, 0], px[:, :, 1], px[:, :, 2]


def to_grayscale(image: Image) -> Image:
    """Single channel luma image of the same size. Gray input is copied as is."""
    if image.is_single_channel:
        return Image(image.plane().copy())
    b, g, r = _split_bgr(image)
    gray = (b * _GRAY_B + g * _GRAY_G + r * _GRAY_R + (1 << (_GRAY_SHIFT - 1))) >> _GRAY_SHIFT
    return Image(gray.astype(np.uint8))


def to_bgr(image: Image) -> Image:
    """Replicate a single channel into three so it can carry colored overlays."""
    if not image.is_single_channel:
        return Image(image.pixels.copy())
    plane = image.plane()
    return Image(np.repeat(plane[:, :, np.newaxis], 3, axis=2))


def to_hsv(image: Image) -> Image:
    """
    BGR -> HSV with H in [0, 179] and S, V in [0, 255].

    Args:
        image (Image): 8-bit BGR image.

    Returns:
        Image: 3 channel uint8 image in H, S, V order.
    """
    b, g, r = _split_bgr(image)
    v = np.maximum(np.maximum(b, g), r)
    vmin = np.minimum(np.minimum(b, g), r)
    diff = v - vmin

    s = (diff * _SDIV_TABLE[v] + (1 << (_HSV_SHIFT - 1))) >> _HSV_SHIFT

    # Red dominates first, then green, otherwise blue
    h = np.where(v == r, g - b,
                 np.where(v == g, b - r + 2 * diff, r - g + 4 * diff))
    h = (h * _HDIV_TABLE[diff] + (1 << (_HSV_SHIFT - 1))) >> _HSV_SHIFT
    h = np.where(h < 0, h + _HSV_HRANGE, h)

    hsv = np.stack([h, s, v], axis=2)
    return Image(hsv.astype(np.uint8))

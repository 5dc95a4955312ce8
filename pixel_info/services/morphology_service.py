import numpy as np

from ..errors import InvalidParameterError
from ..models.image import Image
from ..models.kernel import StructuringElement


def structuring_element(kernel_size: int = 3) -> StructuringElement:
    return StructuringElement.ellipse(kernel_size)


def validate_iterations(iterations) -> int:
    if isinstance(iterations, bool) or int(iterations) != iterations or iterations < 0:
        raise InvalidParameterError(f"Iterations must be a non-negative integer, got {iterations!r}")
    return int(iterations)


def _rank_filter(pixels: np.ndarray, element: StructuringElement, reduce, fill) -> np.ndarray:
    """
    One pass of min / max over the element footprint. The border is padded
    with `fill` (the neutral value of `reduce`) so outside pixels never win.
    """
    r = element.size // 2
    pad = [(r, r), (r, r)] + [(0, 0)] * (pixels.ndim - 2)
    padded = np.pad(pixels, pad, mode="constant", constant_values=fill)
    h, w = pixels.shape[:2]
    out = None
    for dy, dx in element.offsets():
        window = padded[r + dy:r + dy + h, r + dx:r + dx + w]
        out = window.copy() if out is None else reduce(out, window)
    return out


def _morph(image: Image, kernel_size: int, iterations: int, reduce, fill_fn) -> Image:
    element = structuring_element(kernel_size)
    iterations = validate_iterations(iterations)
    pixels = image.pixels.copy()
    fill = fill_fn(pixels.dtype)
    for _ in range(iterations):
        pixels = _rank_filter(pixels, element, reduce, fill)
    return Image(pixels)


def _dtype_max(dtype):
    return np.iinfo(dtype).max if np.issubdtype(dtype, np.integer) else np.inf


def _dtype_min(dtype):
    return np.iinfo(dtype).min if np.issubdtype(dtype, np.integer) else -np.inf


def erode(image: Image, kernel_size: int = 3, iterations: int = 1) -> Image:
    """Minimum over an elliptical footprint, repeated `iterations` times."""
    return _morph(image, kernel_size, iterations, np.minimum, _dtype_max)


def dilate(image: Image, kernel_size: int = 3, iterations: int = 1) -> Image:
    """Maximum over an elliptical footprint, repeated `iterations` times."""
    return _morph(image, kernel_size, iterations, np.maximum, _dtype_min)

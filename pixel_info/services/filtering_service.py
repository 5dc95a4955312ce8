"""
Kernel filtering: generic convolution, Gaussian blur, Laplacian and Sobel.

Filters are applied as correlation (kernel not flipped), the convention used
by image-processing toolkits; every kernel used here is symmetric anyway.
Pixels beyond the border are replicated from the nearest edge sample.
"""

from typing import Tuple
import numpy as np

from ..models.image import Image
from ..models.kernel import Kernel, validate_kernel_size

LAPLACIAN_KERNEL = np.array([[0, 1, 0],
                             [1, -4, 1],
                             [0, 1, 0]], dtype=np.float64)

SOBEL_X_KERNEL = np.array([[-1, 0, 1],
                           [-2, 0, 2],
                           [-1, 0, 1]], dtype=np.float64)
SOBEL_Y_KERNEL = SOBEL_X_KERNEL.T.copy()


def _correlate(src: np.ndarray, kernel: Kernel) -> np.ndarray:
    """Float64 accumulation of `kernel` over `src` (2-D or H x W x C)."""
    rows, cols = kernel.shape
    ar, ac = kernel.anchor
    pad = [(ar, rows - 1 - ar), (ac, cols - 1 - ac)] + [(0, 0)] * (src.ndim - 2)
    padded = np.pad(src.astype(np.float64, copy=False), pad, mode="edge")

    h, w = src.shape[:2]
    acc = np.zeros(src.shape, dtype=np.float64)
    for i in range(rows):
        for j in range(cols):
            weight = kernel.weights[i, j]
            if weight == 0:
                continue
            acc += weight * padded[i:i + h, j:j + w]
    return acc


def _cast(values: np.ndarray, dtype) -> np.ndarray:
    """Round and saturate into integer dtypes; plain cast otherwise."""
    dtype = np.dtype(dtype)
    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        return np.clip(np.rint(values), info.min, info.max).astype(dtype)
    return values.astype(dtype)


def convolve(image: Image, kernel, dtype=None) -> Image:
    """
    Apply a 2-D kernel to every channel of `image`.

    Args:
        image (Image): Input image, any channel count.
        kernel (Kernel | array-like): Weights with odd dimensions.
        dtype: Output dtype. None keeps the input dtype (saturating for uint8).

    Returns:
        Image: New image with the same dimensions as the input.
    """
    if not isinstance(kernel, Kernel):
        kernel = Kernel(kernel)
    acc = _correlate(image.pixels, kernel)
    return Image(_cast(acc, dtype if dtype is not None else image.pixels.dtype))


def gaussian_sigma(kernel_size: int) -> float:
    return 0.3 * ((kernel_size - 1) * 0.5 - 1) + 0.8


def gaussian_kernel(kernel_size: int) -> np.ndarray:
    """Normalized 1-D Gaussian weights, sigma derived from the size."""
    kernel_size = validate_kernel_size(kernel_size)
    sigma = gaussian_sigma(kernel_size)
    x = np.arange(kernel_size, dtype=np.float64) - (kernel_size - 1) * 0.5
    weights = np.exp(-(x * x) / (2.0 * sigma * sigma))
    return weights / weights.sum()


def gaussian_blur(image: Image, kernel_size: int) -> Image:
    """Separable Gaussian blur: one horizontal pass, one vertical pass, one rounding."""
    weights = gaussian_kernel(kernel_size)
    horizontal = _correlate(image.pixels, Kernel(weights.reshape(1, -1)))
    both = _correlate(horizontal, Kernel(weights.reshape(-1, 1)))
    return Image(_cast(both, image.pixels.dtype))


def laplacian(image: Image) -> Image:
    """Second-derivative response as float64 (negative values preserved)."""
    return convolve(image, Kernel(LAPLACIAN_KERNEL), dtype=np.float64)


def sobel(image: Image) -> Tuple[np.ndarray, np.ndarray]:
    """3x3 Sobel derivatives (dx, dy) of a single channel image as int32 arrays."""
    plane = image.plane()
    dx = _cast(_correlate(plane, Kernel(SOBEL_X_KERNEL)), np.int32)
    dy = _cast(_correlate(plane, Kernel(SOBEL_Y_KERNEL)), np.int32)
    return dx, dy

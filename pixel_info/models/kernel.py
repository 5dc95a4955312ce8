from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import math
import numpy as np

from ..errors import InvalidParameterError


def validate_kernel_size(kernel_size) -> int:
    """Kernel sizes must be positive odd integers."""
    if isinstance(kernel_size, bool) or int(kernel_size) != kernel_size:
        raise InvalidParameterError(f"Kernel size must be an integer, got {kernel_size!r}")
    kernel_size = int(kernel_size)
    if kernel_size <= 0 or kernel_size % 2 == 0:
        raise InvalidParameterError(f"Kernel size must be a positive odd integer, got {kernel_size}")
    return kernel_size


@dataclass
class Kernel:
    """
    Small 2-D weight matrix used while filtering.
    The anchor is (row, col) inside the matrix; defaults to the centre.
    """
    weights: np.ndarray
    anchor: Tuple[int, int] | None = None

    def __post_init__(self):
        self.weights = np.atleast_2d(np.asarray(self.weights, dtype=np.float64))
        if self.weights.ndim != 2:
            raise InvalidParameterError(f"Kernel must be 2-D, got shape {self.weights.shape}")
        rows, cols = self.weights.shape
        if rows % 2 == 0 or cols % 2 == 0:
            raise InvalidParameterError(f"Kernel dimensions must be odd, got {rows}x{cols}")
        if self.anchor is None:
            self.anchor = (rows // 2, cols // 2)
        ar, ac = self.anchor
        if not (0 <= ar < rows and 0 <= ac < cols):
            raise InvalidParameterError(f"Anchor {self.anchor} outside kernel {rows}x{cols}")

    @property
    def shape(self) -> Tuple[int, int]:
        return self.weights.shape


@dataclass(frozen=True)
class StructuringElement:
    """Elliptical binary footprint for erosion / dilation."""
    mask: np.ndarray

    @classmethod
    def ellipse(cls, size: int) -> "StructuringElement":
        """
        Same construction as OpenCV's MORPH_ELLIPSE for a size x size box:
        row i spans columns [c - dx, c + dx] with dx = round(c * sqrt(1 - dy^2 / r^2)).
        """
        size = validate_kernel_size(size)
        r = c = size // 2
        inv_r2 = 1.0 / (r * r) if r else 0.0
        mask = np.zeros((size, size), dtype=bool)
        for i in range(size):
            dy = i - r
            if abs(dy) <= r:
                dx = int(round(c * math.sqrt((r * r - dy * dy) * inv_r2)))
                j1 = max(c - dx, 0)
                j2 = min(c + dx + 1, size)
                mask[i, j1:j2] = True
        return cls(mask)

    @property
    def size(self) -> int:
        return int(self.mask.shape[0])

    def offsets(self):
        """(dy, dx) offsets of the active cells relative to the centre."""
        centre = self.size // 2
        rows, cols = np.nonzero(self.mask)
        return [(int(r) - centre, int(c) - centre) for r, c in zip(rows, cols)]

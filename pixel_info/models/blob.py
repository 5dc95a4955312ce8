from dataclasses import dataclass
import numpy as np

from .geometry import Circle


@dataclass(frozen=True)
class Blob:
    """The largest color-segmented region and the circle that encloses it."""
    contour: np.ndarray  # (N, 2) int32 (x, y)
    enclosed_by: Circle

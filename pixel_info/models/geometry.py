from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence, Tuple
import numpy as np

Point = Tuple[int, int]  # (x, y)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in pixel units. Extents are never negative."""
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Rect extents must be non-negative, got {self.width}x{self.height}")

    @property
    def min_point(self) -> Point:
        """Corner with the smallest x & y values."""
        return self.x, self.y

    @property
    def max_point(self) -> Point:
        """Corner with the largest x & y values."""
        return self.x + self.width, self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height

    @classmethod
    def from_xywh(cls, values: Sequence[int]) -> "Rect":
        x, y, w, h = (int(v) for v in values)
        return cls(x, y, w, h)


@dataclass(frozen=True)
class Circle:
    centre: Tuple[float, float]  # (x, y)
    radius: float

    @property
    def x(self) -> float:
        return self.centre[0]

    @property
    def y(self) -> float:
        return self.centre[1]

    def contains(self, point, tolerance: float = 1e-7) -> bool:
        dx = point[0] - self.centre[0]
        dy = point[1] - self.centre[1]
        return dx * dx + dy * dy <= (self.radius + tolerance) ** 2


def as_contour(points) -> np.ndarray:
    """
    Normalize anything point-like into an (N, 2) int32 array of (x, y).
    Accepts OpenCV style (N, 1, 2) arrays as well as plain lists of pairs.
    """
    arr = np.asarray(points, dtype=np.int32)
    if arr.size == 0:
        return np.zeros((0, 2), dtype=np.int32)
    return arr.reshape(-1, 2)

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union
import numpy as np

from .blob import Blob
from .geometry import Rect
from .line_estimate import LineEstimate


class ResultKind(str, Enum):
    RECTANGLES = "rectangles"
    BLOB = "blob"
    LINE = "line"
    SHAPE = "shape"


@dataclass(frozen=True)
class Shape:
    """A contour whose polygon approximation has the requested vertex count."""
    contour: np.ndarray   # (N, 2) int32 (x, y), as traced
    polygon: np.ndarray   # (K, 2) int32 simplified vertices
    bounding_rect: Rect

    @property
    def vertex_count(self) -> int:
        return int(len(self.polygon))


@dataclass(frozen=True)
class BlurReport:
    variance: float
    threshold: float

    @property
    def is_blurry(self) -> bool:
        return self.variance < self.threshold


# ─── Tagged result variants ────────────────────────────────────────────
# Every pipeline returns exactly one of these. "Nothing found" is a value
# (found == False), so callers have to look before using the payload.

@dataclass(frozen=True)
class RectangleListResult:
    rectangles: List[Rect] = field(default_factory=list)
    kind: ResultKind = field(default=ResultKind.RECTANGLES, init=False)

    @property
    def found(self) -> bool:
        return bool(self.rectangles)


@dataclass(frozen=True)
class BlobResult:
    blob: Blob | None = None
    kind: ResultKind = field(default=ResultKind.BLOB, init=False)

    @property
    def found(self) -> bool:
        return self.blob is not None


@dataclass(frozen=True)
class LineResult:
    estimate: LineEstimate
    kind: ResultKind = field(default=ResultKind.LINE, init=False)

    @property
    def found(self) -> bool:
        return self.estimate.found


@dataclass(frozen=True)
class ShapeResult:
    shape: Shape | None = None
    kind: ResultKind = field(default=ResultKind.SHAPE, init=False)

    @property
    def found(self) -> bool:
        return self.shape is not None

    @property
    def shape_count(self) -> int | None:
        """Vertex count of the detected polygon, None when nothing qualified."""
        return self.shape.vertex_count if self.shape is not None else None


DetectionResult = Union[RectangleListResult, BlobResult, LineResult, ShapeResult]

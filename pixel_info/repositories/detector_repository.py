from __future__ import annotations
from typing import List, Protocol, Sequence
import numpy as np

from ..models.cascade_engine import CascadeEngine


class RectangleDetector(Protocol):
    """Anything that can turn pixels into (x, y, w, h) boxes."""

    def detect(self, pixels: np.ndarray) -> Sequence[Sequence[int]]:
        ...


class DetectorRepository:
    """
    Thin wrapper around a rectangle detector that provides low-level access to raw boxes.
    """

    def __init__(self, detector: RectangleDetector | None = None):
        # Falls back to the configured cascade model (singleton is handled inside)
        self.detector = detector if detector is not None else CascadeEngine()

    def infer_boxes(self, pixels: np.ndarray) -> List[tuple]:
        return [tuple(int(v) for v in box) for box in self.detector.detect(pixels)]

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class LineStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    TOO_SHORT = "too_short"


@dataclass(frozen=True)
class LineEstimate:
    """
    Position and tilt of a near-vertical line.

    offset:      horizontal position of the line's middle, -1 (left edge) .. 1 (right edge)
    orientation: (top - bottom) / height span, clamped to [-pi/2, pi/2]
    Both are None unless status is FOUND.
    """
    status: LineStatus
    offset: float | None = None
    orientation: float | None = None
    rows_used: int = 0

    @property
    def found(self) -> bool:
        return self.status is LineStatus.FOUND

    @classmethod
    def not_found(cls) -> "LineEstimate":
        return cls(LineStatus.NOT_FOUND)

    @classmethod
    def too_short(cls, rows_used: int) -> "LineEstimate":
        return cls(LineStatus.TOO_SHORT, rows_used=rows_used)

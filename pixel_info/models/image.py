from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np

from ..errors import InvalidParameterError


@dataclass
class Image:
    """
    Simple data object: BGR (or single channel) pixels + optional source path.
    Every core operation returns a fresh Image; pixels are never mutated in place.
    """
    pixels: np.ndarray  # Shape (H, W) or (H, W, C), row-major, uint8 for raw samples.
    path: Path | None = None  # Source of the image, bookkeeping only.

    def __post_init__(self):
        if not isinstance(self.pixels, np.ndarray):
            self.pixels = np.asarray(self.pixels)
        if self.pixels.ndim not in (2, 3):
            raise InvalidParameterError(f"Image must be 2-D or 3-D, got shape {self.pixels.shape}")
        if self.pixels.shape[0] == 0 or self.pixels.shape[1] == 0:
            raise InvalidParameterError(f"Image dimensions must be positive, got {self.pixels.shape[:2]}")

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def channels(self) -> int:
        return 1 if self.pixels.ndim == 2 else int(self.pixels.shape[2])

    @property
    def is_single_channel(self) -> bool:
        return self.channels == 1

    def plane(self) -> np.ndarray:
        """Pixels of a single-channel image as a 2-D array."""
        if self.pixels.ndim == 3:
            return self.pixels[:, :, 0]
        return self.pixels

from __future__ import annotations
from pathlib import Path
from typing import Union
import logging
import cv2
import numpy as np

from ..errors import InvalidParameterError
from ..models.geometry import Rect
from ..models.image import Image
from ..repositories.image_repository import ImageRepository

logger = logging.getLogger(__name__)


class ImageService:
    """I/O and whole-image helpers. No detection logic here."""

    def __init__(self):
        self.image_repository = ImageRepository()

    def load(self, path: str | Path, grayscale: bool = False) -> Image:
        """Load a single image from disk into an Image object (BGR order)."""
        return self.image_repository.load(path, grayscale=grayscale)

    def decode(self, data: bytes, path: str | Path | None = None) -> Image:
        return self.image_repository.decode(data, path)

    def save(self, image: Image, path: Union[str, Path] = None) -> Path:
        return self.image_repository.save(image, path)


def region_of_interest(image: Image, rect: Rect) -> Image:
    """
    Copy of the pixels covered by `rect`.

    Raises:
        InvalidParameterError: rect is empty or reaches outside the image.
    """
    if rect.width <= 0 or rect.height <= 0:
        raise InvalidParameterError(f"Region of interest must not be empty: {rect}")
    x1, y1 = rect.max_point
    if rect.x < 0 or rect.y < 0 or x1 > image.width or y1 > image.height:
        raise InvalidParameterError(
            f"Region {rect.as_tuple()} outside image {image.width}x{image.height}"
        )
    return Image(image.pixels[rect.y:y1, rect.x:x1].copy(), path=image.path)


def _resize(image: Image, new_width: int, new_height: int) -> Image:
    if new_width <= 0 or new_height <= 0:
        raise InvalidParameterError(f"Resize target must be positive, got {new_width}x{new_height}")
    pixels = cv2.resize(image.pixels, (new_width, new_height))
    logger.debug(f"Resized {image.width}x{image.height} -> {new_width}x{new_height}")
    return Image(pixels, path=image.path)


def resize_by_width(image: Image, new_width: int) -> Image:
    """Resize to `new_width`, preserving aspect ratio."""
    ratio = float(new_width) / image.width
    return _resize(image, int(new_width), int(image.height * ratio))


def resize_by_height(image: Image, new_height: int) -> Image:
    """Resize to `new_height`, preserving aspect ratio."""
    ratio = float(new_height) / image.height
    return _resize(image, int(image.width * ratio), int(new_height))


def matrix_variance(image: Image) -> float:
    """
    Variance of a single channel image: the square of the (population)
    standard deviation of its pixel values.
    """
    values = image.plane().astype(np.float64)
    sd = float(values.std())
    return sd * sd

from __future__ import annotations
from pathlib import Path
from typing import Union
import logging
import numpy as np
import cv2
from PIL import Image as PILImage

from ..models.image import Image

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file I/O for Image entities. Pixels stay in OpenCV's BGR order.
    """

    @staticmethod
    def load(path: Union[str, Path], grayscale: bool = False) -> Image:
        path = Path(path)
        flag = cv2.IMREAD_GRAYSCALE if grayscale else cv2.IMREAD_COLOR
        arr_bgr = cv2.imread(str(path), flag)
        if arr_bgr is None:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")
        logger.debug(f"Loaded {path.name}: {arr_bgr.shape}")
        return Image(pixels=arr_bgr, path=path)

    @staticmethod
    def decode(data: bytes, path: Union[str, Path] = None) -> Image:
        """Decode an in-memory encoded image (png, jpeg, ...) into BGR pixels."""
        buf = np.frombuffer(data, dtype=np.uint8)
        arr_bgr = cv2.imdecode(buf, cv2.IMREAD_COLOR)
        if arr_bgr is None:
            raise ValueError("Could not decode image data")
        return Image(pixels=arr_bgr, path=Path(path) if path else None)

    @staticmethod
    def to_pil(image: Image) -> PILImage.Image:
        pixels = image.pixels
        if pixels.dtype != np.uint8:
            pixels = np.clip(np.rint(pixels), 0, 255).astype(np.uint8)
        if pixels.ndim == 3 and pixels.shape[2] == 3:
            return PILImage.fromarray(np.ascontiguousarray(pixels[:, :, ::-1]))
        if pixels.ndim == 3:
            pixels = pixels[:, :, 0]
        return PILImage.fromarray(pixels)

    @classmethod
    def save(cls, image: Image, path: Union[str, Path] = None) -> Path:
        target = Path(path) if path is not None else image.path
        if target is None:
            raise ValueError("Image has no path to save to")
        cls.to_pil(image).save(target)
        return target

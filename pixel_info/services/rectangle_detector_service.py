from __future__ import annotations
from typing import List
import logging

from ..models.geometry import Rect
from ..models.image import Image
from ..repositories.detector_repository import DetectorRepository, RectangleDetector
from .image_service import region_of_interest

logger = logging.getLogger(__name__)


def offset_rect(containing: Rect, local: Rect) -> Rect:
    """
    Translate a rectangle found inside `containing` into the coordinates of
    the full image: shift by the region's origin, keep the size.
    """
    return Rect(containing.x + local.x, containing.y + local.y, local.width, local.height)


class RectangleDetectorService:
    """
    Business logic on top of an opaque rectangle detector.
    Results are always in the coordinate space of the pixels it was given.
    """

    def __init__(self, detector: RectangleDetector | None = None):
        self.detector_repository = DetectorRepository(detector)

    def detect(self, img: Image, region: Rect | None = None) -> List[Rect]:
        """
        Args:
            img (Image): Full image.
            region (Rect, optional): Sub-region to run on. Results are then local to it.

        Returns:
            List[Rect]: Detections, in the region's local coordinates when a region is given.
        """
        target = img if region is None else region_of_interest(img, region)
        boxes = self.detector_repository.infer_boxes(target.pixels)
        logger.debug(f"Detector returned {len(boxes)} box(es) on {target.width}x{target.height}")
        return [Rect.from_xywh(b) for b in boxes]

    def detect_absolute(self, img: Image, region: Rect) -> List[Rect]:
        """Detect inside `region` and report boxes in full-image coordinates."""
        return [offset_rect(region, r) for r in self.detect(img, region)]

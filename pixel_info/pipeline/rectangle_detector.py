from __future__ import annotations
import logging

from ..models.detection_result import RectangleListResult
from ..models.geometry import Rect
from ..models.image import Image
from ..repositories.detector_repository import RectangleDetector
from ..services.rectangle_detector_service import RectangleDetectorService

logger = logging.getLogger(__name__)


def detect_rectangles(
    image: Image,
    detector: RectangleDetector | None = None,
    region: Rect | None = None,
) -> RectangleListResult:
    """
    Run the detector over the whole image, or over `region` only.
    Boxes are in the coordinate space of what was searched.
    """
    rects = RectangleDetectorService(detector).detect(image, region)
    logger.info(f"Detected {len(rects)} rectangle(s)")
    return RectangleListResult(rects)


def detect_rectangles_absolute(
    image: Image,
    region: Rect,
    detector: RectangleDetector | None = None,
) -> RectangleListResult:
    """Detect inside `region`, translated back to full-image coordinates."""
    rects = RectangleDetectorService(detector).detect_absolute(image, region)
    logger.info(f"Detected {len(rects)} rectangle(s) in region {region.as_tuple()}")
    return RectangleListResult(rects)

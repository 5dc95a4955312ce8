"""
Color-blob detection: find the largest region inside an HSV range and the
smallest circle that encloses it.
"""

import logging

from .. import config
from ..models.blob import Blob
from ..models.detection_result import BlobResult
from ..models.image import Image
from ..models.kernel import validate_kernel_size
from ..services.color_space_service import to_hsv
from ..services.contour_service import find_contours, largest_contour, min_enclosing_circle
from ..services.filtering_service import gaussian_blur
from ..services.morphology_service import dilate, erode, validate_iterations
from ..services.threshold_service import Bounds, range_mask, validate_bounds

logger = logging.getLogger(__name__)


def hsv_mask(
    image: Image,
    low: Bounds,
    high: Bounds,
    blur_kernel: int = config.BLOB_BLUR_KERNEL,
    morph_kernel: int = config.BLOB_MORPH_KERNEL,
    morph_iterations: int = config.BLOB_MORPH_ITERATIONS,
) -> Image:
    """
    Mask of the pixels whose HSV value lies within [low, high].

    Blur -> HSV -> range test -> erode -> dilate; the erode/dilate pair
    removes specks without shrinking the regions that survive.
    """
    # Everything is checked before the first pixel is touched
    validate_kernel_size(blur_kernel)
    validate_kernel_size(morph_kernel)
    validate_iterations(morph_iterations)
    validate_bounds(low, 3, "low")
    validate_bounds(high, 3, "high")

    blurred = gaussian_blur(image, blur_kernel)
    mask = range_mask(to_hsv(blurred), low, high)
    mask = erode(mask, morph_kernel, morph_iterations)
    return dilate(mask, morph_kernel, morph_iterations)


def find_blob(image: Image, low: Bounds, high: Bounds, **mask_options) -> BlobResult:
    """
    Largest blob within the HSV range, with its minimum enclosing circle.

    Args:
        image (Image): BGR image.
        low, high: HSV bounds, H in [0, 179], S and V in [0, 255].
        **mask_options: Overrides for hsv_mask (blur_kernel, morph_kernel, morph_iterations).

    Returns:
        BlobResult: `found` is False when no region survives segmentation.
    """
    mask = hsv_mask(image, low, high, **mask_options)
    contours = find_contours(mask)
    logger.debug(f"HSV mask produced {len(contours)} external contour(s)")
    if not contours:
        logger.info("No blob in HSV range")
        return BlobResult()

    contour = largest_contour(contours)
    circle = min_enclosing_circle(contour)
    logger.info(f"Blob at ({circle.x:.1f}, {circle.y:.1f}) radius {circle.radius:.1f}")
    return BlobResult(Blob(contour=contour, enclosed_by=circle))

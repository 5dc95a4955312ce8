import logging

from .. import config
from ..models.detection_result import BlurReport
from ..models.image import Image
from ..services.color_space_service import to_grayscale
from ..services.filtering_service import laplacian
from ..services.image_service import matrix_variance

logger = logging.getLogger(__name__)


def detect_blur(image: Image, threshold: float = config.BLUR_THRESHOLD) -> BlurReport:
    """
    Variance of the Laplacian of the grayscale image; below `threshold`
    the image counts as blurry.
    """
    variance = matrix_variance(laplacian(to_grayscale(image)))
    report = BlurReport(variance=variance, threshold=float(threshold))
    logger.info(f"Laplacian variance {variance:.2f} (threshold {threshold:.2f}) -> "
                f"{'blurry' if report.is_blurry else 'sharp'}")
    return report


def is_image_blurry(image: Image, threshold: float = config.BLUR_THRESHOLD) -> bool:
    return detect_blur(image, threshold).is_blurry

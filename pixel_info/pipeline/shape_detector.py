import logging

from .. import config
from ..errors import InvalidParameterError
from ..models.detection_result import Shape, ShapeResult
from ..models.image import Image
from ..models.kernel import validate_kernel_size
from ..services.color_space_service import to_grayscale
from ..services.contour_service import approx_polygon, bounding_rect, find_contours, sort_by_area
from ..services.filtering_service import gaussian_blur
from ..services.threshold_service import edges

logger = logging.getLogger(__name__)


def find_polygon(
    image: Image,
    vertex_count: int,
    low_thresh: float = config.CANNY_LOW,
    high_thresh: float = config.CANNY_HIGH,
    epsilon_fraction: float = config.POLY_EPSILON,
    blur_kernel: int = config.SHAPE_BLUR_KERNEL,
) -> ShapeResult:
    """
    Largest edge contour whose polygon approximation has `vertex_count` vertices.

    Contours are tried from the largest area down; the first match wins.
    """
    validate_kernel_size(blur_kernel)
    if vertex_count < 3:
        raise InvalidParameterError(f"vertex_count must be at least 3, got {vertex_count}")
    if epsilon_fraction < 0:
        raise InvalidParameterError(f"epsilon_fraction must be non-negative, got {epsilon_fraction}")

    blurred = gaussian_blur(to_grayscale(image), blur_kernel)
    edge_map = edges(blurred, low_thresh, high_thresh)
    contours = sort_by_area(find_contours(edge_map))
    logger.debug(f"Edge map produced {len(contours)} external contour(s)")

    for contour in contours:
        polygon = approx_polygon(contour, epsilon_fraction)
        if len(polygon) == vertex_count:
            rect = bounding_rect(contour)
            logger.info(f"Found {vertex_count}-gon at {rect.as_tuple()}")
            return ShapeResult(Shape(contour=contour, polygon=polygon, bounding_rect=rect))

    logger.info(f"No {vertex_count}-gon found")
    return ShapeResult()


def find_quadrilateral(
    image: Image,
    low_thresh: float = config.CANNY_LOW,
    high_thresh: float = config.CANNY_HIGH,
    epsilon_fraction: float = config.POLY_EPSILON,
) -> ShapeResult:
    return find_polygon(image, 4, low_thresh, high_thresh, epsilon_fraction)

"""
Near-vertical line detection from per-row peaks of a horizontal
second-difference filter.
"""

from typing import Tuple
import logging
import math
import numpy as np

from .. import config
from ..errors import InvalidParameterError
from ..models.detection_result import LineResult
from ..models.image import Image
from ..models.kernel import Kernel
from ..models.line_estimate import LineEstimate, LineStatus
from ..services.color_space_service import to_grayscale
from ..services.filtering_service import convolve
from ..services.threshold_service import to_zero_threshold

logger = logging.getLogger(__name__)

ROW_KERNEL = Kernel(np.array([[-1, 2, -1]], dtype=np.float64))


def row_peaks(image: Image, threshold: float = config.LINE_THRESHOLD) -> Tuple[np.ndarray, np.ndarray]:
    """
    Column of the strongest response in every row.

    Returns:
        (rows, columns): indices of the rows whose peak is not at column 0,
        and the peak column of each of those rows.
    """
    response = convolve(to_grayscale(image), ROW_KERNEL)
    response = to_zero_threshold(response, threshold)
    peaks = np.argmax(response.pixels, axis=1)
    rows = np.flatnonzero(peaks != 0)
    return rows, peaks[rows]


def _mean(values: np.ndarray) -> float:
    return float(np.mean(values.astype(np.float64)))


def find_vertical_line(
    image: Image,
    threshold: float = config.LINE_THRESHOLD,
    min_rows: int = config.LINE_MIN_ROWS,
    sample_divisor: int = config.LINE_SAMPLE_DIVISOR,
    max_sample: int = config.LINE_MAX_SAMPLE,
) -> LineResult:
    """
    Estimate where a vertical line sits and how much it leans.

    The top, middle and bottom positions are the mean peak column over
    `sample` consecutive qualifying rows, where
    sample = clamp(rows // sample_divisor, 1, max_sample).

    Returns:
        LineResult: NOT_FOUND with no qualifying rows, TOO_SHORT with fewer
        than `min_rows`, otherwise offset in [-1, 1] and orientation.
    """
    if min_rows < 2 or sample_divisor <= 0 or max_sample <= 0:
        raise InvalidParameterError(
            f"Invalid line parameters: min_rows={min_rows}, "
            f"sample_divisor={sample_divisor}, max_sample={max_sample}"
        )

    rows, cols = row_peaks(image, threshold)
    count = len(rows)
    if count == 0:
        logger.info("No line rows found")
        return LineResult(LineEstimate.not_found())
    if count < min_rows:
        logger.info(f"Line too short: {count} row(s), need {min_rows}")
        return LineResult(LineEstimate.too_short(count))

    sample = min(max(count // sample_divisor, 1), max_sample)
    top = _mean(cols[:sample])
    mid_start = (count - sample) // 2
    middle = _mean(cols[mid_start:mid_start + sample])
    bottom = _mean(cols[-sample:])

    height_span = int(rows[-1] - rows[0])
    orientation = (top - bottom) / height_span
    orientation = max(-math.pi / 2, min(math.pi / 2, orientation))
    offset = (middle / image.width) * 2 - 1

    logger.debug(f"Line rows={count} sample={sample} top={top:.1f} middle={middle:.1f} bottom={bottom:.1f}")
    return LineResult(LineEstimate(LineStatus.FOUND, offset=offset, orientation=orientation, rows_used=count))

import math
import cv2
import numpy as np
import pytest

from conftest import bgr_canvas, filled_disc, filled_square
from pixel_info.errors import InvalidParameterError
from pixel_info.models.detection_result import ResultKind
from pixel_info.models.image import Image
from pixel_info.models.line_estimate import LineStatus
from pixel_info.pipeline.blob_detector import find_blob, hsv_mask
from pixel_info.pipeline.blur_detector import detect_blur, is_image_blurry
from pixel_info.pipeline.line_detector import find_vertical_line, row_peaks
from pixel_info.pipeline.shape_detector import find_polygon, find_quadrilateral

GREEN_LOW = (50, 100, 100)
GREEN_HIGH = (70, 255, 255)


# ─── Blur ───────────────────────────────────────────────────────────────

def test_flat_image_is_blurry(flat_image):
    report = detect_blur(flat_image)
    assert report.variance == 0.0
    assert report.is_blurry
    assert is_image_blurry(flat_image, 100.0)


def test_checkerboard_is_sharp(checkerboard):
    report = detect_blur(checkerboard, 100.0)
    assert report.variance > 100.0
    assert not report.is_blurry


def test_blur_threshold_is_strict(flat_image):
    assert not detect_blur(flat_image, 0.0).is_blurry


# ─── Blob ───────────────────────────────────────────────────────────────

def test_green_disc_is_found():
    image = filled_disc(200, 200, (100, 80), 30, (0, 255, 0))
    result = find_blob(image, GREEN_LOW, GREEN_HIGH)
    assert result.kind is ResultKind.BLOB
    assert result.found
    circle = result.blob.enclosed_by
    assert circle.x == pytest.approx(100, abs=2)
    assert circle.y == pytest.approx(80, abs=2)
    assert circle.radius == pytest.approx(30, abs=2)


def test_largest_blob_wins():
    image = filled_disc(200, 200, (50, 50), 12, (0, 255, 0))
    image.pixels[100:180, 100:180] = (0, 255, 0)
    result = find_blob(image, GREEN_LOW, GREEN_HIGH)
    assert result.blob.enclosed_by.x == pytest.approx(139.5, abs=2)
    assert result.blob.enclosed_by.y == pytest.approx(139.5, abs=2)


def test_no_blob_in_black_image():
    result = find_blob(Image(bgr_canvas(60, 80)), GREEN_LOW, GREEN_HIGH)
    assert not result.found
    assert result.blob is None


def test_blob_out_of_range_color():
    image = filled_disc(100, 100, (50, 50), 20, (255, 0, 0))
    assert not find_blob(image, GREEN_LOW, GREEN_HIGH).found


def test_hsv_mask_is_binary():
    image = filled_disc(100, 100, (50, 50), 20, (0, 255, 0))
    mask = hsv_mask(image, GREEN_LOW, GREEN_HIGH)
    assert mask.is_single_channel
    assert set(np.unique(mask.pixels)) <= {0, 255}
    assert mask.pixels[50, 50] == 255
    assert mask.pixels[0, 0] == 0


@pytest.mark.parametrize("kwargs", [
    dict(low=(50, 100), high=GREEN_HIGH),
    dict(low=GREEN_LOW, high=(70, 255, 255, 0)),
    dict(low=GREEN_LOW, high=GREEN_HIGH, blur_kernel=4),
    dict(low=GREEN_LOW, high=GREEN_HIGH, morph_kernel=0),
    dict(low=GREEN_LOW, high=GREEN_HIGH, morph_iterations=-1),
])
def test_blob_rejects_bad_parameters(kwargs):
    image = filled_disc(50, 50, (25, 25), 10, (0, 255, 0))
    with pytest.raises(InvalidParameterError):
        find_blob(image, **kwargs)


# ─── Vertical line ──────────────────────────────────────────────────────

def line_image(height, width, column_at):
    pixels = bgr_canvas(height, width)
    for y in range(height):
        x = column_at(y)
        if x is not None:
            pixels[y, x] = (255, 255, 255)
    return Image(pixels)


def test_straight_line_left_of_centre():
    image = line_image(100, 120, lambda y: 30)
    estimate = find_vertical_line(image).estimate
    assert estimate.status is LineStatus.FOUND
    assert estimate.rows_used == 100
    assert estimate.orientation == 0.0
    assert estimate.offset == pytest.approx(-0.5)


def test_leaning_line_orientation():
    image = line_image(100, 120, lambda y: 40 + y // 10)
    estimate = find_vertical_line(image).estimate
    assert estimate.found
    assert estimate.orientation == pytest.approx(-9 / 99)
    assert -1.0 <= estimate.offset <= 1.0


def test_line_in_the_middle():
    image = line_image(80, 100, lambda y: 50)
    assert find_vertical_line(image).estimate.offset == pytest.approx(0.0)


def test_line_with_too_few_rows():
    image = line_image(100, 120, lambda y: 30 if 10 <= y < 13 else None)
    result = find_vertical_line(image)
    assert result.kind is ResultKind.LINE
    assert not result.found
    assert result.estimate.status is LineStatus.TOO_SHORT
    assert result.estimate.rows_used == 3
    assert result.estimate.offset is None


def test_no_line_at_all():
    estimate = find_vertical_line(Image(bgr_canvas(50, 50))).estimate
    assert estimate.status is LineStatus.NOT_FOUND
    assert estimate.orientation is None


def test_weak_line_is_ignored():
    image = line_image(50, 60, lambda y: 20)
    image.pixels[image.pixels > 0] = 20
    assert find_vertical_line(image, threshold=45).estimate.status is LineStatus.NOT_FOUND


def test_row_peaks_reports_columns():
    rows, cols = row_peaks(line_image(10, 40, lambda y: 7 if y % 2 else None))
    assert rows.tolist() == [1, 3, 5, 7, 9]
    assert cols.tolist() == [7] * 5


def test_orientation_is_clamped():
    image = line_image(40, 200, lambda y: 180 if y == 0 else 10 if y == 39 else None)
    estimate = find_vertical_line(image, min_rows=2).estimate
    assert estimate.orientation == pytest.approx(math.pi / 2)


def test_line_rejects_bad_parameters():
    with pytest.raises(InvalidParameterError):
        find_vertical_line(Image(bgr_canvas(10, 10)), min_rows=1)


# ─── Quadrilateral ──────────────────────────────────────────────────────

def test_square_is_found():
    result = find_quadrilateral(filled_square(200, 200, 50, 50, 100))
    assert result.kind is ResultKind.SHAPE
    assert result.found
    assert result.shape_count == 4
    x, y, w, h = result.shape.bounding_rect.as_tuple()
    assert x == pytest.approx(50, abs=2)
    assert y == pytest.approx(50, abs=2)
    assert w == pytest.approx(100, abs=2)
    assert h == pytest.approx(100, abs=2)


def test_disc_is_not_a_quadrilateral():
    result = find_quadrilateral(filled_disc(200, 200, (100, 100), 60, (255, 255, 255)))
    assert not result.found
    assert result.shape_count is None


def test_square_touching_the_frame_is_found():
    pixels = bgr_canvas(100, 100)
    pixels[0:60, 0:60] = (255, 255, 255)
    result = find_quadrilateral(Image(pixels))
    assert result.found
    assert result.shape_count == 4
    assert result.shape.bounding_rect.as_tuple() == pytest.approx((0, 0, 60, 60), abs=1)


def test_square_outline_is_found():
    pixels = bgr_canvas(200, 200)
    cv2.rectangle(pixels, (50, 50), (150, 150), (255, 255, 255), 3)
    result = find_quadrilateral(Image(pixels))
    assert result.found
    assert result.shape_count == 4
    x, y, w, h = result.shape.bounding_rect.as_tuple()
    assert x <= 49 and y <= 49
    assert x + w >= 152 and y + h >= 152
    assert w <= 110 and h <= 110


def test_blank_image_has_no_shape():
    assert not find_quadrilateral(Image(bgr_canvas(64, 64, (90, 90, 90)))).found


def test_polygon_rejects_bad_vertex_count():
    with pytest.raises(InvalidParameterError):
        find_polygon(filled_square(50, 50, 10, 10, 20), 2)

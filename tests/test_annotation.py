import numpy as np

from conftest import bgr_canvas
from pixel_info.models.blob import Blob
from pixel_info.models.geometry import Circle, Rect
from pixel_info.models.image import Image
from pixel_info.models.line_estimate import LineEstimate, LineStatus
from pixel_info.services import annotation_service


def test_rectangles_drawn_on_a_copy():
    image = Image(bgr_canvas(50, 50))
    out = annotation_service.draw_rectangles(image, [Rect(10, 10, 20, 20)])
    assert tuple(out.pixels[10, 10]) == annotation_service.GREEN
    assert not image.pixels.any()


def test_grayscale_input_is_annotated_in_color():
    image = Image(np.zeros((40, 40), dtype=np.uint8))
    out = annotation_service.draw_rectangles(image, [Rect(5, 5, 10, 10)])
    assert out.channels == 3


def test_found_line_is_drawn():
    estimate = LineEstimate(LineStatus.FOUND, offset=0.0, orientation=0.0, rows_used=10)
    out = annotation_service.draw_line(Image(bgr_canvas(100, 100)), estimate)
    assert tuple(out.pixels[50, 50]) == annotation_service.RED


def test_missing_line_draws_nothing():
    out = annotation_service.draw_line(Image(bgr_canvas(20, 20)), LineEstimate.not_found())
    assert not out.pixels.any()


def test_blob_centre_is_marked():
    contour = np.array([[20, 10], [30, 20], [20, 30], [10, 20]], dtype=np.int32)
    blob = Blob(contour=contour, enclosed_by=Circle((20.0, 20.0), 10.0))
    out = annotation_service.draw_blob(Image(bgr_canvas(40, 40)), blob)
    assert tuple(out.pixels[20, 20]) == annotation_service.RED

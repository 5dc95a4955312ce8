"""
Overlay drawing for the demo surfaces (CLI, HTTP server).

The detection core never draws; callers use these helpers on a copy of
their own image once they have the geometry.
"""

from typing import Iterable, Tuple
import cv2
import numpy as np

from ..models.blob import Blob
from ..models.detection_result import Shape
from ..models.geometry import Rect
from ..models.image import Image
from ..models.line_estimate import LineEstimate
from .color_space_service import to_bgr

GREEN = (0, 255, 0)
RED = (0, 0, 255)
YELLOW = (0, 255, 255)
BLUE = (255, 0, 0)


def _canvas(image: Image) -> np.ndarray:
    return np.ascontiguousarray(to_bgr(image).pixels.astype(np.uint8))


def draw_rectangles(image: Image, rects: Iterable[Rect], color: Tuple[int, int, int] = GREEN) -> Image:
    canvas = _canvas(image)
    for r in rects:
        cv2.rectangle(canvas, r.min_point, r.max_point, color, 2)
    return Image(canvas)


def draw_blob(image: Image, blob: Blob) -> Image:
    canvas = _canvas(image)
    cv2.drawContours(canvas, [blob.contour.reshape(-1, 1, 2)], -1, YELLOW, 2)
    circle = blob.enclosed_by
    centre = (int(round(circle.x)), int(round(circle.y)))
    cv2.circle(canvas, centre, int(round(circle.radius)), GREEN, 2)
    cv2.circle(canvas, centre, 4, RED, -1)
    return Image(canvas)


def draw_line(image: Image, estimate: LineEstimate) -> Image:
    canvas = _canvas(image)
    if not estimate.found:
        return Image(canvas)
    h, w = canvas.shape[:2]
    mid = (estimate.offset + 1.0) / 2.0 * w
    half = estimate.orientation * h / 2.0
    top = (int(round(mid + half)), 0)
    bottom = (int(round(mid - half)), h - 1)
    cv2.line(canvas, top, bottom, RED, 2)
    return Image(canvas)


def draw_shape(image: Image, shape: Shape) -> Image:
    canvas = _canvas(image)
    cv2.drawContours(canvas, [shape.polygon.reshape(-1, 1, 2)], -1, GREEN, 2)
    r = shape.bounding_rect
    cv2.rectangle(canvas, r.min_point, r.max_point, BLUE, 1)
    return Image(canvas)

"""
Command-line runner for the detection pipelines.

    pixel-info blur  photo.jpg
    pixel-info blob  ball.jpg --low 29 86 6 --high 64 255 255 --output ball_out.png
    pixel-info line  track.png
    pixel-info shape sheet.jpg
    pixel-info rects people.jpg --model haarcascade_frontalface_default.xml
"""

import argparse
import json
import logging
import sys

from .. import config
from ..errors import PixelInfoError
from ..models.cascade_engine import CascadeEngine
from ..models.geometry import Rect
from ..pipeline.blob_detector import find_blob
from ..pipeline.blur_detector import detect_blur
from ..pipeline.line_detector import find_vertical_line
from ..pipeline.rectangle_detector import detect_rectangles, detect_rectangles_absolute
from ..pipeline.shape_detector import find_quadrilateral
from ..services import annotation_service
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pixel-info", description="Geometric descriptors from pixels")
    sub = parser.add_subparsers(dest="command", required=True)

    def with_image(p):
        p.add_argument("image", help="input image path")
        p.add_argument("--output", help="write an annotated copy here")
        return p

    blur = with_image(sub.add_parser("blur", help="variance-of-Laplacian blur check"))
    blur.add_argument("--threshold", type=float, default=config.BLUR_THRESHOLD)

    blob = with_image(sub.add_parser("blob", help="largest blob in an HSV range"))
    blob.add_argument("--low", type=float, nargs=3, required=True, metavar=("H", "S", "V"))
    blob.add_argument("--high", type=float, nargs=3, required=True, metavar=("H", "S", "V"))

    line = with_image(sub.add_parser("line", help="near-vertical line position and tilt"))
    line.add_argument("--threshold", type=float, default=config.LINE_THRESHOLD)

    shape = with_image(sub.add_parser("shape", help="largest quadrilateral"))
    shape.add_argument("--low", type=float, default=config.CANNY_LOW)
    shape.add_argument("--high", type=float, default=config.CANNY_HIGH)
    shape.add_argument("--epsilon", type=float, default=config.POLY_EPSILON)

    rects = with_image(sub.add_parser("rects", help="cascade detector boxes"))
    rects.add_argument("--model", default=config.CASCADE_MODEL_PATH)
    rects.add_argument("--region", type=int, nargs=4, metavar=("X", "Y", "W", "H"))
    return parser


def run(args) -> dict:
    image_service = ImageService()
    image = image_service.load(args.image)
    logger.info(f"Loaded {args.image}: {image.width}x{image.height}x{image.channels}")
    annotated = None

    if args.command == "blur":
        report = detect_blur(image, args.threshold)
        summary = {"variance": report.variance, "threshold": report.threshold, "blurry": report.is_blurry}

    elif args.command == "blob":
        result = find_blob(image, args.low, args.high)
        summary = {"found": result.found}
        if result.found:
            circle = result.blob.enclosed_by
            summary.update({"centre": list(circle.centre), "radius": circle.radius})
            annotated = annotation_service.draw_blob(image, result.blob)

    elif args.command == "line":
        estimate = find_vertical_line(image, args.threshold).estimate
        summary = {"status": estimate.status.value, "offset": estimate.offset,
                   "orientation": estimate.orientation}
        annotated = annotation_service.draw_line(image, estimate)

    elif args.command == "shape":
        result = find_quadrilateral(image, args.low, args.high, args.epsilon)
        summary = {"found": result.found, "vertices": result.shape_count}
        if result.found:
            summary["bounding_rect"] = list(result.shape.bounding_rect.as_tuple())
            annotated = annotation_service.draw_shape(image, result.shape)

    else:
        detector = CascadeEngine(args.model)
        if args.region:
            result = detect_rectangles_absolute(image, Rect.from_xywh(args.region), detector)
        else:
            result = detect_rectangles(image, detector)
        summary = {"rectangles": [list(r.as_tuple()) for r in result.rectangles]}
        annotated = annotation_service.draw_rectangles(image, result.rectangles)

    if args.output and annotated is not None:
        image_service.save(annotated, args.output)
        logger.info(f"Annotated image written to {args.output}")
    return summary


def main(argv=None) -> int:
    # --- Centralized Logging Configuration ---
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT, datefmt=config.LOG_DATEFMT)
    args = build_parser().parse_args(argv)
    try:
        summary = run(args)
    except (PixelInfoError, FileNotFoundError) as err:
        logger.error(f"{args.command} failed: {err}")
        return 1
    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())

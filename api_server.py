#!/usr/bin/env python3
"""
Information-from-Pixels API Server
Each detection pipeline has its own endpoint; every response carries the
geometric result plus an annotated preview image.
"""

from __future__ import annotations
import os
import logging
import base64
from io import BytesIO
from typing import Any, Dict
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.utils import secure_filename

from pixel_info import config
from pixel_info.errors import PixelInfoError
from pixel_info.models.cascade_engine import CascadeEngine
from pixel_info.models.geometry import Rect
from pixel_info.models.image import Image
from pixel_info.pipeline.blob_detector import find_blob
from pixel_info.pipeline.blur_detector import detect_blur
from pixel_info.pipeline.line_detector import find_vertical_line
from pixel_info.pipeline.rectangle_detector import detect_rectangles, detect_rectangles_absolute
from pixel_info.pipeline.shape_detector import find_quadrilateral
from pixel_info.repositories.image_repository import ImageRepository
from pixel_info.services import annotation_service
from pixel_info.services.image_service import ImageService

# --- Centralized Logging Configuration ---
logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT, datefmt=config.LOG_DATEFMT)

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
ALLOWED_EXTENSIONS = set(os.getenv("ALLOWED_EXTENSIONS", "png,jpg,jpeg,bmp,webp").split(","))
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "20")) * 1024 * 1024
app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH

image_service = ImageService()

logger = logging.getLogger(__name__)


class BadUpload(Exception):
    """The request did not carry a usable image."""


def allowed_file(filename: str) -> bool:
    """Check if file extension is allowed."""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def image_to_base64(image: Image) -> str:
    """Convert Image object to base64 string for JSON response."""
    pil_image = ImageRepository.to_pil(image)
    buffer = BytesIO()
    pil_image.convert('RGB').save(buffer, format='JPEG', quality=int(os.getenv("JPEG_QUALITY", "95")))
    base64_string = base64.b64encode(buffer.getvalue()).decode('utf-8')
    return f"data:image/jpeg;base64,{base64_string}"


def uploaded_image() -> Image:
    if 'image' not in request.files:
        raise BadUpload('No image provided')
    file = request.files['image']
    if file.filename == '':
        raise BadUpload('No file selected')
    filename = secure_filename(file.filename)
    if not allowed_file(filename):
        raise BadUpload(f'Unsupported file type: {file.filename}')
    try:
        return image_service.decode(file.read(), filename)
    except ValueError as e:
        raise BadUpload(str(e))


def triple(name: str):
    raw = request.form.get(name, '')
    try:
        return [float(v) for v in raw.replace(' ', '').split(',') if v != '']
    except ValueError:
        raise BadUpload(f"'{name}' must be comma separated numbers")


def number(name: str, default: float) -> float:
    raw = request.form.get(name)
    if raw is None or raw.strip() == '':
        return float(default)
    try:
        return float(raw)
    except ValueError:
        raise BadUpload(f"'{name}' must be a number, got '{raw}'")


def respond(payload: Dict[str, Any], annotated: Image | None = None):
    if annotated is not None:
        payload['annotated_image'] = image_to_base64(annotated)
    return jsonify(payload)


def run_endpoint(handler):
    """Shared error mapping: bad input -> 400, anything else -> 500."""
    try:
        return handler()
    except (BadUpload, PixelInfoError) as e:
        logger.warning(f"Rejected request on {request.path}: {e}")
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception as e:
        logger.error(f"Error on {request.path}: {e}")
        return jsonify({'success': False, 'message': 'Error processing image'}), 500


@app.route('/api/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok'})


@app.route('/api/blur', methods=['POST'])
def blur():
    def handler():
        image = uploaded_image()
        threshold = number('threshold', config.BLUR_THRESHOLD)
        report = detect_blur(image, threshold)
        return respond({'success': True, 'variance': report.variance,
                        'threshold': report.threshold, 'blurry': report.is_blurry})
    return run_endpoint(handler)


@app.route('/api/blob', methods=['POST'])
def blob():
    def handler():
        image = uploaded_image()
        result = find_blob(image, triple('low'), triple('high'))
        if not result.found:
            return respond({'success': True, 'found': False})
        circle = result.blob.enclosed_by
        return respond({'success': True, 'found': True,
                        'centre': list(circle.centre), 'radius': circle.radius},
                       annotation_service.draw_blob(image, result.blob))
    return run_endpoint(handler)


@app.route('/api/line', methods=['POST'])
def line():
    def handler():
        image = uploaded_image()
        threshold = number('threshold', config.LINE_THRESHOLD)
        estimate = find_vertical_line(image, threshold).estimate
        return respond({'success': True, 'status': estimate.status.value,
                        'offset': estimate.offset, 'orientation': estimate.orientation},
                       annotation_service.draw_line(image, estimate) if estimate.found else None)
    return run_endpoint(handler)


@app.route('/api/shape', methods=['POST'])
def shape():
    def handler():
        image = uploaded_image()
        result = find_quadrilateral(image)
        if not result.found:
            return respond({'success': True, 'found': False})
        return respond({'success': True, 'found': True, 'vertices': result.shape_count,
                        'bounding_rect': list(result.shape.bounding_rect.as_tuple())},
                       annotation_service.draw_shape(image, result.shape))
    return run_endpoint(handler)


@app.route('/api/rectangles', methods=['POST'])
def rectangles():
    def handler():
        image = uploaded_image()
        detector = CascadeEngine(request.form.get('model') or config.CASCADE_MODEL_PATH)
        region = triple('region')
        if region:
            if len(region) != 4:
                raise BadUpload("'region' must be x,y,w,h")
            result = detect_rectangles_absolute(image, Rect.from_xywh(region), detector)
        else:
            result = detect_rectangles(image, detector)
        return respond({'success': True,
                        'rectangles': [list(r.as_tuple()) for r in result.rectangles]},
                       annotation_service.draw_rectangles(image, result.rectangles))
    return run_endpoint(handler)


@app.errorhandler(413)
def too_large(e):
    """Handle file too large error."""
    return jsonify({'error': f'File too large. Maximum size is {MAX_CONTENT_LENGTH // (1024 * 1024)}MB.'}), 413


@app.errorhandler(500)
def internal_error(e):
    """Handle internal server error."""
    logger.error(f"Internal server error: {e}")
    return jsonify({'error': 'Internal server error'}), 500


if __name__ == '__main__':
    logger.info("Starting Information-from-Pixels API server")
    logger.info("Endpoints: /api/blur /api/blob /api/line /api/shape /api/rectangles")
    app.run(debug=False, host='0.0.0.0', port=int(os.getenv("API_SERVER_PORT", "5002")), threaded=False)

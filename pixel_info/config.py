"""
Environment driven defaults for the detection pipelines.
Values come from the process environment (optionally a .env file).
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Blur-quality detector
BLUR_THRESHOLD = float(os.getenv("BLUR_THRESHOLD", "100.0"))

# Color-blob detector
BLOB_BLUR_KERNEL = int(os.getenv("BLOB_BLUR_KERNEL", "11"))
BLOB_MORPH_KERNEL = int(os.getenv("BLOB_MORPH_KERNEL", "3"))
BLOB_MORPH_ITERATIONS = int(os.getenv("BLOB_MORPH_ITERATIONS", "2"))

# Vertical-line detector
LINE_THRESHOLD = float(os.getenv("LINE_THRESHOLD", "45.0"))
LINE_MIN_ROWS = int(os.getenv("LINE_MIN_ROWS", "4"))
LINE_SAMPLE_DIVISOR = int(os.getenv("LINE_SAMPLE_DIVISOR", "40"))
LINE_MAX_SAMPLE = int(os.getenv("LINE_MAX_SAMPLE", "8"))

# Quadrilateral detector
SHAPE_BLUR_KERNEL = int(os.getenv("SHAPE_BLUR_KERNEL", "5"))
CANNY_LOW = float(os.getenv("CANNY_LOW", "75"))
CANNY_HIGH = float(os.getenv("CANNY_HIGH", "200"))
POLY_EPSILON = float(os.getenv("POLY_EPSILON", "0.01"))

# Rectangle detector adapter
CASCADE_MODEL_PATH = os.getenv("CASCADE_MODEL_PATH")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = '%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s'
LOG_DATEFMT = '%H:%M:%S'

"""
pixel_info - geometric descriptors from raw pixels.

Pure numpy primitives (color space, filtering, morphology, thresholding,
contours) plus the detection pipelines built on top of them.
"""

__version__ = "1.0.0"

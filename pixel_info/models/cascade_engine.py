from __future__ import annotations
from pathlib import Path
from typing import Dict, List
import logging
import cv2
import numpy as np

from .. import config

logger = logging.getLogger(__name__)


class CascadeEngine:
    """
    Per-model singleton around OpenCV's CascadeClassifier (Haar / LBP).

    The model file is loaded once per path; the core only ever sees the
    rectangles that `detect` returns.
    """

    _instances: Dict[str, CascadeEngine] = {}  # Class-level cache, keyed by model path

    def __new__(cls, model_path: str | Path | None = None):
        """
        Args:
            model_path (str | Path, optional): Cascade XML file. Defaults to CASCADE_MODEL_PATH.
        """
        if model_path is None:
            model_path = config.CASCADE_MODEL_PATH
        if not model_path:
            raise FileNotFoundError("No cascade model configured (set CASCADE_MODEL_PATH)")
        key = str(Path(model_path))
        if key not in cls._instances:
            instance = super().__new__(cls)
            instance._init_engine(key)
            cls._instances[key] = instance
        return cls._instances[key]

    def _init_engine(self, model_path: str):
        if not Path(model_path).is_file():
            raise FileNotFoundError(f"Cascade model not found: {model_path}")
        self.model_path = model_path
        self.classifier = cv2.CascadeClassifier(model_path)
        if self.classifier.empty():
            raise ValueError(f"Cascade model could not be loaded: {model_path}")
        logger.info(f"Cascade model loaded: {model_path}")

    def detect(self, pixels: np.ndarray) -> List[tuple]:
        """Raw detectMultiScale output as (x, y, w, h) tuples."""
        found = self.classifier.detectMultiScale(pixels)
        return [tuple(int(v) for v in r) for r in found]

"""
predictor.py — Sign Character Prediction & Model Loading
---------------------------------------------------------

Owns the three pieces of prediction state shared by the pages and the API:

* the loaded model handle (`model`)
* the progress status (`status`)
* the name of the file being classified (`current_file`)

Prediction modes (PREDICTION_MODE):

* `auto` / `model` — run the configured model; if it cannot be loaded the
  predictor latches into demo mode and never retries
* `demo` — random label, confidence in [0.75, 0.99)
* `filename` — label read from the uploaded file name, with a confidence
  that is stable for a given name; falls back to demo when no label is found

Dependencies:
- NumPy
- PIL (Pillow)
- pydantic (result model)
"""

from __future__ import annotations

import hashlib
import logging
import random
import re
from pathlib import PurePath
from typing import Callable, Literal, Optional

import numpy as np
from PIL import Image
from pydantic import BaseModel

from config.settings import (
    DEMO_CONFIDENCE_MAX,
    DEMO_CONFIDENCE_MIN,
    MODEL_INPUT_SIZE,
    PREDICTION_MODE,
)
from core.exception import PredictionError
from core.labels import CLASSES, NUM_CLASSES, is_label, label_for_index
from tools.image_utils import to_input_batch

logger = logging.getLogger(__name__)

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_DEMO = "demo"
STATUS_PROCESSING = "processing"
STATUS_DONE = "done"
STATUS_ERROR = "error"

MODES = ("auto", "model", "demo", "filename")


class Prediction(BaseModel):
    prediction: str
    confidence: float
    mode: Literal["demo", "filename", "model"]
    filename: Optional[str] = None


def label_from_filename(filename: str | None) -> str | None:
    """
    Read a sign label out of a file name, e.g. `sign_a.jpg`, `hand-7.png`, `b.jpeg`.

    The last single-character token that is a label wins; failing that, a
    leading label character followed by a separator.
    """
    if not filename:
        return None
    stem = PurePath(filename).stem.lower()
    tokens = [t for t in re.split(r"[^0-9a-z]+", stem) if t]
    for token in reversed(tokens):
        if len(token) == 1 and is_label(token):
            return token
    if stem and is_label(stem[0]) and (len(stem) == 1 or not stem[1].isalnum()):
        return stem[0]
    return None


def filename_confidence(filename: str) -> float:
    digest = hashlib.sha256(filename.encode("utf-8")).digest()
    fraction = int.from_bytes(digest[:8], "big") / float(1 << 64)
    return DEMO_CONFIDENCE_MIN + fraction * (DEMO_CONFIDENCE_MAX - DEMO_CONFIDENCE_MIN)


def _default_loader():
    from tools.model_loader import load_configured_model
    return load_configured_model()


class SignPredictor:
    """
    Load-once predictor for the 36 sign characters.

    Args:
        mode: One of MODES (defaults to PREDICTION_MODE)
        loader: Zero-arg callable returning a backend `fn(batch) -> probs`
        input_size: Square input edge fed to the model
        rng: random.Random used for demo guesses
    """

    def __init__(
        self,
        mode: str | None = None,
        loader: Callable[[], Callable[[np.ndarray], np.ndarray]] | None = None,
        input_size: int = MODEL_INPUT_SIZE,
        rng: random.Random | None = None,
    ):
        self.mode = (mode or PREDICTION_MODE or "auto").lower()
        if self.mode not in MODES:
            raise ValueError(f"Unknown prediction mode '{self.mode}', expected one of {MODES}")
        self.loader = loader or _default_loader
        self.input_size = input_size
        self.rng = rng or random.Random()

        self.model = None
        self.status = STATUS_IDLE
        self.current_file: str | None = None
        self.demo_mode = self.mode == "demo"

    # --- Loading -----------------------------------------------------------

    def load_model(self):
        if self.model is not None or self.demo_mode:
            return self.model

        self.status = STATUS_LOADING
        try:
            self.model = self.loader()
        except Exception as e:
            # Any load failure latches demo mode for the life of the predictor
            logger.warning("Model not found - running in DEMO MODE (%s)", e)
            self.model = None
            self.demo_mode = True
            self.status = STATUS_DEMO
            return None

        logger.info("Model loaded successfully")
        self.status = STATUS_READY
        return self.model

    @property
    def is_demo(self) -> bool:
        return self.demo_mode or self.mode in ("demo", "filename")

    # --- Prediction --------------------------------------------------------

    def demo_prediction(self, filename: str | None = None) -> Prediction:
        idx = self.rng.randrange(NUM_CLASSES)
        confidence = DEMO_CONFIDENCE_MIN + self.rng.random() * (DEMO_CONFIDENCE_MAX - DEMO_CONFIDENCE_MIN)
        return Prediction(prediction=CLASSES[idx], confidence=confidence, mode="demo", filename=filename)

    def filename_prediction(self, filename: str | None) -> Prediction:
        label = label_from_filename(filename)
        if label is None:
            logger.info("No label in file name %r, using demo guess", filename)
            return self.demo_prediction(filename)
        return Prediction(
            prediction=label,
            confidence=filename_confidence(filename),
            mode="filename",
            filename=filename,
        )

    def model_prediction(self, image: Image.Image, filename: str | None = None) -> Prediction:
        batch = to_input_batch(image, self.input_size)
        probs = np.asarray(self.model(batch), dtype=np.float64).reshape(-1)
        if probs.shape[0] != NUM_CLASSES:
            raise PredictionError(f"Model returned {probs.shape[0]} scores, expected {NUM_CLASSES}")
        idx = int(np.argmax(probs))
        return Prediction(
            prediction=label_for_index(idx),
            confidence=float(probs[idx]),
            mode="model",
            filename=filename,
        )

    def predict(self, image: Image.Image | None, filename: str | None = None) -> Prediction:
        """
        Classify one image.

        Args:
            image: Decoded RGB image (unused in demo and filename modes)
            filename: Original upload name

        Returns:
            Prediction with label, confidence and the mode that produced it
        """
        self.current_file = filename
        self.status = STATUS_PROCESSING
        try:
            if self.mode == "demo":
                result = self.demo_prediction(filename)
            elif self.mode == "filename":
                result = self.filename_prediction(filename)
            else:
                self.load_model()
                if self.model is None:
                    result = self.demo_prediction(filename)
                else:
                    if image is None:
                        raise PredictionError("No image to classify")
                    result = self.model_prediction(image, filename)
        except Exception:
            self.status = STATUS_ERROR
            raise

        self.status = STATUS_DONE
        logger.info("Predicted %r (%.3f) via %s for %s", result.prediction, result.confidence, result.mode, filename)
        return result

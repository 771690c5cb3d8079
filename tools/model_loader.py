# tools/model_loader.py
import hashlib
import logging
from pathlib import Path
from typing import Callable

import numpy as np
import requests

from config.settings import MODEL_PATH, MODEL_SHA256, MODEL_URL, TMP_DIR, ensure_dirs

logger = logging.getLogger(__name__)

# A backend takes a (1, H, W, 3) float batch and returns class probabilities
Backend = Callable[[np.ndarray], np.ndarray]


def _download_to_tmp_from_url(url: str) -> Path:
    ensure_dirs(TMP_DIR)
    dest = TMP_DIR / Path(url.split("?")[0]).name
    if dest.exists():
        return dest
    with requests.get(url, stream=True, timeout=60) as r:
        r.raise_for_status()
        with open(dest, "wb") as f:
            for chunk in r.iter_content(1 << 20):
                if chunk:
                    f.write(chunk)
    return dest

def _sha256(path: Path) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1 << 20), b""):
            h.update(chunk)
    return h.hexdigest()


def resolve_model_path(
    model_path: str | Path | None = None,
    model_url: str | None = None,
    expected_sha256: str | None = None,
) -> Path:
    """
    Local model file to load. A configured URL wins over the local path and is
    downloaded once into TMP_DIR.
    """
    url = model_url if model_url is not None else MODEL_URL
    if url:
        path = _download_to_tmp_from_url(url)
    else:
        path = Path(model_path or MODEL_PATH)

    if not path.exists():
        raise FileNotFoundError(f"Model not found at {path}")

    expected = expected_sha256 if expected_sha256 is not None else MODEL_SHA256
    if expected:
        actual = _sha256(path)
        if actual != expected:
            raise ValueError(f"Model checksum mismatch: {actual} != {expected}")
    return path


# --- Backends --------------------------------------------------------------
# Frameworks are imported lazily so demo and filename modes stay light.

def _load_keras(path: Path) -> Backend:
    import tensorflow as tf
    model = tf.keras.models.load_model(str(path))

    def run(batch: np.ndarray) -> np.ndarray:
        return np.asarray(model.predict(batch, verbose=0))[0]
    return run

def _load_tfjs(path: Path) -> Backend:
    from tensorflowjs.converters import load_keras_model
    model = load_keras_model(str(path))

    def run(batch: np.ndarray) -> np.ndarray:
        return np.asarray(model.predict(batch, verbose=0))[0]
    return run

def _load_torch(path: Path) -> Backend:
    import torch
    model = torch.load(path, map_location="cpu", weights_only=False)
    if hasattr(model, "eval"):
        model.eval()

    def run(batch: np.ndarray) -> np.ndarray:
        # NHWC -> NCHW
        x = torch.from_numpy(np.ascontiguousarray(batch.transpose(0, 3, 1, 2)))
        with torch.no_grad():
            logits = model(x)
            probs = torch.softmax(logits, dim=1)[0]
        return probs.detach().cpu().numpy()
    return run


BACKENDS: dict[str, Callable[[Path], Backend]] = {
    ".keras": _load_keras,
    ".h5": _load_keras,
    ".json": _load_tfjs,
    ".pt": _load_torch,
    ".pth": _load_torch,
}


def load_backend(path: str | Path) -> Backend:
    path = Path(path)
    loader = BACKENDS.get(path.suffix.lower())
    if loader is None:
        raise ValueError(f"No inference backend for '{path.suffix}' files ({path.name})")
    logger.info("Loading %s model from %s", path.suffix, path)
    return loader(path)


def load_configured_model() -> Backend:
    """Resolve the configured model (local or remote) and load it."""
    return load_backend(resolve_model_path())



import hashlib

import numpy as np
import pytest

from tools import model_loader
from tools.model_loader import load_backend, resolve_model_path


def test_resolve_local_path_with_checksum(tmp_path):
    path = tmp_path / "model.keras"
    path.write_bytes(b"weights")
    digest = hashlib.sha256(b"weights").hexdigest()

    assert resolve_model_path(path, model_url="", expected_sha256=digest) == path


def test_checksum_mismatch(tmp_path):
    path = tmp_path / "model.keras"
    path.write_bytes(b"weights")
    with pytest.raises(ValueError):
        resolve_model_path(path, model_url="", expected_sha256="0" * 64)


def test_missing_local_model(tmp_path):
    with pytest.raises(FileNotFoundError):
        resolve_model_path(tmp_path / "model.json", model_url="", expected_sha256="")


def test_url_download_is_cached(tmp_path, monkeypatch):
    monkeypatch.setattr(model_loader, "TMP_DIR", tmp_path)
    cached = tmp_path / "sanket.pt"
    cached.write_bytes(b"cached")

    def no_network(*args, **kwargs):
        raise AssertionError("should not download when cached")

    monkeypatch.setattr(model_loader.requests, "get", no_network)
    assert resolve_model_path(model_url="https://example.com/models/sanket.pt?x=1", expected_sha256="") == cached


def test_backend_chosen_by_suffix(tmp_path, monkeypatch):
    def fake_loader(path):
        return lambda batch: np.zeros(36)

    monkeypatch.setitem(model_loader.BACKENDS, ".keras", fake_loader)
    backend = load_backend(tmp_path / "model.keras")
    assert backend(np.zeros((1, 4, 4, 3))).shape == (36,)


def test_unknown_suffix(tmp_path):
    with pytest.raises(ValueError):
        load_backend(tmp_path / "model.onnx")

import json
import os
from io import BytesIO

import pytest
from PIL import Image

# Keep tests independent of a developer's .env
os.environ.setdefault("PREDICTION_MODE", "auto")
os.environ.setdefault("UPLOAD_PROCESSING_DELAY", "0")
os.environ.setdefault("TMP_DIR", "/tmp/sanket-tests")


def _tensor(layer, node=0, index=0):
    return {
        "class_name": "__keras_tensor__",
        "config": {"shape": [None, 8], "dtype": "float32", "keras_history": [layer, node, index]},
    }


def _policy(name="float32"):
    return {"module": "keras", "class_name": "DTypePolicy", "config": {"name": name}, "registered_name": None}


@pytest.fixture
def keras3_model():
    """A small Keras 3 export: input → conv → dense branch → add merge."""
    return {
        "format": "layers-model",
        "generatedBy": "keras v3.5.0",
        "convertedBy": "TensorFlow.js Converter v4.20.0",
        "modelTopology": {
            "class_name": "Functional",
            "model_config": {
                "class_name": "Functional",
                "config": {
                    "name": "sign_model",
                    "layers": [
                        {
                            "class_name": "InputLayer",
                            "name": "input_layer",
                            "config": {"batch_shape": [None, 224, 224, 3], "dtype": "float32", "name": "input_layer"},
                            "inbound_nodes": [],
                        },
                        {
                            "class_name": "Conv2D",
                            "name": "conv",
                            "config": {"name": "conv", "filters": 8, "dtype": _policy()},
                            "inbound_nodes": [{"args": [_tensor("input_layer")], "kwargs": {}}],
                        },
                        {
                            "class_name": "Dense",
                            "name": "branch",
                            "config": {"name": "branch", "units": 8, "dtype": {"class_name": "DTypePolicy", "config": {}}},
                            "inbound_nodes": [{"args": _tensor("conv"), "kwargs": {}}],
                        },
                        {
                            "class_name": "Add",
                            "name": "add",
                            "config": {"name": "add", "dtype": "float32"},
                            "inbound_nodes": [{"args": [[_tensor("conv"), _tensor("branch")]], "kwargs": {}}],
                        },
                    ],
                },
            },
        },
        "weightsManifest": [{"paths": ["group1-shard1of1.bin"], "weights": [{"name": "conv/kernel", "shape": [3, 3, 3, 8], "dtype": "float32"}]}],
    }


@pytest.fixture
def model_file(tmp_path, keras3_model):
    path = tmp_path / "model.json"
    path.write_text(json.dumps(keras3_model), encoding="utf-8")
    return path


def make_png(color=(200, 120, 40), size=(32, 24)) -> bytes:
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes():
    return make_png()

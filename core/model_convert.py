"""
model_convert.py — Keras 3 → TensorFlow.js Layers Topology Patcher
-------------------------------------------------------------------

Keras 3 exports a `model.json` whose layer graph TensorFlow.js cannot read.
This module rewrites the topology in place into the legacy Layers schema:

* InputLayer `batch_shape` → `batch_input_shape`
* dtype policy objects → plain dtype strings
* `{args, kwargs}` inbound nodes with `__keras_tensor__` references →
  nested `[[layer_name, node_index, tensor_index, {}]]` arrays

Everything outside `modelTopology.model_config.config.layers` (weights
manifest, format, generator info) is left untouched.

`convert_model_file` wraps the patch with the backup/restore workflow:
the first run saves the untouched export, later runs re-read that backup
so repeated conversions always produce the same file.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from core.exception import ModelFormatError

logger = logging.getLogger(__name__)

KERAS_TENSOR = "__keras_tensor__"
DEFAULT_DTYPE = "float32"
DEFAULT_BACKUP_NAME = "model_original.json"


class ConversionResult(BaseModel):
    model: Any
    total_layers: int
    converted_layers: int
    changed: list[str] = []


# -------------------------------------------------------------------------
# Inbound node conversion
# -------------------------------------------------------------------------

def is_keras_tensor(obj: Any) -> bool:
    return (
        isinstance(obj, dict)
        and obj.get("class_name") == KERAS_TENSOR
        and isinstance(obj.get("config"), dict)
        and "keras_history" in obj["config"]
    )


def keras_history(tensor: Any) -> list | None:
    """Return [layer_name, node_index, tensor_index] for a tensor reference, else None."""
    if not is_keras_tensor(tensor):
        return None
    return tensor["config"]["keras_history"]


def to_node_ref(tensor: Any):
    """Legacy node reference for a Keras 3 tensor; non-tensors pass through."""
    history = keras_history(tensor)
    if history is None:
        return tensor
    name, node_index, tensor_index = history[0], history[1], history[2]
    return [name, node_index, tensor_index, {}]


def convert_inbound_node(node: Any):
    """
    Convert a single inbound node.

    Already-legacy (list) nodes and anything unrecognised are returned as-is.
    """
    if isinstance(node, list) or not isinstance(node, dict) or "args" not in node:
        return node

    args = node["args"]

    # Single tensor argument
    if is_keras_tensor(args):
        return [to_node_ref(args)]

    if isinstance(args, list) and args:
        # Merge layers (Add, Concatenate, ...) receive one list of tensors
        if len(args) == 1 and isinstance(args[0], list):
            return [[to_node_ref(t) for t in args[0]]]
        # Single tensor wrapped in the positional args
        if is_keras_tensor(args[0]):
            return [to_node_ref(args[0])]

    return node


def convert_inbound_nodes(nodes: Any):
    if not isinstance(nodes, list):
        return nodes
    return [convert_inbound_node(n) for n in nodes]


# -------------------------------------------------------------------------
# Layer patches
# -------------------------------------------------------------------------

def _fix_input_layer(layer: dict) -> bool:
    config = layer.get("config")
    if layer.get("class_name") != "InputLayer" or not isinstance(config, dict):
        return False
    if "batch_shape" in config and "batch_input_shape" not in config:
        config["batch_input_shape"] = config.pop("batch_shape")
        return True
    return False


def _fix_dtype(layer: dict) -> bool:
    config = layer.get("config")
    if not isinstance(config, dict) or not isinstance(config.get("dtype"), dict):
        return False
    policy = config["dtype"]
    name = None
    if isinstance(policy.get("config"), dict):
        name = policy["config"].get("name")
    config["dtype"] = name or DEFAULT_DTYPE
    return True


def _fix_inbound_nodes(layer: dict) -> bool:
    nodes = layer.get("inbound_nodes")
    if not isinstance(nodes, list) or not nodes:
        return False
    converted = convert_inbound_nodes(nodes)
    if converted != nodes:
        layer["inbound_nodes"] = converted
        return True
    return False


def patch_layer(layer: dict) -> bool:
    """Apply all fixes to one layer in place. Returns True if anything changed."""
    if not isinstance(layer, dict):
        return False
    changed = _fix_input_layer(layer)
    changed = _fix_dtype(layer) or changed
    changed = _fix_inbound_nodes(layer) or changed
    return changed


def get_layers(model_json: dict) -> list:
    try:
        layers = model_json["modelTopology"]["model_config"]["config"]["layers"]
    except (KeyError, TypeError) as e:
        raise ModelFormatError(f"model.json has no modelTopology.model_config.config.layers ({e!r})") from e
    if not isinstance(layers, list):
        raise ModelFormatError("modelTopology.model_config.config.layers is not a list")
    return layers


def convert_topology(model_json: dict, *, inplace: bool = False) -> ConversionResult:
    """
    Convert a Keras 3 model.json document to the TF.js Layers schema.

    Args:
        model_json: Parsed model.json
        inplace: Mutate the given document instead of a deep copy

    Returns:
        ConversionResult with the converted document and layer counts
    """
    model = model_json if inplace else copy.deepcopy(model_json)
    layers = get_layers(model)

    changed = []
    for idx, layer in enumerate(layers):
        if patch_layer(layer):
            config = layer.get("config") if isinstance(layer.get("config"), dict) else {}
            name = layer.get("name") or config.get("name") or f"layer_{idx}"
            changed.append(name)
            logger.debug("Patched layer %s (%s)", name, layer.get("class_name"))

    return ConversionResult(
        model=model,
        total_layers=len(layers),
        converted_layers=len(changed),
        changed=changed,
    )


# -------------------------------------------------------------------------
# File workflow
# -------------------------------------------------------------------------

def read_model_json(path: str | Path) -> dict:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model description not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ModelFormatError(f"{path} is not valid JSON: {e}") from e


def write_model_json(model: dict, path: str | Path, *, pretty: bool = False) -> None:
    with open(path, "w", encoding="utf-8") as f:
        if pretty:
            json.dump(model, f, indent=2)
        else:
            json.dump(model, f, separators=(",", ":"))


def verify_model_file(path: str | Path) -> dict:
    """Re-read a converted file and summarise the first two layers."""
    layers = get_layers(read_model_json(path))
    first = layers[0] if layers and isinstance(layers[0], dict) else {}
    second = layers[1] if len(layers) > 1 and isinstance(layers[1], dict) else {}
    first_config = first.get("config") if isinstance(first.get("config"), dict) else {}
    return {
        "first_layer": first.get("class_name"),
        "has_batch_input_shape": bool(first_config.get("batch_input_shape")),
        "second_layer_inbound_nodes": second.get("inbound_nodes"),
    }


def convert_model_file(
    model_path: str | Path,
    backup_path: str | Path | None = None,
    *,
    make_backup: bool = True,
    dry_run: bool = False,
) -> tuple[ConversionResult, dict | None]:
    """
    Convert model.json on disk.

    If a backup exists it is used as the source, otherwise the current file is
    read and (unless make_backup is False) saved as the backup first. The
    converted document is written minified over model_path.

    Returns:
        (ConversionResult, verification summary or None on dry run)
    """
    model_path = Path(model_path)
    backup_path = Path(backup_path) if backup_path else model_path.with_name(DEFAULT_BACKUP_NAME)

    if make_backup and backup_path.exists():
        print(f"📦 Using original backup: {backup_path.name}")
        source = read_model_json(backup_path)
    else:
        source = read_model_json(model_path)
        if make_backup and not dry_run:
            write_model_json(source, backup_path, pretty=True)
            print(f"📦 Created backup: {backup_path.name}")

    result = convert_topology(source, inplace=True)
    print(f"🔧 Converted {result.converted_layers} of {result.total_layers} layers")

    if dry_run:
        return result, None

    write_model_json(result.model, model_path)
    logger.info("Wrote converted model to %s", model_path)
    return result, verify_model_file(model_path)

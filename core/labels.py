"""
labels.py — Sign Character Label Table
--------------------------------------

The classifier emits 36 probabilities in a fixed order: digits first,
then lowercase letters. This module is the single index-to-label lookup
shared by the predictor, the API and the UI.
"""

import string

CLASSES = list(string.digits) + list(string.ascii_lowercase)

NUM_CLASSES = len(CLASSES)

_INDEX = {label: i for i, label in enumerate(CLASSES)}


def get_classes() -> list[str]:
    return list(CLASSES)


def label_for_index(index: int) -> str:
    if not 0 <= index < NUM_CLASSES:
        raise IndexError(f"Class index {index} out of range 0..{NUM_CLASSES - 1}")
    return CLASSES[index]


def index_for_label(label: str) -> int:
    try:
        return _INDEX[str(label).strip().lower()]
    except KeyError:
        raise KeyError(f"Unknown sign label: {label!r}") from None


def is_label(value: str) -> bool:
    return str(value).lower() in _INDEX

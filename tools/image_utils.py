"""
image_utils.py — Upload Validation & Image Preprocessing
---------------------------------------------------------

Helpers shared by the Streamlit pages and the upload API:

* MIME checks for image/video uploads (guessed from the file name when the
  client sends no content type)
* Upload size limit
* Decoding uploaded bytes into a PIL image
* Converting an image into the (1, H, W, 3) float batch the classifier expects

Dependencies:
- PIL (Pillow)
- NumPy
"""

import mimetypes
from io import BytesIO

import numpy as np
from PIL import Image, UnidentifiedImageError

from core.exception import (
    MissingFileError,
    PredictionError,
    UnsupportedMediaTypeError,
    UploadTooLargeError,
)


def resolve_content_type(content_type: str | None, filename: str | None = None) -> str | None:
    if content_type and content_type != "application/octet-stream":
        return content_type
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        return guessed
    return content_type


def check_media_type(content_type: str | None, filename: str | None = None, expected: str | tuple = "image") -> str:
    """
    Ensure an upload is of the expected top-level MIME type.

    Args:
        content_type: MIME type sent by the client, may be empty
        filename: Used to guess the type when content_type is missing
        expected: "image", "video", or a tuple of accepted prefixes

    Returns:
        str: The resolved content type

    Raises:
        UnsupportedMediaTypeError: When the type does not match
    """
    accepted = (expected,) if isinstance(expected, str) else tuple(expected)
    resolved = resolve_content_type(content_type, filename)
    if not resolved or not any(resolved.startswith(f"{kind}/") for kind in accepted):
        raise UnsupportedMediaTypeError(resolved, expected=accepted[0] if len(accepted) == 1 else "image or video")
    return resolved


def check_upload_size(data: bytes, max_mb: int) -> None:
    if not data:
        raise MissingFileError("Uploaded file is empty")
    if max_mb and len(data) > max_mb * 1024 * 1024:
        raise UploadTooLargeError(
            f"Upload of {len(data)} bytes exceeds {max_mb} MB",
            user_message=f"File is too large (max {max_mb}MB)",
        )


def open_image(data: bytes) -> Image.Image:
    """Decode uploaded bytes into an RGB PIL image."""
    if not data:
        raise MissingFileError("No image data")
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise PredictionError(f"Could not open image: {e}", user_message="Could not read the image file") from e
    return img.convert("RGB")


def to_input_batch(img: Image.Image, size: int = 224) -> np.ndarray:
    """
    Nearest-neighbour resize to size×size, scale to [0, 1], add batch axis.
    """
    resized = img.convert("RGB").resize((size, size), Image.NEAREST)
    arr = np.asarray(resized, dtype=np.float32) / 255.0
    return np.expand_dims(arr, axis=0)

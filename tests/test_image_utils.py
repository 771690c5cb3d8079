import numpy as np
import pytest
from PIL import Image

from core.exception import (
    MissingFileError,
    PredictionError,
    UnsupportedMediaTypeError,
    UploadTooLargeError,
)
from core.upload import process_upload
from tools.image_utils import (
    check_media_type,
    check_upload_size,
    open_image,
    resolve_content_type,
    to_input_batch,
)


def test_content_type_guessed_from_name():
    assert resolve_content_type(None, "hand.jpg") == "image/jpeg"
    assert resolve_content_type("application/octet-stream", "clip.mp4") == "video/mp4"
    assert resolve_content_type("image/png", "clip.mp4") == "image/png"


def test_check_media_type():
    assert check_media_type("image/png") == "image/png"
    assert check_media_type(None, "a.gif") == "image/gif"
    assert check_media_type("video/mp4", expected=("video", "image")) == "video/mp4"


def test_wrong_media_type_messages():
    with pytest.raises(UnsupportedMediaTypeError) as exc:
        check_media_type("video/mp4", expected="image")
    assert exc.value.user_message == "Please upload an image file"

    with pytest.raises(UnsupportedMediaTypeError) as exc:
        check_media_type("image/png", expected="video")
    assert exc.value.user_message == "Please upload a video file"

    with pytest.raises(UnsupportedMediaTypeError):
        check_media_type(None, None)


def test_upload_size_limits():
    check_upload_size(b"x" * 1024, 1)
    with pytest.raises(MissingFileError):
        check_upload_size(b"", 1)
    with pytest.raises(UploadTooLargeError) as exc:
        check_upload_size(b"x" * (1024 * 1024 + 1), 1)
    assert exc.value.user_message == "File is too large (max 1MB)"


def test_open_image_converts_to_rgb(png_bytes):
    img = open_image(png_bytes)
    assert img.mode == "RGB"
    assert img.size == (32, 24)


def test_open_image_rejects_garbage():
    with pytest.raises(PredictionError):
        open_image(b"definitely not a png")
    with pytest.raises(MissingFileError):
        open_image(b"")


def test_to_input_batch():
    img = Image.new("RGB", (10, 20), (255, 0, 51))
    batch = to_input_batch(img, size=8)
    assert batch.shape == (1, 8, 8, 3)
    assert batch.dtype == np.float32
    np.testing.assert_allclose(batch[0, 0, 0], [1.0, 0.0, 0.2], rtol=1e-6)


def test_to_input_batch_uses_nearest_neighbour():
    img = Image.new("RGB", (2, 1))
    img.putpixel((0, 0), (0, 0, 0))
    img.putpixel((1, 0), (255, 255, 255))
    batch = to_input_batch(img, size=4)
    # Bilinear resizing would blend the two pixels into greys
    assert set(np.unique(batch).tolist()) == {0.0, 1.0}
    np.testing.assert_array_equal(batch[0, :, 0], 0.0)
    np.testing.assert_array_equal(batch[0, :, 3], 1.0)


def test_process_upload_validates_then_answers():
    response = process_upload("clip.mp4", "video/mp4", b"data", delay=0)
    assert response.success and response.audioUrl == "/audio/sample_audio.mp3"

    with pytest.raises(MissingFileError):
        process_upload(None, None, None, delay=0)
    with pytest.raises(UnsupportedMediaTypeError) as exc:
        process_upload("notes.txt", "text/plain", b"hi", delay=0)
    assert exc.value.user_message == "Please upload an image or video file"

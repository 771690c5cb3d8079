"""
upload.py — Sign Language Video → Audio (simulated)
----------------------------------------------------

Backs the `/api/upload` endpoint and the video page. There is no video
model yet: after validating the upload and waiting a fixed processing delay
the service answers with a canned transcription and sample audio track.
"""

import logging
import time
from typing import Optional

from pydantic import BaseModel

from config.settings import MAX_UPLOAD_MB, UPLOAD_PROCESSING_DELAY
from core.exception import MissingFileError
from tools.image_utils import check_media_type, check_upload_size

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
ACCEPTED_MEDIA = ("video", "image")

SAMPLE_AUDIO_URL = "/audio/sample_audio.mp3"
SAMPLE_TRANSCRIPTION = "Wellcome to sanket, please upload your video to translate sign language"


class UploadResponse(BaseModel):
    success: bool = True
    audioUrl: str = SAMPLE_AUDIO_URL
    transcription: str = SAMPLE_TRANSCRIPTION
    processingTime: str = "2.3 seconds"
    confidence: float = 0.95
    message: str = "Sign language successfully converted to audio"


class UploadError(BaseModel):
    success: bool = False
    error: str
    message: str
    detail: Optional[str] = None


def api_info() -> dict:
    return {
        "message": "Sign Language to Audio API",
        "version": API_VERSION,
        "endpoints": {
            "upload": "POST /api/upload - Upload sign language video for conversion",
        },
    }


def process_upload(
    filename: str | None,
    content_type: str | None,
    data: bytes | None,
    delay: float | None = None,
    max_mb: int = MAX_UPLOAD_MB,
) -> UploadResponse:
    """
    Validate an uploaded sign-language clip and return the canned conversion.

    Raises:
        MissingFileError: No file or an empty file
        UnsupportedMediaTypeError: Not an image/* or video/* upload
        UploadTooLargeError: Over the configured size limit
    """
    if not filename and not data:
        raise MissingFileError("No file uploaded")
    resolved = check_media_type(content_type, filename, expected=ACCEPTED_MEDIA)
    check_upload_size(data or b"", max_mb)

    wait = UPLOAD_PROCESSING_DELAY if delay is None else delay
    logger.info("Processing upload %s (%s, %d bytes)", filename, resolved, len(data or b""))
    if wait > 0:
        time.sleep(wait)
    return UploadResponse()

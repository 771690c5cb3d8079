# api/server.py
"""
Sanket upload API
=================
  • POST /api/upload          — multipart sign-language clip → canned transcription + audio URL
  • GET  /api/upload          — API description
  • POST /api/predict         — multipart hand-sign photo → character + confidence
  • GET  /tfjs_model/model.json — converted browser model description
  • GET  /audio/*             — sample audio

Run:
    uvicorn api.server:app --host 0.0.0.0 --port 8000
"""

import asyncio
import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
import uvicorn

from config.settings import (
    API_HOST,
    API_PORT,
    AUDIO_DIR,
    MAX_UPLOAD_MB,
    MODEL_JSON_PATH,
    UPLOAD_PROCESSING_DELAY,
    configure_logging,
)
from core.exception import (
    MissingFileError,
    PredictionError,
    SanketError,
    UnsupportedMediaTypeError,
    UploadTooLargeError,
    custom_exception_hook,
)
from core.predictor import Prediction, SignPredictor
from core.upload import UploadError, UploadResponse, api_info, process_upload
from tools.image_utils import check_media_type, check_upload_size, open_image

configure_logging()
logger = logging.getLogger(__name__)

# --------------- API app + CORS ----------------
app = FastAPI(title="Sanket Sign Language API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/audio", StaticFiles(directory=str(AUDIO_DIR), check_dir=False), name="audio")


@lru_cache(maxsize=1)
def get_predictor() -> SignPredictor:
    return SignPredictor()


# --------------- helpers ----------------
_STATUS_FOR = {
    MissingFileError: 400,
    PredictionError: 400,
    UploadTooLargeError: 413,
    UnsupportedMediaTypeError: 415,
}

_ERROR_FOR = {
    MissingFileError: "No file uploaded",
    PredictionError: "Failed to process image",
    UploadTooLargeError: "File too large",
    UnsupportedMediaTypeError: "Unsupported media type",
}


def _error_response(exc: SanketError) -> JSONResponse:
    status = _STATUS_FOR.get(type(exc), 400)
    body = UploadError(
        error=_ERROR_FOR.get(type(exc), "Bad request"),
        message=exc.user_message,
        detail=str(exc),
    )
    return JSONResponse(body.model_dump(), status_code=status)


async def _read(file: Optional[UploadFile]) -> tuple[str | None, str | None, bytes]:
    if file is None:
        raise MissingFileError("No file uploaded")
    return file.filename, file.content_type, await file.read()


def _predict_image(predictor: SignPredictor, filename, content_type, data: bytes) -> Prediction:
    # Image decode and inference are CPU-bound; callers run this in a worker thread
    check_media_type(content_type, filename, expected="image")
    check_upload_size(data, MAX_UPLOAD_MB)
    image = open_image(data)
    return predictor.predict(image, filename=filename)


# --------------- endpoints ----------------
@app.get("/api/upload")
def upload_info():
    return api_info()


@app.post("/api/upload", response_model=UploadResponse)
async def upload(file: Optional[UploadFile] = File(None)):
    """
    Accept a sign-language video (or photo) and return the converted audio.
    The conversion is simulated: fixed delay, canned payload.
    """
    try:
        filename, content_type, data = await _read(file)
        response = process_upload(filename, content_type, data, delay=0, max_mb=MAX_UPLOAD_MB)
        if UPLOAD_PROCESSING_DELAY > 0:
            await asyncio.sleep(UPLOAD_PROCESSING_DELAY)
        return response
    except SanketError as e:
        return _error_response(e)
    except Exception as e:
        custom_exception_hook(type(e), e, e.__traceback__)
        body = UploadError(
            error="Failed to process video",
            message="An error occurred while converting your sign language video",
        )
        return JSONResponse(body.model_dump(), status_code=500)


@app.post("/api/predict", response_model=Prediction)
async def predict(
    file: Optional[UploadFile] = File(None),
    predictor: SignPredictor = Depends(get_predictor),
):
    try:
        filename, content_type, data = await _read(file)
        return await run_in_threadpool(_predict_image, predictor, filename, content_type, data)
    except SanketError as e:
        return _error_response(e)


@app.get("/tfjs_model/model.json")
def model_description():
    if not MODEL_JSON_PATH.exists():
        return JSONResponse({"error": "Model not found"}, status_code=404)
    return FileResponse(MODEL_JSON_PATH, media_type="application/json")


@app.get("/")
def root():
    return {"ok": True, "message": "API running. POST /api/predict with an image or /api/upload with a video."}


# --------------- local run ----------------
if __name__ == "__main__":
    uvicorn.run(app, host=API_HOST, port=API_PORT)

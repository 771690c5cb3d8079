import logging
import traceback


class SanketError(Exception):
    """Base error carrying a message that is safe to show in the UI."""

    user_message = "Something went wrong. Please try again."

    def __init__(self, detail: str | None = None, user_message: str | None = None):
        if user_message:
            self.user_message = user_message
        super().__init__(detail or self.user_message)


class MissingFileError(SanketError):
    user_message = "Please select a file to upload"


class UnsupportedMediaTypeError(SanketError):
    user_message = "Please upload an image file"

    def __init__(self, content_type: str | None = None, expected: str = "image"):
        self.content_type = content_type
        self.expected = expected
        article = "an" if expected[:1] in "aeiou" else "a"
        super().__init__(
            f"Unsupported media type: {content_type or 'unknown'}",
            user_message=f"Please upload {article} {expected} file",
        )


class UploadTooLargeError(SanketError):
    user_message = "File is too large"


class CameraUnavailableError(SanketError):
    user_message = "Camera access was denied. Please allow camera permissions or use Upload Photo."


class ModelFormatError(SanketError):
    user_message = "The model description could not be converted."


class PredictionError(SanketError):
    user_message = "Failed to process image. Please try again."


def custom_exception_hook(exc_type, exc_value, tb):
    full_traceback = "".join(traceback.format_exception(exc_type, exc_value, tb))
    first_line = f"{exc_type.__name__}: {exc_value}"
    short_message = f"{exc_type.__name__}"

    # Log full traceback silently
    logging.error(full_traceback)

    # Also log just the first line for quick visibility
    logging.error(f"First line: {first_line}")

    return short_message


def user_message_for(exc: BaseException) -> str:
    """Message to show for any exception; unknown errors go through the hook."""
    if isinstance(exc, SanketError):
        return exc.user_message
    return custom_exception_hook(type(exc), exc, exc.__traceback__)

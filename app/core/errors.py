from __future__ import annotations

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ReviewError(RuntimeError):
    """Base class for failures that end a request.

    ``str(exc)`` is diagnostic detail for the server log only. Routes answer
    with their own fixed message so provider or parser text never reaches
    the caller.
    """

    code = "review_failed"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        if code is not None:
            self.code = code


class MissingInputError(ReviewError):
    code = "missing_input"
    status_code = status.HTTP_400_BAD_REQUEST


class UploadTooLargeError(ReviewError):
    code = "upload_too_large"
    status_code = 413


class ExtractionError(ReviewError):
    code = "extraction_failed"


class InferenceError(ReviewError):
    code = "inference_failed"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("request_validation_failed path=%s errors=%s", request.url.path, len(exc.errors()))
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body.")

import logging

from fastapi import APIRouter, Depends, File, UploadFile, status

from app.ai.types import AIClient
from app.api.deps import get_ai_client, get_upload_store
from app.core.config import settings
from app.core.errors import MissingInputError, ReviewError, UploadTooLargeError, error_response
from app.schemas.review import (
    ErrorResponse,
    FeedbackResponse,
    GuidanceRequest,
    GuidanceResponse,
    InterviewFeedbackRequest,
)
from app.services.review_requests import IncomingUpload
from app.services.review_service import ask_career_guidance, interview_feedback, review_document
from app.storage.temp_files import TempFileStore

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _failure_response(exc: Exception, *, operation: str, missing_message: str, failure_message: str):
    if isinstance(exc, MissingInputError):
        return error_response(status.HTTP_400_BAD_REQUEST, missing_message)
    if isinstance(exc, UploadTooLargeError):
        return error_response(exc.status_code, str(exc))
    if isinstance(exc, ReviewError):
        logger.warning("%s_failed code=%s: %s", operation, exc.code, exc)
    else:
        logger.exception("%s_failed code=unexpected", operation)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, failure_message)


async def _read_upload(file: UploadFile | None) -> IncomingUpload | None:
    if file is None:
        return None

    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise UploadTooLargeError(
                f"File too large. Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB."
            )
        chunks.append(chunk)
    return IncomingUpload(content=b"".join(chunks), media_type=file.content_type, filename=file.filename)


@router.post(
    "/review",
    response_model=FeedbackResponse,
    responses={**ERROR_RESPONSES, 413: {"model": ErrorResponse}},
)
async def review(
    resume: UploadFile | None = File(default=None),
    ai_client: AIClient = Depends(get_ai_client),
    store: TempFileStore = Depends(get_upload_store),
):
    try:
        upload = await _read_upload(resume)
        feedback = await review_document(upload, store=store, ai_client=ai_client, model=settings.review_model)
    except Exception as exc:
        return _failure_response(
            exc,
            operation="review",
            missing_message="No resume file uploaded.",
            failure_message="Failed to process resume.",
        )
    return FeedbackResponse(feedback=feedback)


@router.post("/career/ask-chatbot", response_model=GuidanceResponse, responses=ERROR_RESPONSES)
async def career_chatbot(payload: GuidanceRequest, ai_client: AIClient = Depends(get_ai_client)):
    try:
        message = await ask_career_guidance(payload.query, ai_client=ai_client, model=settings.guidance_model)
    except Exception as exc:
        return _failure_response(
            exc,
            operation="career_chatbot",
            missing_message="Missing query.",
            failure_message="Something went wrong with the chatbot.",
        )
    return GuidanceResponse(message=message)


@router.post("/mock-interview", response_model=FeedbackResponse, responses=ERROR_RESPONSES)
async def mock_interview(payload: InterviewFeedbackRequest, ai_client: AIClient = Depends(get_ai_client)):
    try:
        feedback = await interview_feedback(
            payload.question,
            payload.answer,
            ai_client=ai_client,
            model=settings.interview_model,
        )
    except Exception as exc:
        return _failure_response(
            exc,
            operation="mock_interview",
            missing_message="Question and answer are required.",
            failure_message="Failed to get feedback from AI.",
        )
    return FeedbackResponse(feedback=feedback)

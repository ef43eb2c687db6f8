from __future__ import annotations

import asyncio
import logging

from app.ai.types import AIClient
from app.core.errors import MissingInputError
from app.parsing.parse import extract_document_text
from app.prompts.templates import compose_prompt
from app.services.review_requests import (
    DocumentReview,
    GuidanceQuery,
    IncomingUpload,
    InterviewFeedback,
)
from app.storage.temp_files import TempFileStore

logger = logging.getLogger(__name__)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


async def review_document(
    upload: IncomingUpload | None,
    *,
    store: TempFileStore,
    ai_client: AIClient,
    model: str,
) -> str:
    if upload is None:
        raise MissingInputError("No resume file uploaded.")

    with store.held(upload.content, media_type=upload.media_type, filename=upload.filename) as document:
        request = DocumentReview(document=document)
        resume_text = await asyncio.to_thread(extract_document_text, document)
        logger.info(
            "review_extracted handle=%s bytes=%s media_type=%s chars=%s",
            document.handle,
            document.size,
            document.media_type or "unknown",
            len(resume_text),
        )
        prompt = compose_prompt(request, resume_text=resume_text)
        return await ai_client.generate(prompt, model=model)


async def ask_career_guidance(
    query: str | None,
    *,
    ai_client: AIClient,
    model: str,
) -> str:
    if _is_blank(query):
        raise MissingInputError("Missing query.")

    prompt = compose_prompt(GuidanceQuery(query=query))
    return await ai_client.generate(prompt, model=model)


async def interview_feedback(
    question: str | None,
    answer: str | None,
    *,
    ai_client: AIClient,
    model: str,
) -> str:
    if _is_blank(question) or _is_blank(answer):
        raise MissingInputError("Question and answer are required.")

    prompt = compose_prompt(InterviewFeedback(question=question, answer=answer))
    return await ai_client.generate(prompt, model=model)

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from app.storage.temp_files import UploadedDocument


@dataclass(frozen=True)
class IncomingUpload:
    content: bytes
    media_type: str | None = None
    filename: str | None = None


@dataclass(frozen=True)
class DocumentReview:
    document: UploadedDocument


@dataclass(frozen=True)
class GuidanceQuery:
    query: str


@dataclass(frozen=True)
class InterviewFeedback:
    question: str
    answer: str


ReviewRequest = Union[DocumentReview, GuidanceQuery, InterviewFeedback]

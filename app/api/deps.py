from __future__ import annotations

from functools import lru_cache

from fastapi import Request

from app.ai.types import AIClient
from app.core.config import settings
from app.storage.temp_files import TempFileStore


def get_ai_client(request: Request) -> AIClient:
    return request.app.state.ai_client


@lru_cache(maxsize=1)
def get_upload_store() -> TempFileStore:
    return TempFileStore(settings.upload_dir)

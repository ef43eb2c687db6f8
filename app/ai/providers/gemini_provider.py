from __future__ import annotations

import logging
import time
from typing import Any, Optional

from google import genai

from app.core.errors import InferenceError

logger = logging.getLogger(__name__)


def _extract_text(response: Any) -> str:
    try:
        text = getattr(response, "text", None) or ""
    except ValueError:
        text = ""
    if text.strip():
        return text

    # Some responses only carry text on the first candidate's parts.
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return ""
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    return "".join(getattr(part, "text", None) or "" for part in parts)


class GeminiProvider:
    def __init__(self, model: str, api_key: Optional[str] = None):
        key = (api_key or "").strip()
        if not key:
            raise RuntimeError("GEMINI_API_KEY is missing")

        self._model = model
        self._client = genai.Client(api_key=key)

    async def generate(self, prompt: str, *, model: str | None = None) -> str:
        resolved_model = model or self._model
        started = time.perf_counter()
        try:
            response = await self._client.aio.models.generate_content(
                model=resolved_model,
                contents=prompt,
            )
        except Exception as exc:
            logger.warning(
                "inference_failed provider=gemini model=%s prompt_len=%s: %s",
                resolved_model,
                len(prompt),
                exc,
            )
            raise InferenceError(f"Gemini request failed: {exc}") from exc

        text = _extract_text(response)
        if not text.strip():
            logger.warning("inference_failed provider=gemini model=%s: empty completion", resolved_model)
            raise InferenceError("Gemini returned an empty completion.", code="empty_completion")

        logger.info(
            "inference_completed provider=gemini model=%s prompt_len=%s latency_ms=%s",
            resolved_model,
            len(prompt),
            int((time.perf_counter() - started) * 1000),
        )
        return text

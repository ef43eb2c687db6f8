from __future__ import annotations

import logging
import time
from typing import Optional

from openai import AsyncOpenAI

from app.core.errors import InferenceError

logger = logging.getLogger(__name__)


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.2,
    ):
        self._model = model
        self._temperature = temperature
        key = (api_key or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        # Retries are left to the caller; a failed call ends the request.
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=base_url or None,
            max_retries=0,
        )

    async def generate(self, prompt: str, *, model: str | None = None) -> str:
        resolved_model = model or self._model
        started = time.perf_counter()
        try:
            response = await self._client.chat.completions.create(
                model=resolved_model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self._temperature,
            )
        except Exception as exc:
            logger.warning(
                "inference_failed provider=openai model=%s prompt_len=%s: %s",
                resolved_model,
                len(prompt),
                exc,
            )
            raise InferenceError(f"OpenAI request failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else ""
        if not content or not content.strip():
            logger.warning("inference_failed provider=openai model=%s: empty completion", resolved_model)
            raise InferenceError("OpenAI returned an empty completion.", code="empty_completion")

        logger.info(
            "inference_completed provider=openai model=%s prompt_len=%s latency_ms=%s",
            resolved_model,
            len(prompt),
            int((time.perf_counter() - started) * 1000),
        )
        return content

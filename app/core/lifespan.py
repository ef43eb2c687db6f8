from contextlib import asynccontextmanager
import logging
from pathlib import Path

from app.ai.factory import get_ai_client
from app.core.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

    app.state.ai_client = get_ai_client()
    logger.info(
        "inference_client_ready provider=%s review_model=%s guidance_model=%s interview_model=%s",
        settings.ai_provider,
        settings.review_model,
        settings.guidance_model,
        settings.interview_model,
    )
    yield

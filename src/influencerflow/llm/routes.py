"""AI content generation route."""

from __future__ import annotations

import asyncio
from typing import Any

import openai
import structlog
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from influencerflow.auth.session import AuthUser, get_current_user
from influencerflow.domain.errors import ExternalServiceError, ServiceUnavailableError
from influencerflow.llm.content import build_generation_request

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["ai"])


class GenerateContentRequest(BaseModel):
    """Body of ``POST /api/ai/generate-content``."""

    type: str
    data: dict[str, Any] = Field(default_factory=dict)


@router.post("/ai/generate-content")
async def generate_content(
    request: Request,
    body: GenerateContentRequest,
    user: AuthUser = Depends(get_current_user),
) -> dict[str, str]:
    """Generate campaign copy with the configured chat model."""
    generation = build_generation_request(body.type, body.data)

    generator = request.app.state.services.get("content_generator")
    if generator is None:
        raise ServiceUnavailableError("Content generation is not configured")

    try:
        content = await asyncio.to_thread(generator.generate, generation)
    except openai.OpenAIError as exc:
        logger.exception("content_generation_failed", generation_type=body.type)
        raise ExternalServiceError("openai", "Failed to generate content") from exc
    return {"content": content}

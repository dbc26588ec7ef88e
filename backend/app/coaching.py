"""Goal coaching endpoint (`POST /api/coaching`)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from app.ai.gemini_client import GeminiClient, GeminiError, GeminiRequestError, ModelUnavailableError
from app.config import settings
from app.schemas import CoachingAdvice, Goal, ProgressUpdate
from app.services.coaching_service import get_coaching

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["coaching"])


class CoachingRequest(BaseModel):
    goal: Goal
    previous_updates: list[ProgressUpdate] = Field(default_factory=list)
    user_input: str | None = Field(default=None, max_length=2000)


class CoachingResponse(BaseModel):
    success: bool = True
    data: CoachingAdvice


def _get_gemini_client() -> GeminiClient | None:
    if not settings.gemini_api_key:
        return None
    return GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        timeout_seconds=settings.gemini_timeout_seconds,
    )


@router.post("/coaching", response_model=CoachingResponse)
async def coaching_endpoint(payload: CoachingRequest) -> CoachingResponse:
    user_input = (payload.user_input or "").strip() or None

    try:
        advice = await get_coaching(
            payload.goal,
            payload.previous_updates,
            user_input,
            _get_gemini_client(),
        )
    except ModelUnavailableError as exc:
        raise HTTPException(
            status_code=503,
            detail="Coaching is unavailable because GEMINI_API_KEY is not configured.",
        ) from exc
    except GeminiRequestError as exc:
        logger.error("Coaching request failed for goal %s: %s", payload.goal.id, exc)
        if exc.status_code == 429:
            raise HTTPException(status_code=503, detail="Coaching is rate-limited right now. Try again shortly.") from exc
        raise HTTPException(status_code=502, detail="Failed to get coaching advice. Please try again.") from exc
    except GeminiError as exc:
        logger.error("Coaching reply unusable for goal %s: %s", payload.goal.id, exc)
        raise HTTPException(status_code=502, detail="Coaching response could not be processed.") from exc

    return CoachingResponse(data=advice)

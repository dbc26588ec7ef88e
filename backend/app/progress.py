"""Progress evaluation endpoint (`POST /api/progress`)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from app.ai.gemini_client import GeminiClient, GeminiError, GeminiRequestError, ModelUnavailableError
from app.config import settings
from app.schemas import Goal, ProgressAnalysis, ProgressUpdate
from app.services.progress_service import ProgressAnalysisError, evaluate_progress, progress_fallback

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["progress"])


class ProgressRequest(BaseModel):
    goal: Goal
    journal_entry: str = Field(min_length=1, max_length=5000)
    previous_updates: list[ProgressUpdate] = Field(default_factory=list)


class ProgressResponse(BaseModel):
    success: bool = True
    data: ProgressAnalysis


def _get_gemini_client() -> GeminiClient | None:
    if not settings.gemini_api_key:
        return None
    return GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        timeout_seconds=settings.gemini_timeout_seconds,
    )


def _failure_detail(message: str) -> dict:
    return {"message": message, "fallback": progress_fallback().model_dump()}


@router.post("/progress", response_model=ProgressResponse)
async def evaluate_progress_endpoint(payload: ProgressRequest) -> ProgressResponse:
    """
    Score one journal entry against its goal.

    Money goals with readable amounts are scored locally; others go to the model.
    """
    journal_entry = payload.journal_entry.strip()
    if not journal_entry:
        raise HTTPException(status_code=422, detail="journal_entry must not be empty")

    try:
        analysis = await evaluate_progress(
            payload.goal,
            journal_entry,
            payload.previous_updates,
            _get_gemini_client(),
        )
    except ModelUnavailableError as exc:
        raise HTTPException(
            status_code=503,
            detail="Progress analysis is unavailable because GEMINI_API_KEY is not configured.",
        ) from exc
    except GeminiRequestError as exc:
        logger.error("Progress analysis request failed for goal %s: %s", payload.goal.id, exc)
        if exc.status_code == 429:
            raise HTTPException(status_code=503, detail=_failure_detail("Progress analysis is rate-limited right now.")) from exc
        raise HTTPException(status_code=502, detail=_failure_detail("Failed to analyze progress.")) from exc
    except (GeminiError, ProgressAnalysisError) as exc:
        logger.error("Progress analysis reply unusable for goal %s: %s", payload.goal.id, exc)
        raise HTTPException(status_code=502, detail=_failure_detail("Failed to analyze progress.")) from exc

    return ProgressResponse(data=analysis)

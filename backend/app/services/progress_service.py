"""Progress evaluation: deterministic money goals first, model analysis otherwise."""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import Any, Sequence

from app.ai.gemini_client import GeminiClient, ModelUnavailableError
from app.ai.progress_prompt import PROGRESS_SYSTEM_PROMPT, build_progress_prompt
from app.ai.response_parsing import ModelReplyParseError, parse_json_object
from app.schemas import Goal, ProgressAnalysis, ProgressUpdate
from app.services.financial_feedback import round_half_up
from app.services.financial_progress import (
    FinancialProgressResult,
    clamp_percentage,
    compute_financial_progress,
    previous_percentage,
)

logger = logging.getLogger(__name__)

PROGRESS_TEMPERATURE = 0.4
PROGRESS_MAX_OUTPUT_TOKENS = 300


class ProgressAnalysisError(Exception):
    """Raised when the model reply parses but carries non-numeric progress."""


def progress_fallback() -> ProgressAnalysis:
    """Static response shown when model analysis fails outright."""
    return ProgressAnalysis(
        overall_progress=0,
        progress_increase=0,
        reasoning="Unable to analyze progress due to technical issues",
        feedback="Your progress has been recorded. AI analysis is temporarily unavailable.",
    )


def _parse_error_analysis(goal: Goal) -> ProgressAnalysis:
    return ProgressAnalysis(
        overall_progress=goal.overall_progress,
        progress_increase=0,
        reasoning="Unable to analyze progress due to parsing error",
        feedback="Your progress has been recorded. Please try again for AI analysis.",
    )


def _from_financial(result: FinancialProgressResult) -> ProgressAnalysis:
    return ProgressAnalysis(
        overall_progress=result.percentage,
        progress_increase=result.delta,
        reasoning=result.explanation,
        feedback=result.feedback,
    )


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def normalize_model_progress(
    goal: Goal,
    data: dict[str, Any],
    previous_updates: Sequence[ProgressUpdate] = (),
) -> ProgressAnalysis:
    """
    Validate and normalize a parsed model reply.

    Overall progress is clamped to [0, 100]. The increase is recomputed against
    the latest update's percentage, the same baseline the financial path uses;
    with no updates yet the goal's current progress is the baseline. It never
    goes negative.
    """
    overall_raw = data.get("overall_progress")
    increase_raw = data.get("progress_increase")
    if not _is_number(overall_raw) or not _is_number(increase_raw):
        raise ProgressAnalysisError("Invalid progress data format")

    overall = clamp_percentage(Decimal(str(overall_raw)))
    if previous_updates:
        baseline = previous_percentage(previous_updates)
    else:
        baseline = Decimal(str(goal.overall_progress))
    increase = max(overall - baseline, Decimal("0"))

    return ProgressAnalysis(
        overall_progress=round_half_up(overall),
        progress_increase=round_half_up(increase),
        reasoning=str(data.get("reasoning") or ""),
        feedback=str(data.get("feedback") or ""),
    )


async def evaluate_progress(
    goal: Goal,
    journal_entry: str,
    previous_updates: Sequence[ProgressUpdate],
    client: GeminiClient | None,
) -> ProgressAnalysis:
    """
    Evaluate one journal entry against a goal.

    Financial goals with extractable amounts never touch the model. Everything
    else makes exactly one model call; GeminiError propagates to the caller.
    """
    financial = compute_financial_progress(goal.goal_text, journal_entry, previous_updates)
    if isinstance(financial, FinancialProgressResult):
        return _from_financial(financial)

    if client is None:
        raise ModelUnavailableError("Progress analysis model is not configured")

    reply = await client.generate_text(
        PROGRESS_SYSTEM_PROMPT,
        build_progress_prompt(goal, journal_entry, previous_updates),
        temperature=PROGRESS_TEMPERATURE,
        max_output_tokens=PROGRESS_MAX_OUTPUT_TOKENS,
    )

    try:
        data = parse_json_object(reply)
    except ModelReplyParseError:
        logger.warning("Could not parse progress reply for goal %s", goal.id)
        return _parse_error_analysis(goal)

    return normalize_model_progress(goal, data, previous_updates)

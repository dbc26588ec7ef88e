"""Coaching advice (milestones, habits, advice) from the model with static defaults."""

from __future__ import annotations

import logging
from typing import Sequence

from pydantic import ValidationError

from app.ai.coaching_prompt import COACHING_SYSTEM_PROMPT, build_coaching_prompt
from app.ai.gemini_client import GeminiClient, ModelUnavailableError
from app.ai.response_parsing import ModelReplyParseError, parse_json_object, salvage_advice
from app.schemas import CoachingAdvice, Goal, Habit, Milestone, ProgressUpdate

logger = logging.getLogger(__name__)

COACHING_TEMPERATURE = 0.3
COACHING_MAX_OUTPUT_TOKENS = 800
REQUIRED_FIELDS = ("milestones", "habits", "advice")

DEFAULT_ADVICE = "Unable to parse AI response. Please try again for personalized coaching advice."

DEFAULT_MILESTONES: tuple[Milestone, ...] = (
    Milestone(
        title="Break down your goal",
        description="Divide your goal into smaller, manageable steps",
        timeline="1 week",
        priority="high",
    ),
    Milestone(
        title="Set weekly targets",
        description="Create specific weekly objectives to track progress",
        timeline="ongoing",
        priority="high",
    ),
    Milestone(
        title="Track progress regularly",
        description="Monitor and adjust your approach based on results",
        timeline="ongoing",
        priority="medium",
    ),
)

DEFAULT_HABITS: tuple[Habit, ...] = (
    Habit(name="Daily practice", description="Dedicate time each day to work toward your goal", frequency="daily", impact="high"),
    Habit(name="Weekly review", description="Reflect on progress and adjust strategies", frequency="weekly", impact="medium"),
    Habit(name="Monthly assessment", description="Evaluate overall progress and set new targets", frequency="monthly", impact="high"),
)


def default_coaching(raw_reply: str = "") -> CoachingAdvice:
    return CoachingAdvice(
        milestones=list(DEFAULT_MILESTONES),
        habits=list(DEFAULT_HABITS),
        advice=salvage_advice(raw_reply) or DEFAULT_ADVICE,
    )


def parse_coaching_reply(raw_reply: str) -> CoachingAdvice:
    """Structured advice from the reply, or defaults with salvaged advice text."""
    try:
        data = parse_json_object(raw_reply)
        if any(data.get(field) in (None, "") for field in REQUIRED_FIELDS):
            raise ModelReplyParseError("Invalid response structure")
        return CoachingAdvice.model_validate(data)
    except (ModelReplyParseError, ValidationError):
        logger.warning("Failed to parse coaching response; using defaults", exc_info=True)
        logger.debug("Raw coaching response: %s", raw_reply)
        return default_coaching(raw_reply)


async def get_coaching(
    goal: Goal,
    previous_updates: Sequence[ProgressUpdate],
    user_input: str | None,
    client: GeminiClient | None,
) -> CoachingAdvice:
    if client is None:
        raise ModelUnavailableError("Coaching model is not configured")

    reply = await client.generate_text(
        COACHING_SYSTEM_PROMPT,
        build_coaching_prompt(goal, previous_updates, user_input),
        temperature=COACHING_TEMPERATURE,
        max_output_tokens=COACHING_MAX_OUTPUT_TOKENS,
    )
    return parse_coaching_reply(reply)

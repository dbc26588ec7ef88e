from __future__ import annotations

import asyncio

import pytest

from app.ai.gemini_client import GeminiRequestError, ModelUnavailableError
from app.schemas import Goal, ProgressAnalysis, ProgressUpdate
from app.services.progress_service import (
    ProgressAnalysisError,
    evaluate_progress,
    normalize_model_progress,
    progress_fallback,
)


def _run(coro):
    return asyncio.run(coro)


class StubGeminiClient:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    async def generate_text(self, system_prompt, user_prompt, *, temperature, max_output_tokens):
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "temperature": temperature,
                "max_output_tokens": max_output_tokens,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply


def _goal(**overrides) -> Goal:
    data = {"id": "g1", "title": "Learn guitar", "overall_progress": 30}
    data.update(overrides)
    return Goal(**data)


def _update(entry: str, progress: float) -> ProgressUpdate:
    return ProgressUpdate(
        journal_entry=entry,
        llm_response=ProgressAnalysis(
            overall_progress=progress,
            progress_increase=0,
            reasoning="",
            feedback="",
        ),
    )


def test_financial_goal_skips_model() -> None:
    goal = _goal(title="Bankroll Challenge", context="Reach $3,000", overall_progress=0)

    analysis = _run(evaluate_progress(goal, "Current bankroll: $2,500", [], None))

    assert analysis.overall_progress == 83
    assert analysis.progress_increase == 83
    assert analysis.reasoning == "Current: $2,500, Target: $3,000"
    assert "almost there" in analysis.feedback


def test_financial_delta_uses_last_update() -> None:
    goal = _goal(title="Bankroll Challenge", context="Reach $3,000", overall_progress=50)
    history = [_update("Current bankroll: $1,500", 50)]

    analysis = _run(evaluate_progress(goal, "Current bankroll: $2,100", history, None))

    assert analysis.overall_progress == 70
    assert analysis.progress_increase == 20


def test_financial_goal_without_amounts_uses_model() -> None:
    client = StubGeminiClient(
        reply='{"overall_progress": 35, "progress_increase": 5, "reasoning": "steady", "feedback": "nice"}'
    )
    goal = _goal(title="Grow my savings", overall_progress=30)

    analysis = _run(evaluate_progress(goal, "Skipped takeout all week", [], client))

    assert len(client.calls) == 1
    assert analysis.overall_progress == 35
    assert analysis.progress_increase == 5


def test_model_required_for_non_financial_goal() -> None:
    with pytest.raises(ModelUnavailableError):
        _run(evaluate_progress(_goal(), "Practiced chords for an hour", [], None))


def test_model_reply_in_code_fence() -> None:
    client = StubGeminiClient(
        reply='```json\n{"overall_progress": 36, "progress_increase": 6, "reasoning": "r", "feedback": "f"}\n```'
    )

    analysis = _run(evaluate_progress(_goal(), "Practiced chords", [], client))

    assert analysis == ProgressAnalysis(overall_progress=36, progress_increase=6, reasoning="r", feedback="f")


def test_model_prompt_includes_goal_and_last_update() -> None:
    client = StubGeminiClient(reply='{"overall_progress": 31, "progress_increase": 1}')
    history = [_update("first entry", 20), _update("learned the G major chord", 30)]

    _run(evaluate_progress(_goal(), "Played my first song", history, client))

    call = client.calls[0]
    assert "Goal: Learn guitar" in call["user_prompt"]
    assert "Current: 30%" in call["user_prompt"]
    assert "Previous: learned the G major chord (30%)" in call["user_prompt"]
    assert 'Entry: "Played my first song"' in call["user_prompt"]
    assert "overall_progress" in call["system_prompt"]
    assert call["temperature"] == 0.4
    assert call["max_output_tokens"] == 300


def test_unparseable_reply_keeps_current_progress() -> None:
    client = StubGeminiClient(reply="I think you did great today!")

    analysis = _run(evaluate_progress(_goal(overall_progress=42), "Practiced", [], client))

    assert analysis.overall_progress == 42
    assert analysis.progress_increase == 0
    assert "parsing error" in analysis.reasoning


def test_non_numeric_reply_raises() -> None:
    client = StubGeminiClient(reply='{"overall_progress": "high", "progress_increase": 5}')

    with pytest.raises(ProgressAnalysisError):
        _run(evaluate_progress(_goal(), "Practiced", [], client))


def test_model_errors_propagate() -> None:
    client = StubGeminiClient(error=GeminiRequestError(500, "boom"))

    with pytest.raises(GeminiRequestError):
        _run(evaluate_progress(_goal(), "Practiced", [], client))


def test_normalize_clamps_and_recomputes_increase() -> None:
    goal = _goal(overall_progress=90)

    analysis = normalize_model_progress(goal, {"overall_progress": 120, "progress_increase": 30})

    assert analysis.overall_progress == 100
    assert analysis.progress_increase == 10


def test_normalize_regression_has_zero_increase() -> None:
    goal = _goal(overall_progress=50)

    analysis = normalize_model_progress(goal, {"overall_progress": 44.6, "progress_increase": -6})

    assert analysis.overall_progress == 45
    assert analysis.progress_increase == 0


def test_normalize_rejects_booleans() -> None:
    with pytest.raises(ProgressAnalysisError):
        normalize_model_progress(_goal(), {"overall_progress": True, "progress_increase": 1})


def test_progress_fallback_is_static() -> None:
    fallback = progress_fallback()

    assert fallback.overall_progress == 0
    assert fallback.progress_increase == 0
    assert "temporarily unavailable" in fallback.feedback


def test_nan_reply_is_treated_as_unparseable() -> None:
    client = StubGeminiClient(
        reply='{"overall_progress": NaN, "progress_increase": 5, "reasoning": "r", "feedback": "f"}'
    )

    analysis = _run(evaluate_progress(_goal(overall_progress=42), "Practiced", [], client))

    assert analysis.overall_progress == 42
    assert analysis.progress_increase == 0
    assert "parsing error" in analysis.reasoning


def test_normalize_rejects_infinite_numbers() -> None:
    with pytest.raises(ProgressAnalysisError):
        normalize_model_progress(_goal(), {"overall_progress": float("inf"), "progress_increase": 1})


def test_model_increase_measured_from_last_update() -> None:
    client = StubGeminiClient(reply='{"overall_progress": 35, "progress_increase": 5}')
    history = [_update("first week", 10), _update("second week", 20)]

    analysis = _run(evaluate_progress(_goal(overall_progress=30), "Played a full song", history, client))

    assert analysis.overall_progress == 35
    assert analysis.progress_increase == 15


def test_model_regression_against_last_update_is_zero() -> None:
    history = [_update("good week", 60)]

    analysis = normalize_model_progress(_goal(overall_progress=60), {"overall_progress": 45, "progress_increase": 0}, history)

    assert analysis.overall_progress == 45
    assert analysis.progress_increase == 0

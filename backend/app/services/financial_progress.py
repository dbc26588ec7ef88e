"""Deterministic progress for money goals: target/current extraction and percentages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Final, Protocol, Sequence

from app.services.amount_extractor import (
    AmountFound,
    extract_current_amount,
    extract_target_amount,
)
from app.services.financial_feedback import format_amount, round_half_up, select_feedback

logger = logging.getLogger(__name__)

FINANCIAL_KEYWORDS: tuple[str, ...] = (
    "bankroll",
    "savings",
    "money",
    "dollar",
    "$",
    "budget",
    "income",
    "revenue",
    "profit",
    "loss",
    "investment",
    "portfolio",
    "cash",
    "fund",
    "capital",
    "earnings",
    "make money",
    "financial",
    "wealth",
    "net worth",
)

HUNDRED = Decimal("100")
ZERO = Decimal("0")


class ProgressRecord(Protocol):
    @property
    def percentage(self) -> Any: ...


class _NotApplicable:
    """Signals that the caller should use model-based estimation instead."""

    def __repr__(self) -> str:
        return "NOT_APPLICABLE"

    def __bool__(self) -> bool:
        return False


NOT_APPLICABLE: Final = _NotApplicable()


@dataclass(frozen=True)
class FinancialProgressResult:
    percentage: int
    delta: int
    explanation: str
    feedback: str


def build_goal_text(title: str, description: str | None = None, context: str | None = None) -> str:
    return f"{title} {description or ''} {context or ''}"


def is_financial(goal_text: str) -> bool:
    lowered = goal_text.lower()
    return any(keyword in lowered for keyword in FINANCIAL_KEYWORDS)


def clamp_percentage(value: Decimal) -> Decimal:
    return max(ZERO, min(value, HUNDRED))


def previous_percentage(history: Sequence[ProgressRecord]) -> Decimal:
    """Percentage of the most recent record, 0 for an empty history."""
    if not history:
        return ZERO
    value = history[-1].percentage
    if value is None:
        return ZERO
    return Decimal(str(value))


def _compute(
    goal_text: str,
    journal_text: str,
    history: Sequence[ProgressRecord],
) -> FinancialProgressResult | _NotApplicable:
    if not is_financial(goal_text):
        return NOT_APPLICABLE

    target = extract_target_amount(goal_text)
    if not isinstance(target, AmountFound) or target.amount <= ZERO:
        return NOT_APPLICABLE

    current = extract_current_amount(journal_text)
    if not isinstance(current, AmountFound):
        return NOT_APPLICABLE

    percentage = clamp_percentage(current.amount / target.amount * HUNDRED)
    delta = max(percentage - previous_percentage(history), ZERO)

    return FinancialProgressResult(
        percentage=round_half_up(percentage),
        delta=round_half_up(delta),
        explanation=f"Current: ${format_amount(current.amount)}, Target: ${format_amount(target.amount)}",
        feedback=select_feedback(current.amount, target.amount, percentage, journal_text),
    )


def compute_financial_progress(
    goal_text: str,
    journal_text: str,
    history: Sequence[ProgressRecord] = (),
) -> FinancialProgressResult | _NotApplicable:
    """
    Compute progress for a financial goal from the amounts in its text.

    Returns NOT_APPLICABLE when the goal is not financial, when either amount
    cannot be extracted, or when the target is zero. Never raises.
    """
    try:
        return _compute(goal_text, journal_text, history)
    except Exception:
        logger.warning("Financial progress computation failed; falling back", exc_info=True)
        return NOT_APPLICABLE

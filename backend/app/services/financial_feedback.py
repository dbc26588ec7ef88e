"""Templated feedback for financial goals, picked by trend and progress tier."""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP, localcontext

LOSS_KEYWORDS: tuple[str, ...] = ("lost", "down", "decreased")

# Lower bounds (inclusive) of each progress tier, highest first.
FEEDBACK_THRESHOLDS: dict[str, Decimal] = {
    "completed": Decimal("100"),
    "almost_there": Decimal("80"),
    "good_progress": Decimal("50"),
}

_DISPLAY_QUANT = Decimal("0.001")


def round_half_up(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def format_amount(value: Decimal) -> str:
    """
    Format an amount with thousands separators and at most 3 decimals.

    Decimal(2500) -> '2,500', Decimal('2500.5') -> '2,500.5'
    """
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the 3 decimals.
        ctx.prec = max(ctx.prec, value.adjusted() + 5)
        quantized = value.quantize(_DISPLAY_QUANT, rounding=ROUND_HALF_UP)
    text = f"{quantized:,.3f}"
    return text.rstrip("0").rstrip(".")


def is_loss_entry(journal_text: str) -> bool:
    lowered = journal_text.lower()
    return any(keyword in lowered for keyword in LOSS_KEYWORDS)


def select_feedback(current: Decimal, target: Decimal, percentage: Decimal, journal_text: str) -> str:
    """Loss wording wins over every tier; otherwise the highest tier reached."""
    current_text = format_amount(current)
    target_text = format_amount(target)
    pct = round_half_up(percentage)

    if is_loss_entry(journal_text):
        return (
            f"Current bankroll: ${current_text}. You're {pct}% to your ${target_text} goal. "
            "Stay disciplined and stick to your strategy."
        )
    if percentage >= FEEDBACK_THRESHOLDS["completed"]:
        return f"Congratulations! You've reached your ${target_text} goal! Current bankroll: ${current_text}."
    if percentage >= FEEDBACK_THRESHOLDS["almost_there"]:
        return (
            f"Great progress! You're {pct}% to your ${target_text} goal. "
            f"Current bankroll: ${current_text}. You're almost there!"
        )
    if percentage >= FEEDBACK_THRESHOLDS["good_progress"]:
        return (
            f"Good progress! You're {pct}% to your ${target_text} goal. "
            f"Current bankroll: ${current_text}. Keep it up!"
        )
    return (
        f"Current bankroll: ${current_text}. You're {pct}% to your ${target_text} goal. "
        "Stay consistent and focused."
    )

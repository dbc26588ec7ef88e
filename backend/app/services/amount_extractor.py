"""Dollar-amount extraction from free text using ordered pattern matchers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Sequence

_NUMBER = r"(\d+(?:,\d{3})*(?:\.\d+)?)"
K_MULTIPLIER = Decimal("1000")


@dataclass(frozen=True)
class AmountFound:
    amount: Decimal


@dataclass(frozen=True)
class AmountNotFound:
    pass


AmountMatch = AmountFound | AmountNotFound
NO_AMOUNT = AmountNotFound()


def parse_amount(raw: str) -> Decimal | None:
    """'3,000.50' -> Decimal('3000.50'); None when the text is not a number."""
    try:
        return Decimal(raw.replace(",", ""))
    except InvalidOperation:
        return None


@dataclass(frozen=True)
class AmountPattern:
    """
    One matcher in an ordered extraction list.

    `scale_below` enables the thousands suffix: a captured value strictly below
    it is multiplied by 1000, anything at or above it is kept as written.
    """

    name: str
    regex: re.Pattern[str]
    scale_below: Decimal | None = None

    def match(self, text: str) -> str | None:
        found = self.regex.search(text)
        if found is None:
            return None
        return found.group(1)

    def to_amount(self, raw: str) -> Decimal | None:
        amount = parse_amount(raw)
        if amount is None:
            return None
        if self.scale_below is not None and amount < self.scale_below:
            amount *= K_MULTIPLIER
        return amount


# Ordered by confidence: explicit unit markers before the bare-number fallback.
TARGET_PATTERNS: tuple[AmountPattern, ...] = (
    AmountPattern("k_suffix", re.compile(r"(\d+(?:\.\d+)?)\s*k", re.IGNORECASE), scale_below=Decimal("1000")),
    AmountPattern("dollar_prefix", re.compile(r"\$" + _NUMBER)),
    AmountPattern("dollars_word", re.compile(_NUMBER + r"\s*dollars?", re.IGNORECASE)),
    AmountPattern("dollar_suffix", re.compile(_NUMBER + r"\s*\$")),
    AmountPattern("bare_number", re.compile(_NUMBER + r"(?=\s|\Z)")),
)

CURRENT_PATTERNS: tuple[AmountPattern, ...] = (
    AmountPattern(
        "cue_word",
        re.compile(
            r"(?:current|now|at|is|bankroll|balance|total|amount)\s*:?\s*\$?" + _NUMBER,
            re.IGNORECASE,
        ),
    ),
    AmountPattern("dollar_prefix", re.compile(r"\$" + _NUMBER)),
    AmountPattern("dollars_word", re.compile(_NUMBER + r"\s*dollars?", re.IGNORECASE)),
    AmountPattern("dollar_suffix", re.compile(_NUMBER + r"\s*\$")),
)


def extract_amount(text: str, patterns: Sequence[AmountPattern]) -> AmountMatch:
    """
    Return the first match of the first pattern that matches `text`.

    Later patterns and later numbers in the same text are never consulted.
    A captured value that does not parse counts as no match.
    """
    for pattern in patterns:
        raw = pattern.match(text)
        if raw is None:
            continue
        amount = pattern.to_amount(raw)
        if amount is None:
            return NO_AMOUNT
        return AmountFound(amount)
    return NO_AMOUNT


def extract_target_amount(goal_text: str) -> AmountMatch:
    return extract_amount(goal_text, TARGET_PATTERNS)


def extract_current_amount(journal_text: str) -> AmountMatch:
    return extract_amount(journal_text, CURRENT_PATTERNS)

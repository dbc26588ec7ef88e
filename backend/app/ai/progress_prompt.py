"""Prompt constants and helpers for journal-based progress analysis."""

from __future__ import annotations

from typing import Sequence

from app.schemas import Goal, ProgressUpdate

PROGRESS_SYSTEM_PROMPT = """
Analyze progress and return JSON:
{
  "overall_progress": 75,
  "progress_increase": 5,
  "reasoning": "brief explanation",
  "feedback": "encouraging advice"
}
Progress increase: 0-15% per entry. Be conservative.
""".strip()

PREVIOUS_ENTRY_PREVIEW_CHARS = 50


def _format_percentage(value: float) -> str:
    return f"{value:g}"


def build_progress_prompt(goal: Goal, journal_entry: str, previous_updates: Sequence[ProgressUpdate]) -> str:
    """Compact user prompt: goal, current progress, last update and the new entry."""
    lines = [
        f"Goal: {goal.title}",
        f"Current: {_format_percentage(goal.overall_progress)}%",
    ]

    if previous_updates:
        last = previous_updates[-1]
        preview = last.journal_entry[:PREVIOUS_ENTRY_PREVIEW_CHARS]
        lines.append(f"Previous: {preview} ({_format_percentage(last.percentage)}%)")

    lines.append(f'Entry: "{journal_entry}"')
    lines.append("Analyze progress change.")
    return "\n".join(lines)

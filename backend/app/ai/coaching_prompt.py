"""Prompt constants and helpers for the goal coaching assistant."""

from __future__ import annotations

from typing import Sequence

from app.schemas import Goal, ProgressUpdate

COACHING_SYSTEM_PROMPT = """
You are a strategic goal coaching AI. Provide concise, actionable advice in JSON format:

{
  "milestones": [{"title": "X", "description": "Y", "timeline": "Z", "priority": "high|medium|low"}],
  "habits": [{"name": "X", "description": "Y", "frequency": "Z", "impact": "W"}],
  "advice": "Brief advice"
}

Rules:
- Keep descriptions concise (1-2 sentences max)
- Focus on current progress, not past work
- Provide specific, actionable steps
- Use simple language
- Ensure complete JSON structure
""".strip()

RECENT_ENTRIES = 2


def build_coaching_prompt(
    goal: Goal,
    previous_updates: Sequence[ProgressUpdate],
    user_input: str | None = None,
) -> str:
    """Goal summary plus recent entries; a user question switches the closing ask."""
    if previous_updates:
        recent = "; ".join(update.journal_entry for update in previous_updates[-RECENT_ENTRIES:])
        history = f"Recent progress: {recent}"
    else:
        history = "No previous progress updates"

    base_prompt = "\n".join(
        [
            f"Goal: {goal.title}",
            f"Description: {goal.description or 'No description'}",
            f"Current Progress: {goal.overall_progress:g}%",
            f"Initial Progress: {goal.initial_progress or 'Not specified'}",
            f"Context: {goal.context or 'No additional context'}",
            history,
        ]
    )

    if user_input:
        return (
            f"{base_prompt}\n\n"
            f"User Question: {user_input}\n\n"
            "Provide specific advice addressing their question."
        )

    return f"{base_prompt}\n\nProvide strategic milestones and habits to help achieve this goal."

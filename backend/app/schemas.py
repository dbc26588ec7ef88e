"""Request/response models shared by the progress and coaching endpoints."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from app.services.financial_progress import build_goal_text

GoalStatus = Literal["in-progress", "paused", "completed"]
Priority = Literal["high", "medium", "low"]


class Goal(BaseModel):
    id: str
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    initial_progress: str | None = None
    context: str | None = None
    overall_progress: float = Field(default=0, ge=0, le=100)
    status: GoalStatus = "in-progress"
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def goal_text(self) -> str:
        return build_goal_text(self.title, self.description, self.context)


class ProgressAnalysis(BaseModel):
    overall_progress: float
    progress_increase: float
    reasoning: str
    feedback: str


class ProgressUpdate(BaseModel):
    id: str | None = None
    goal_id: str | None = None
    journal_entry: str
    timestamp: str | None = None
    llm_response: ProgressAnalysis | None = None

    @property
    def percentage(self) -> float:
        if self.llm_response is None:
            return 0
        return self.llm_response.overall_progress


class Milestone(BaseModel):
    title: str
    description: str
    timeline: str
    priority: Priority = "medium"


class Habit(BaseModel):
    name: str
    description: str
    frequency: str
    impact: str


class CoachingAdvice(BaseModel):
    milestones: list[Milestone]
    habits: list[Habit]
    advice: str

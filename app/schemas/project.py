"""Pydantic schemas for projects, goals and ledger entries."""
from datetime import date, datetime

from pydantic import BaseModel


class GoalSchema(BaseModel):
    target_words: int
    daily_target: int
    start_date: date | None = None
    is_default: bool = False  # presentation fallback, not persisted

    class Config:
        from_attributes = True


class ProgressEntrySchema(BaseModel):
    id: int
    word_count: int
    total_words: int
    logged_at: datetime

    class Config:
        from_attributes = True


class ProjectSummarySchema(BaseModel):
    """A project annotated with its current total and active goal."""

    id: int
    title: str
    genre: str
    description: str | None = None
    start_date: date
    current_words: int
    target_words: int
    daily_goal: int

    @property
    def percent_complete(self) -> float:
        if self.target_words <= 0:
            return 0.0
        return min(100.0, round(self.current_words / self.target_words * 100, 1))

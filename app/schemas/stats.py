"""Pydantic schemas for the statistics views."""
from pydantic import BaseModel


class ProjectStatsSchema(BaseModel):
    title: str
    total_words: int
    goal_words: int


class StatsOutSchema(BaseModel):
    projects: list[ProjectStatsSchema]
    total_words: int = 0
    goal_words: int = 0

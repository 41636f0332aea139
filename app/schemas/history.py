from pydantic import BaseModel, Field


class GoalDatesResponse(BaseModel):
    total: int
    dates: list[str] = Field(description="ISO dates with at least one goal, newest first.")


class HistoryStatsResponse(BaseModel):
    total_days: int
    total_goals: int
    completed_goals: int
    average_completion: int = Field(description="Completed / total goals, whole percent.")

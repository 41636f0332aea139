from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    display_name: str
    avatar_url: Optional[str] = None
    streak: int
    last_completion_date: Optional[str] = None


class LeaderboardEntry(ProfileResponse):
    rank: int = Field(description="1-based position on the leaderboard.")


class LeaderboardResponse(BaseModel):
    total: int
    items: list[LeaderboardEntry]

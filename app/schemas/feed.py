"""
Public feed schemas.

GET /feed/public → PublicFeedResponse
"""
from typing import Optional
from pydantic import BaseModel, Field


class PublicGoalResponse(BaseModel):
    id: int
    owner_id: str
    text: str
    completed: bool
    date: str
    created_at: str
    user_name: str = Field(description='Owner display name, or "Anonymous".')
    user_avatar: Optional[str] = None
    user_streak: int = 0


class PublicFeedResponse(BaseModel):
    date: str
    total: int
    items: list[PublicGoalResponse]

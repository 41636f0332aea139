"""
Goal request / response schemas.

POST  /goals                     → GoalCreateRequest     → GoalResponse
PATCH /goals/{id}/completion     → GoalCompletionRequest → GoalCompletionResponse
PATCH /goals/{id}/text           → GoalTextRequest       → GoalResponse
PATCH /goals/{id}/privacy        → GoalPrivacyRequest    → GoalResponse
"""
from __future__ import annotations

import datetime as dt
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.profile import ProfileResponse

GOAL_TEXT_MAX_LENGTH = 500


def _strip_text(v):
    stripped = v.strip() if isinstance(v, str) else v
    if isinstance(stripped, str) and not stripped:
        raise ValueError("goal text must not be empty after stripping whitespace")
    return stripped


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class GoalCreateRequest(BaseModel):
    text: Annotated[str, Field(
        min_length=1,
        max_length=GOAL_TEXT_MAX_LENGTH,
        description="Goal label. Stripped of leading/trailing whitespace.",
        examples=["Read 20 pages", "Run 5k"],
    )]
    date: Optional[dt.date] = Field(
        default=None,
        description="Day the goal belongs to. Defaults to the caller's today.",
        examples=["2026-02-20"],
    )
    is_public: bool = Field(
        default=False,
        description="Show this goal in the public feed.",
    )

    @field_validator("text", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v):
        return _strip_text(v)


class GoalTextRequest(BaseModel):
    text: Annotated[str, Field(min_length=1, max_length=GOAL_TEXT_MAX_LENGTH)]

    @field_validator("text", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v):
        return _strip_text(v)


class GoalCompletionRequest(BaseModel):
    completed: bool


class GoalPrivacyRequest(BaseModel):
    is_public: bool


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class GoalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: str
    text: str
    completed: bool
    is_public: bool
    date: str = Field(description="ISO date the goal belongs to.")
    created_at: str = Field(description="Creation timestamp (ISO 8601).")


class GoalListResponse(BaseModel):
    date: str
    total: int
    completed: int
    items: list[GoalResponse]


class GoalCompletionResponse(BaseModel):
    goal: GoalResponse
    streak_triggered: bool = Field(
        description="True when this request moved the goal from incomplete to complete."
    )
    streak_applied: bool = Field(
        description="True when the owner's streak was updated. False on "
                    "un-complete, repeat completion, or a failed profile write."
    )
    profile: Optional[ProfileResponse] = Field(
        default=None,
        description="The owner's profile after the streak update, when applied.",
    )

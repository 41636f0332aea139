"""
Goals router.

POST   /goals                   : add a goal
GET    /goals                   : own goals for a day
PATCH  /goals/{goal_id}/completion
PATCH  /goals/{goal_id}/text
PATCH  /goals/{goal_id}/privacy
DELETE /goals/{goal_id}
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.session import SessionContext, require_session
from app.db.base import get_db
from app.models.goal import Goal
from app.routers.profiles import snapshot_to_response
from app.schemas.common import ErrorResponse
from app.schemas.goal import (
    GoalCompletionRequest,
    GoalCompletionResponse,
    GoalCreateRequest,
    GoalListResponse,
    GoalPrivacyRequest,
    GoalResponse,
    GoalTextRequest,
)
from app.services import goals as goal_service

router = APIRouter(prefix="/goals", tags=["goals"])

_OWNED_GOAL_ERRORS = {
    401: {"model": ErrorResponse, "description": "X-User-Id header missing."},
    403: {"model": ErrorResponse, "description": "Goal belongs to another user."},
    404: {"model": ErrorResponse, "description": "Goal does not exist."},
}


# ---------------------------------------------------------------------------
# Serialization helper
# ---------------------------------------------------------------------------

def goal_to_response(goal: Goal) -> GoalResponse:
    return GoalResponse(
        id=goal.id,
        owner_id=goal.owner_id,
        text=goal.text,
        completed=goal.completed,
        is_public=goal.is_public,
        date=str(goal.day),
        created_at=goal.created_at.isoformat() if goal.created_at else "",
    )


# ---------------------------------------------------------------------------
# Create / list
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=GoalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a goal",
    responses={
        401: {"model": ErrorResponse, "description": "X-User-Id header missing."},
        422: {"description": "Validation error (empty text, bad date, etc.)"},
    },
)
def create_goal(
    payload: GoalCreateRequest,
    session: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    """Create an incomplete goal for the caller. `date` defaults to the caller's today."""
    goal = goal_service.create_goal(
        db,
        owner_id=session.user_id,
        text=payload.text,
        day=payload.date or session.today,
        is_public=payload.is_public,
    )
    return goal_to_response(goal)


@router.get(
    "",
    response_model=GoalListResponse,
    summary="Own goals for a day (oldest first)",
    responses={401: {"model": ErrorResponse, "description": "X-User-Id header missing."}},
)
def list_goals(
    day: Optional[date] = Query(
        default=None,
        description="ISO date (YYYY-MM-DD). Defaults to the caller's today.",
        examples=["2026-02-20"],
    ),
    session: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    target = day or session.today
    goals = goal_service.list_goals_for_date(db, session.user_id, target)
    return GoalListResponse(
        date=str(target),
        total=len(goals),
        completed=sum(1 for g in goals if g.completed),
        items=[goal_to_response(g) for g in goals],
    )


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

@router.patch(
    "/{goal_id}/completion",
    response_model=GoalCompletionResponse,
    summary="Mark a goal complete or incomplete",
    responses=_OWNED_GOAL_ERRORS,
)
def set_completion(
    goal_id: int,
    payload: GoalCompletionRequest,
    session: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    """
    Set the goal's `completed` flag.

    Moving a goal from incomplete to complete also advances the owner's
    streak. That second write is best-effort: if it fails the goal is still
    completed and `streak_applied` is false. Un-completing never changes
    the streak.
    """
    result = goal_service.set_goal_completion(
        db, goal_id, session.user_id, payload.completed
    )
    return GoalCompletionResponse(
        goal=goal_to_response(result.goal),
        streak_triggered=result.streak_triggered,
        streak_applied=result.streak_applied,
        profile=snapshot_to_response(result.profile) if result.profile else None,
    )


@router.patch(
    "/{goal_id}/text",
    response_model=GoalResponse,
    summary="Edit a goal's text",
    responses=_OWNED_GOAL_ERRORS,
)
def edit_text(
    goal_id: int,
    payload: GoalTextRequest,
    session: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    goal = goal_service.update_goal_text(db, goal_id, session.user_id, payload.text)
    return goal_to_response(goal)


@router.patch(
    "/{goal_id}/privacy",
    response_model=GoalResponse,
    summary="Share or unshare a goal",
    responses=_OWNED_GOAL_ERRORS,
)
def edit_privacy(
    goal_id: int,
    payload: GoalPrivacyRequest,
    session: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    goal = goal_service.update_goal_privacy(
        db, goal_id, session.user_id, payload.is_public
    )
    return goal_to_response(goal)


@router.delete(
    "/{goal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a goal",
    responses=_OWNED_GOAL_ERRORS,
)
def delete_goal(
    goal_id: int,
    session: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    """Delete the goal. The owner's streak is left as it is."""
    goal_service.delete_goal(db, goal_id, session.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

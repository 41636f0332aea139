"""
History router.

GET /history/dates  : days the caller planned goals for, newest first
GET /history/stats  : totals and average completion across all days
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.session import SessionContext, require_session
from app.db.base import get_db
from app.schemas.common import ErrorResponse
from app.schemas.history import GoalDatesResponse, HistoryStatsResponse
from app.services.history import get_history_stats, list_goal_dates

router = APIRouter(prefix="/history", tags=["history"])

_AUTH_ERRORS = {401: {"model": ErrorResponse, "description": "X-User-Id header missing."}}


@router.get(
    "/dates",
    response_model=GoalDatesResponse,
    summary="Days with goals (newest first)",
    responses=_AUTH_ERRORS,
)
def goal_dates(
    session: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    dates = list_goal_dates(db, session.user_id)
    return GoalDatesResponse(total=len(dates), dates=[str(d) for d in dates])


@router.get(
    "/stats",
    response_model=HistoryStatsResponse,
    summary="Goal totals and average completion",
    responses=_AUTH_ERRORS,
)
def history_stats(
    session: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    stats = get_history_stats(db, session.user_id)
    return HistoryStatsResponse(
        total_days=stats.total_days,
        total_goals=stats.total_goals,
        completed_goals=stats.completed_goals,
        average_completion=stats.average_completion,
    )

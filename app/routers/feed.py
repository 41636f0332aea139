"""
Public feed router.

GET /feed/public  : shared goals for a day with owner name, avatar, streak
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.session import SessionContext, get_session
from app.db.base import get_db
from app.schemas.feed import PublicFeedResponse, PublicGoalResponse
from app.services.feed import FeedItem, get_public_feed

router = APIRouter(prefix="/feed", tags=["feed"])


def _item_to_response(item: FeedItem) -> PublicGoalResponse:
    return PublicGoalResponse(
        id=item.id,
        owner_id=item.owner_id,
        text=item.text,
        completed=item.completed,
        date=str(item.day),
        created_at=item.created_at.isoformat() if item.created_at else "",
        user_name=item.user_name,
        user_avatar=item.user_avatar,
        user_streak=item.user_streak,
    )


@router.get(
    "/public",
    response_model=PublicFeedResponse,
    summary="Public goals for a day (newest first)",
)
def public_feed(
    day: Optional[date] = Query(
        default=None,
        description=(
            "ISO date (YYYY-MM-DD). Defaults to the caller's today "
            "(X-Client-Date header, else UTC)."
        ),
        examples=["2026-02-20"],
    ),
    session: SessionContext = Depends(get_session),
    db: Session = Depends(get_db),
):
    """
    Goals marked public for the given day, each joined with its owner's
    display name, avatar and streak. If an owner cannot be looked up the
    item is still returned, shown as "Anonymous" with streak 0.
    """
    target = day or session.today
    items = get_public_feed(db, target)
    return PublicFeedResponse(
        date=str(target),
        total=len(items),
        items=[_item_to_response(i) for i in items],
    )

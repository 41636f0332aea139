"""
Public feed: today's shared goals joined with minimal owner identity.

The owner lookup runs once per goal. A lookup that raises only degrades
that one item to the anonymous identity; the rest of the feed is built
normally. Owner fields are a read-side copy and are never written back to
the profile.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.services import goal_store

logger = logging.getLogger("streakboard.feed")

ANONYMOUS_NAME = "Anonymous"


@dataclass
class FeedItem:
    id: int
    owner_id: str
    text: str
    completed: bool
    day: date
    created_at: datetime
    user_name: str
    user_avatar: Optional[str]
    user_streak: int


def _owner_identity(db: Session, owner_id: str) -> tuple[str, Optional[str], int]:
    """
    Look up one owner inside its own savepoint, so a failed lookup leaves
    the surrounding transaction usable for the next item.
    """
    savepoint = db.begin_nested()
    try:
        profile = goal_store.get_profile(db, owner_id)
        if profile is None:
            identity = (ANONYMOUS_NAME, None, 0)
        else:
            identity = (
                profile.display_name or ANONYMOUS_NAME,
                profile.avatar_url,
                profile.streak or 0,
            )
        savepoint.commit()
    except Exception as exc:
        savepoint.rollback()
        logger.warning("owner lookup failed for %s, showing as anonymous: %s", owner_id, exc)
        return ANONYMOUS_NAME, None, 0
    return identity


def get_public_feed(db: Session, day: date) -> list[FeedItem]:
    """Public goals for `day`, newest first."""
    goals = goal_store.query_goals(db, day=day, is_public=True)
    rows = [
        (g.id, g.owner_id, g.text, g.completed, g.day, g.created_at)
        for g in goals
    ]
    items = []
    for goal_id, owner_id, text, completed, goal_day, created_at in rows:
        name, avatar, streak = _owner_identity(db, owner_id)
        items.append(FeedItem(
            id=goal_id,
            owner_id=owner_id,
            text=text,
            completed=completed,
            day=goal_day,
            created_at=created_at,
            user_name=name,
            user_avatar=avatar,
            user_streak=streak,
        ))
    items.sort(key=lambda i: (i.created_at, i.id), reverse=True)
    logger.debug("public feed for %s: %d items", day, len(items))
    return items

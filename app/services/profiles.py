"""
Profile service: sign-in sync, streak persistence, leaderboard.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Union

from sqlalchemy.orm import Session

from app.core.errors import ProfileNotFoundError
from app.core.session import SessionContext
from app.models.user_profile import UserProfile
from app.services import goal_store
from app.services.streaks import ProfileSnapshot, advance_streak, rank

logger = logging.getLogger("streakboard.profiles")


def sync_profile(db: Session, session: SessionContext) -> UserProfile:
    """
    Refresh the identity-provider copies (name, avatar) on sign-in.

    Creates the profile with streak 0 the first time; never touches the
    streak fields of an existing one.
    """
    user_id = session.require_user()
    existing = goal_store.get_profile(db, user_id)
    if existing is None:
        snapshot = ProfileSnapshot(
            user_id=user_id,
            display_name=session.display_name or "",
            avatar_url=session.avatar_url,
            streak=0,
        )
        logger.info("creating profile for %s", user_id)
    else:
        snapshot = replace(
            ProfileSnapshot.from_orm(existing),
            display_name=session.display_name or existing.display_name or "",
            avatar_url=session.avatar_url,
        )
    return goal_store.upsert_profile(db, snapshot)


def get_profile(db: Session, user_id: str) -> UserProfile:
    profile = goal_store.get_profile(db, user_id)
    if profile is None:
        raise ProfileNotFoundError(user_id)
    return profile


def record_completion(
    db: Session,
    user_id: str,
    completion_date: Union[date, str],
) -> ProfileSnapshot:
    """
    Read the profile, advance the streak for `completion_date`, write it back.

    Read-then-write without a lock: two completions for the same user
    landing at once can both read the old streak, and the later commit
    wins.
    """
    row = goal_store.get_profile(db, user_id)
    current = ProfileSnapshot.from_orm(row) if row is not None else None
    updated = advance_streak(current, completion_date, user_id=user_id)
    goal_store.upsert_profile(db, updated)
    logger.info(
        "streak for %s: %s -> %s (completion %s)",
        user_id,
        current.streak if current else 0,
        updated.streak,
        updated.last_completion_date,
    )
    return updated


def get_leaderboard(db: Session) -> list[ProfileSnapshot]:
    return rank(ProfileSnapshot.from_orm(p) for p in goal_store.list_profiles(db))

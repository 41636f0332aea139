"""
Goal Store: minimal persistence contract over the `goals` and `users` tables.

Public API
----------
get_goal(db, goal_id)                          -> Goal | None
insert_goal(db, owner_id, text, day, is_public) -> Goal
update_goal_field(db, goal_id, field, value)    -> Goal
delete_goal(db, goal_id)                        -> bool
query_goals(db, owner_id=, day=, is_public=)    -> list[Goal]   (unordered)
get_profile(db, user_id)                        -> UserProfile | None
upsert_profile(db, snapshot)                    -> UserProfile
list_profiles(db)                               -> list[UserProfile]

Every write commits. No pagination, no locking: a read-then-write done by
a caller (e.g. the streak update) can race with another request and the
last commit wins.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.core.errors import GoalNotFoundError, ImmutableFieldError
from app.models.goal import Goal
from app.models.user_profile import UserProfile
from app.services.streaks import ProfileSnapshot

logger = logging.getLogger("streakboard.store")

# id, owner_id, day and created_at are fixed at creation.
MUTABLE_GOAL_FIELDS = frozenset({"text", "completed", "is_public"})


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------

def get_goal(db: Session, goal_id: int) -> Optional[Goal]:
    return db.get(Goal, goal_id)


def insert_goal(
    db: Session,
    owner_id: str,
    text: str,
    day: date,
    is_public: bool = False,
) -> Goal:
    goal = Goal(
        owner_id=owner_id,
        text=text,
        day=day,
        completed=False,
        is_public=is_public,
    )
    db.add(goal)
    db.commit()
    db.refresh(goal)
    logger.info("goal %s created for %s on %s", goal.id, owner_id, day)
    return goal


def update_goal_field(db: Session, goal_id: int, field: str, value: Any) -> Goal:
    if field not in MUTABLE_GOAL_FIELDS:
        raise ImmutableFieldError(field)
    goal = get_goal(db, goal_id)
    if goal is None:
        raise GoalNotFoundError(goal_id)
    setattr(goal, field, value)
    db.commit()
    db.refresh(goal)
    return goal


def delete_goal(db: Session, goal_id: int) -> bool:
    goal = get_goal(db, goal_id)
    if goal is None:
        return False
    db.delete(goal)
    db.commit()
    logger.info("goal %s deleted", goal_id)
    return True


def query_goals(
    db: Session,
    owner_id: Optional[str] = None,
    day: Optional[date] = None,
    is_public: Optional[bool] = None,
) -> list[Goal]:
    q = db.query(Goal)
    if owner_id is not None:
        q = q.filter(Goal.owner_id == owner_id)
    if day is not None:
        q = q.filter(Goal.day == day)
    if is_public is not None:
        q = q.filter(Goal.is_public == is_public)
    return q.all()


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

def get_profile(db: Session, user_id: str) -> Optional[UserProfile]:
    return db.get(UserProfile, user_id)


def upsert_profile(db: Session, snapshot: ProfileSnapshot) -> UserProfile:
    """Insert the profile, or replace all of its mutable fields."""
    row = get_profile(db, snapshot.user_id)
    if row is None:
        row = UserProfile(user_id=snapshot.user_id)
        db.add(row)
    row.display_name = snapshot.display_name or ""
    row.avatar_url = snapshot.avatar_url
    row.streak = snapshot.streak or 0
    row.last_completion_date = snapshot.last_completion_date
    db.commit()
    db.refresh(row)
    return row


def list_profiles(db: Session) -> list[UserProfile]:
    return db.query(UserProfile).all()

"""
Goal service: create, list, complete, edit, share, delete.

Completion is two independent steps:
  1. the goal's `completed` flag is written and committed;
  2. on an incomplete -> complete transition only, the owner's streak is
     advanced (profiles.record_completion).

Step 2 is best-effort. If it fails the goal stays completed, the error is
logged and `CompletionResult.streak_applied` is False. Nothing is retried.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import GoalNotFoundError, GoalOwnershipError
from app.models.goal import Goal
from app.services import goal_store, profiles
from app.services.streaks import ProfileSnapshot

logger = logging.getLogger("streakboard.goals")


@dataclass
class CompletionResult:
    goal: Goal
    streak_triggered: bool             # True only on incomplete -> complete
    streak_applied: bool               # profile write succeeded
    profile: Optional[ProfileSnapshot]  # post-update profile when applied


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _owned_goal(db: Session, goal_id: int, owner_id: str) -> Goal:
    goal = goal_store.get_goal(db, goal_id)
    if goal is None:
        raise GoalNotFoundError(goal_id)
    if goal.owner_id != owner_id:
        raise GoalOwnershipError(goal_id, owner_id)
    return goal


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def create_goal(
    db: Session,
    owner_id: str,
    text: str,
    day: date,
    is_public: bool = False,
) -> Goal:
    return goal_store.insert_goal(db, owner_id, text, day, is_public)


def list_goals_for_date(db: Session, owner_id: str, day: date) -> list[Goal]:
    """The owner's goals for `day`, oldest first."""
    goals = goal_store.query_goals(db, owner_id=owner_id, day=day)
    return sorted(goals, key=lambda g: (g.created_at, g.id))


def set_goal_completion(
    db: Session,
    goal_id: int,
    owner_id: str,
    completed: bool,
) -> CompletionResult:
    goal = _owned_goal(db, goal_id, owner_id)
    was_completed = goal.completed
    goal = goal_store.update_goal_field(db, goal_id, "completed", completed)

    if not completed or was_completed:
        return CompletionResult(
            goal=goal, streak_triggered=False, streak_applied=False, profile=None
        )

    # The completion is committed and refreshed; detach it so a rollback of
    # the streak step cannot expire it and force a reload.
    completion_day = goal.day
    db.expunge(goal)

    try:
        profile = profiles.record_completion(db, owner_id, completion_day)
    except (SQLAlchemyError, ValueError) as exc:
        db.rollback()
        logger.warning(
            "goal %s completed but streak update for %s was not applied: %s",
            goal_id, owner_id, exc,
        )
        return CompletionResult(
            goal=goal, streak_triggered=True, streak_applied=False, profile=None
        )

    return CompletionResult(
        goal=goal, streak_triggered=True, streak_applied=True, profile=profile
    )


def update_goal_text(db: Session, goal_id: int, owner_id: str, text: str) -> Goal:
    _owned_goal(db, goal_id, owner_id)
    return goal_store.update_goal_field(db, goal_id, "text", text)


def update_goal_privacy(
    db: Session, goal_id: int, owner_id: str, is_public: bool
) -> Goal:
    _owned_goal(db, goal_id, owner_id)
    return goal_store.update_goal_field(db, goal_id, "is_public", is_public)


def delete_goal(db: Session, goal_id: int, owner_id: str) -> None:
    _owned_goal(db, goal_id, owner_id)
    goal_store.delete_goal(db, goal_id)

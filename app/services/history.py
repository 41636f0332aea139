"""
History service: which days a user planned goals for, and how it went.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.orm import Session

from app.services import goal_store


@dataclass
class HistoryStats:
    total_days: int
    total_goals: int
    completed_goals: int
    average_completion: int   # whole percent, 0 – 100


def list_goal_dates(db: Session, owner_id: str) -> list[date]:
    """Distinct days with at least one goal, newest first."""
    days = {g.day for g in goal_store.query_goals(db, owner_id=owner_id)}
    return sorted(days, reverse=True)


def get_history_stats(db: Session, owner_id: str) -> HistoryStats:
    goals = goal_store.query_goals(db, owner_id=owner_id)
    total = len(goals)
    completed = sum(1 for g in goals if g.completed)
    if total:
        pct = (Decimal(completed) * 100 / Decimal(total)).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )
        average = int(pct)
    else:
        average = 0
    return HistoryStats(
        total_days=len({g.day for g in goals}),
        total_goals=total,
        completed_goals=completed,
        average_completion=average,
    )

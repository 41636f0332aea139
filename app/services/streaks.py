"""
Streak engine and leaderboard ranking.

Streak rule (applied once per incomplete -> complete transition)
----------------------------------------------------------------
  last completion absent       -> streak = 1
  completion - last == 1 day   -> streak + 1   (consecutive day)
  completion - last == 0 days  -> streak       (same day, no inflation)
  anything else                -> streak = 1   (gap, or backdated completion)

last_completion_date is always set to the new completion date, so a
backdated completion moves it backwards. Un-completing a goal never calls
into this module.

Ranking
-------
streak descending, then display_name ascending, case-sensitive. Names are
compared with locale.strxfrm under the process LC_COLLATE, which is the "C"
locale (plain code-point order, so "Zoe" sorts before "al") unless
set_collation_locale() has been called; the app does that at startup when
COLLATION_LOCALE is set. Sorting is stable, so fully equal profiles keep
their input order.

Everything except set_collation_locale is pure: no ORM, no I/O. Callers
persist the result.
"""
from __future__ import annotations

import locale
import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Iterable, Optional, Union

from app.core.errors import InvalidCompletionDateError

logger = logging.getLogger("streakboard.streaks")


# ---------------------------------------------------------------------------
# Value type (plain dataclass, decoupled from the ORM row)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProfileSnapshot:
    user_id: str
    display_name: str = ""
    avatar_url: Optional[str] = None
    streak: Optional[int] = 0
    last_completion_date: Optional[date] = None

    @classmethod
    def from_orm(cls, row) -> "ProfileSnapshot":
        return cls(
            user_id=row.user_id,
            display_name=row.display_name or "",
            avatar_url=row.avatar_url,
            streak=row.streak or 0,
            last_completion_date=row.last_completion_date,
        )


# ---------------------------------------------------------------------------
# Streak engine
# ---------------------------------------------------------------------------

def parse_completion_date(value: Union[date, str]) -> date:
    """Accept a `date` or an ISO `YYYY-MM-DD` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise InvalidCompletionDateError(value) from None
    raise InvalidCompletionDateError(value)


def next_streak(
    streak: Optional[int],
    last_completion: Optional[date],
    completion: date,
) -> int:
    if last_completion is None:
        return 1
    diff_days = (completion - last_completion).days
    if diff_days == 1:
        return (streak or 0) + 1
    if diff_days == 0:
        return streak or 0
    return 1


def advance_streak(
    profile: Optional[ProfileSnapshot],
    completion_date: Union[date, str],
    user_id: Optional[str] = None,
) -> ProfileSnapshot:
    """
    Return the profile as it should look after a goal dated
    `completion_date` is marked complete.

    `profile=None` means the user has no profile row yet; `user_id` is
    then required to build one.
    """
    completion = parse_completion_date(completion_date)
    if profile is None:
        if not user_id:
            raise ValueError("user_id is required when no profile exists")
        profile = ProfileSnapshot(user_id=user_id)

    new_streak = next_streak(profile.streak, profile.last_completion_date, completion)
    return replace(profile, streak=new_streak, last_completion_date=completion)


# ---------------------------------------------------------------------------
# Leaderboard ranking
# ---------------------------------------------------------------------------

def _rank_key(profile: ProfileSnapshot) -> tuple:
    return (-(profile.streak or 0), locale.strxfrm(profile.display_name or ""))


def rank(profiles: Iterable[ProfileSnapshot]) -> list[ProfileSnapshot]:
    """Leaderboard order. Returns a new list; the input is left alone."""
    return sorted(profiles, key=_rank_key)


def set_collation_locale(name: str) -> bool:
    """
    Switch the process LC_COLLATE used by `rank`. Returns False, leaving the
    current collation in place, when the locale is not installed.
    """
    try:
        locale.setlocale(locale.LC_COLLATE, name)
    except locale.Error:
        logger.warning("collation locale %r unavailable, keeping %r",
                       name, locale.setlocale(locale.LC_COLLATE))
        return False
    logger.info("leaderboard names collated with %r", name)
    return True

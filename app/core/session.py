"""
Per-request session context.

Identity is asserted by the upstream identity provider and forwarded as
headers. Handlers receive a `SessionContext` through `Depends` instead of
reading any process-wide "current user".

  X-User-Id     : stable user id (required on user-scoped routes)
  X-User-Name   : display name, used when syncing the profile
  X-User-Avatar : avatar URL, used when syncing the profile
  X-Client-Date : the caller's local calendar date (YYYY-MM-DD)
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import Header

from app.core.errors import MissingIdentityError


def _today_utc() -> date:
    return datetime.now(tz=timezone.utc).date()


@dataclass(frozen=True)
class SessionContext:
    user_id: Optional[str]
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    client_date: Optional[date] = None

    @property
    def today(self) -> date:
        """The caller's "today": their local date if they sent one, else UTC."""
        return self.client_date or _today_utc()

    def require_user(self) -> str:
        if not self.user_id:
            raise MissingIdentityError()
        return self.user_id


def get_session(
    x_user_id: Optional[str] = Header(default=None),
    x_user_name: Optional[str] = Header(default=None),
    x_user_avatar: Optional[str] = Header(default=None),
    x_client_date: Optional[date] = Header(default=None),
) -> SessionContext:
    user_id = x_user_id.strip() if x_user_id else None
    return SessionContext(
        user_id=user_id or None,
        display_name=x_user_name,
        avatar_url=x_user_avatar,
        client_date=x_client_date,
    )


def require_session(
    x_user_id: Optional[str] = Header(default=None),
    x_user_name: Optional[str] = Header(default=None),
    x_user_avatar: Optional[str] = Header(default=None),
    x_client_date: Optional[date] = Header(default=None),
) -> SessionContext:
    """Like `get_session`, but rejects anonymous callers with 401."""
    session = get_session(x_user_id, x_user_name, x_user_avatar, x_client_date)
    session.require_user()
    return session

"""
Profiles router.

POST /profiles/sync  : sign-in hook: create or refresh the caller's profile
GET  /profiles/me    : caller's profile with current streak
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.session import SessionContext, require_session
from app.db.base import get_db
from app.schemas.common import ErrorResponse
from app.schemas.profile import ProfileResponse
from app.services import profiles as profile_service

router = APIRouter(prefix="/profiles", tags=["profiles"])


def snapshot_to_response(p) -> ProfileResponse:
    """Serialize a UserProfile row or a ProfileSnapshot (same attribute names)."""
    return ProfileResponse(
        user_id=p.user_id,
        display_name=p.display_name or "",
        avatar_url=p.avatar_url,
        streak=p.streak or 0,
        last_completion_date=(
            str(p.last_completion_date) if p.last_completion_date else None
        ),
    )


@router.post(
    "/sync",
    response_model=ProfileResponse,
    summary="Create or refresh the caller's profile on sign-in",
    responses={401: {"model": ErrorResponse, "description": "X-User-Id header missing."}},
)
def sync_profile(
    session: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    """
    Copy `X-User-Name` / `X-User-Avatar` onto the caller's profile.

    The first call creates the profile with streak 0. Later calls only
    refresh the display fields; the streak is never touched here.
    """
    return snapshot_to_response(profile_service.sync_profile(db, session))


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Caller's profile",
    responses={
        401: {"model": ErrorResponse, "description": "X-User-Id header missing."},
        404: {"model": ErrorResponse, "description": "No profile yet."},
    },
)
def my_profile(
    session: SessionContext = Depends(require_session),
    db: Session = Depends(get_db),
):
    return snapshot_to_response(profile_service.get_profile(db, session.user_id))

"""
Leaderboard router.

GET /leaderboard  : every profile, streak descending then name ascending
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.routers.profiles import snapshot_to_response
from app.schemas.profile import LeaderboardEntry, LeaderboardResponse
from app.services.profiles import get_leaderboard

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get(
    "",
    response_model=LeaderboardResponse,
    summary="Streak leaderboard (full, unpaginated)",
)
def leaderboard(db: Session = Depends(get_db)):
    """
    Rank all users by current streak (descending). Equal streaks are
    ordered by display name (ascending) so the order is deterministic.
    """
    ranked = get_leaderboard(db)
    return LeaderboardResponse(
        total=len(ranked),
        items=[
            LeaderboardEntry(rank=i, **snapshot_to_response(p).model_dump())
            for i, p in enumerate(ranked, start=1)
        ],
    )

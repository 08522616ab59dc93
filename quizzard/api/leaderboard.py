"""
Leaderboard API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
import logging

from quizzard.api.deps import AuthenticatedUser, get_current_user
from quizzard.database import get_db
from quizzard.schemas.leaderboard import LeaderboardResponse
from quizzard.services.leaderboard_service import leaderboard_service
from quizzard.services.user_service import user_service

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])
logger = logging.getLogger(__name__)


@router.get("/global", response_model=LeaderboardResponse)
async def get_global_leaderboard(
    sortBy: str = Query("mana"),
    sortOrder: str = Query("desc"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """
    Global ranking of all users

    Returns username, mana, mageMeter and totalQuizzes per row
    """
    try:
        rows = leaderboard_service.get_leaderboard(
            db, sort_by=sortBy, sort_order=sortOrder, page=page, limit=limit
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return LeaderboardResponse(leaderboard=rows)


@router.get("/friends", response_model=LeaderboardResponse)
async def get_friends_leaderboard(
    sortBy: str = Query("mana"),
    sortOrder: str = Query("desc"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Ranking of the current user and their friends"""
    user = user_service.get_by_id(db, current.id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        rows = leaderboard_service.get_friends_leaderboard(
            db, user, sort_by=sortBy, sort_order=sortOrder, page=page, limit=limit
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return LeaderboardResponse(leaderboard=rows)

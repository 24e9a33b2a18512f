from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from learnflow.database import get_session
from learnflow.auth import get_current_user
from learnflow.models import User
from learnflow.schemas import LeaderboardEntry, UserRankRead, LeaderboardStats
from learnflow.scoring import get_top_users, get_user_rank, get_leaderboard_stats

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("/", response_model=list[LeaderboardEntry])
async def top_users(
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_session),
):
    return await get_top_users(db, limit)


@router.get("/me", response_model=UserRankRead)
async def my_rank(
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    entry = await get_user_rank(db, current_user)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "code": "not_ranked",
                "message": "Complete a quiz to appear on the leaderboard",
            },
        )
    return entry


@router.get("/stats", response_model=LeaderboardStats)
async def stats(db: AsyncSession = Depends(get_session)):
    return await get_leaderboard_stats(db)

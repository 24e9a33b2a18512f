from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from learnflow.database import get_session
from learnflow.auth import get_current_user
from learnflow.models import User
from learnflow.schemas import UserProgressResponse, ResultRead, ProgressAnalytics
from learnflow.progression import get_user_progress, get_pending_badge_results
from learnflow.services.analytics import (
    ProgressAdvisor,
    generate_progress_analytics,
    get_progress_advisor,
)

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("/me", response_model=UserProgressResponse)
async def my_progress(
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return await get_user_progress(db, current_user)


@router.get("/me/pending-badges", response_model=list[ResultRead])
async def my_pending_badges(
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """Perfect attempts still waiting for their badge to be minted."""
    return await get_pending_badge_results(db, current_user)


@router.get("/me/analytics", response_model=ProgressAnalytics)
async def my_analytics(
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    advisor: ProgressAdvisor = Depends(get_progress_advisor),
):
    return await generate_progress_analytics(db, current_user, advisor)

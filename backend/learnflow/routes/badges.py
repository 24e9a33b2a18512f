"""Routes for minting and listing quiz achievement badges."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from learnflow.database import get_session
from learnflow.auth import get_current_user
from learnflow.models import User
from learnflow.schemas import (
    BadgeMintRequest,
    BadgeMintResponse,
    BadgeRead,
    NetworkStatus,
    ServiceWalletInfo,
)
from learnflow.progression import get_user_badges
from learnflow.services.badge_minter import (
    BadgeMinter,
    get_badge_minter,
    mint_badge,
    service_wallet_info,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/badges", tags=["badges"])


@router.post("/mint", response_model=BadgeMintResponse)
async def mint(
    data: BadgeMintRequest,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    minter: BadgeMinter = Depends(get_badge_minter),
):
    return await mint_badge(
        db,
        current_user,
        minter,
        quiz_id=data.quiz_id,
        wallet_address=data.wallet_address,
        student_name=data.student_name,
        score=data.score,
        total_questions=data.total_questions,
        result_id=data.result_id,
    )


@router.get("/me", response_model=list[BadgeRead])
async def my_badges(
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return await get_user_badges(db, current_user)


@router.get("/network", response_model=NetworkStatus)
async def network_status(
    current_user: User = Depends(get_current_user),
    minter: BadgeMinter = Depends(get_badge_minter),
):
    """Report whether the blockchain explorer is reachable."""
    result = await minter.check_connection()
    if not result.connected:
        logger.warning("Badge network check failed for user %s", current_user.id)
    return result


@router.get("/service-wallet", response_model=ServiceWalletInfo)
async def service_wallet(current_user: User = Depends(get_current_user)):
    return service_wallet_info()

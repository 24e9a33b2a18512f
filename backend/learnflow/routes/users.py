from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from learnflow.schemas import UserResponse, NameUpdate
from learnflow.models import User
from learnflow.database import get_session
from learnflow.auth import get_current_user
from learnflow.users import update_user_name

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_user)):
    """Return details for the authenticated user."""
    return current_user


@router.put("/me/name", response_model=UserResponse)
async def update_my_name(
    data: NameUpdate,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return await update_user_name(db, current_user, data.name)

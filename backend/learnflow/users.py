"""Learner profile helpers."""

from sqlalchemy.ext.asyncio import AsyncSession

from learnflow.crud import save_user
from learnflow.errors import AuthenticationRequired, ValidationFailed
from learnflow.models import User

MAX_NAME_LENGTH = 50


def validate_display_name(name: str) -> str:
    """Return the trimmed name or raise ``ValidationFailed``."""
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationFailed("Name cannot be empty")
    if len(trimmed) > MAX_NAME_LENGTH:
        raise ValidationFailed(
            f"Name cannot be longer than {MAX_NAME_LENGTH} characters"
        )
    return trimmed


async def update_user_name(db: AsyncSession, user: User | None, name: str) -> User:
    if user is None:
        raise AuthenticationRequired()
    user.name = validate_display_name(name)
    return await save_user(db, user)

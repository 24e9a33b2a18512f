"""Asynchronous CRUD helpers for the application's data models.

Each function in this module encapsulates a specific database operation
using SQLModel and SQLAlchemy.  Centralizing the logic keeps route
handlers and the progression/voting/scoring modules light and makes
behavior easier to test.
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from sqlalchemy import func
from learnflow.models import (
    User,
    Quiz,
    QuizResult,
    UserProgress,
    QuizVote,
    NFTBadge,
)
from learnflow.auth import get_password_hash

logger = logging.getLogger(__name__)


async def create_user(db: AsyncSession, user: User) -> User:
    """Create a new user, hashing the password if it is still plain text."""

    if not user.password_hash.startswith("$2b$"):
        user.password_hash = get_password_hash(user.password_hash)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    """Load a user by primary key."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_users_by_ids(db: AsyncSession, user_ids: set[int]) -> dict[int, User]:
    if not user_ids:
        return {}
    result = await db.execute(select(User).where(User.id.in_(user_ids)))
    return {u.id: u for u in result.scalars().all()}


async def count_users(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(User))
    return result.scalar()


async def save_user(db: AsyncSession, user: User) -> User:
    """Persist changes to an existing user."""

    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def get_quiz(db: AsyncSession, quiz_id: int) -> Quiz | None:
    result = await db.execute(select(Quiz).where(Quiz.id == quiz_id))
    return result.scalar_one_or_none()


async def get_all_quizzes(db: AsyncSession) -> list[Quiz]:
    result = await db.execute(select(Quiz).order_by(Quiz.order, Quiz.id))
    return result.scalars().all()


async def get_active_quizzes(db: AsyncSession) -> list[Quiz]:
    """Return active quizzes in ordinal order."""

    result = await db.execute(
        select(Quiz)
        .where(Quiz.is_active == True)  # noqa: E712
        .order_by(Quiz.order, Quiz.id)
    )
    return result.scalars().all()


async def get_first_quiz(db: AsyncSession) -> Quiz | None:
    """Return the active quiz with the lowest ordinal position."""

    result = await db.execute(
        select(Quiz)
        .where(Quiz.is_active == True)  # noqa: E712
        .order_by(Quiz.order, Quiz.id)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_quizzes_by_ids(db: AsyncSession, quiz_ids: set[int]) -> dict[int, Quiz]:
    if not quiz_ids:
        return {}
    result = await db.execute(select(Quiz).where(Quiz.id.in_(quiz_ids)))
    return {q.id: q for q in result.scalars().all()}


async def create_quiz(db: AsyncSession, quiz: Quiz) -> Quiz:
    db.add(quiz)
    await db.commit()
    await db.refresh(quiz)
    return quiz


async def save_quiz(db: AsyncSession, quiz: Quiz) -> Quiz:
    db.add(quiz)
    await db.commit()
    await db.refresh(quiz)
    return quiz


async def get_results_by_user(db: AsyncSession, user_id: int) -> list[QuizResult]:
    """Return a user's attempts, oldest first."""

    result = await db.execute(
        select(QuizResult)
        .where(QuizResult.user_id == user_id)
        .order_by(QuizResult.completed_at, QuizResult.id)
    )
    return result.scalars().all()


async def get_result(db: AsyncSession, result_id: int) -> QuizResult | None:
    result = await db.execute(select(QuizResult).where(QuizResult.id == result_id))
    return result.scalar_one_or_none()


async def has_perfect_result(db: AsyncSession, user_id: int, quiz_id: int) -> bool:
    result = await db.execute(
        select(QuizResult.id)
        .where(
            QuizResult.user_id == user_id,
            QuizResult.quiz_id == quiz_id,
            QuizResult.is_perfect_score == True,  # noqa: E712
        )
        .limit(1)
    )
    return result.first() is not None


async def get_progress_by_user(db: AsyncSession, user_id: int) -> UserProgress | None:
    result = await db.execute(
        select(UserProgress).where(UserProgress.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_all_progress(db: AsyncSession) -> list[UserProgress]:
    """Return every progress row in insertion order."""

    result = await db.execute(select(UserProgress).order_by(UserProgress.id))
    return result.scalars().all()


async def get_vote(db: AsyncSession, user_id: int, quiz_id: int) -> QuizVote | None:
    result = await db.execute(
        select(QuizVote).where(
            QuizVote.user_id == user_id, QuizVote.quiz_id == quiz_id
        )
    )
    return result.scalar_one_or_none()


async def get_votes_by_user(db: AsyncSession, user_id: int) -> list[QuizVote]:
    result = await db.execute(select(QuizVote).where(QuizVote.user_id == user_id))
    return result.scalars().all()


async def get_vote_counts(db: AsyncSession) -> dict[tuple[int, str], int]:
    """Count stored votes grouped by quiz and vote type."""

    result = await db.execute(
        select(QuizVote.quiz_id, QuizVote.vote_type, func.count())
        .group_by(QuizVote.quiz_id, QuizVote.vote_type)
    )
    return {(quiz_id, vote_type): count for quiz_id, vote_type, count in result.all()}


async def get_badges_by_user(db: AsyncSession, user_id: int) -> list[NFTBadge]:
    """Return a user's badges, most recently minted first."""

    result = await db.execute(
        select(NFTBadge)
        .where(NFTBadge.user_id == user_id)
        .order_by(NFTBadge.minted_at.desc(), NFTBadge.id.desc())
    )
    return result.scalars().all()


async def ensure_quiz_content(db: AsyncSession) -> int:
    """Seed the built-in quiz catalogue when no quizzes exist yet.

    Each seeded quiz requires a perfect score on the one before it.
    Returns the number of quizzes created.
    """

    from learnflow.quiz_content import BUILTIN_QUIZZES

    result = await db.execute(select(func.count()).select_from(Quiz))
    if result.scalar() > 0:
        return 0

    previous: Quiz | None = None
    for data in BUILTIN_QUIZZES:
        quiz = Quiz(
            title=data["title"],
            description=data["description"],
            level=data["level"],
            difficulty=data["difficulty"],
            category=data["category"],
            order=data["order"],
            questions=data["questions"],
            unlock_requirement=previous.id if previous else None,
        )
        db.add(quiz)
        await db.flush()  # populate quiz.id for the next prerequisite
        previous = quiz
    await db.commit()
    logger.info("Seeded %d built-in quizzes", len(BUILTIN_QUIZZES))
    return len(BUILTIN_QUIZZES)

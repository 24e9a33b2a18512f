"""Leaderboard scoring and ranking.

Ranks are never stored.  Every lookup re-derives all scores from the
progress rows and re-sorts them, so the single-user rank and the full
leaderboard always agree for the same snapshot.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from learnflow import crud
from learnflow.errors import AuthenticationRequired
from learnflow.models import User, UserProgress
from learnflow.schemas import LeaderboardEntry, LeaderboardStats, UserRankRead

POINTS_PER_PERFECT_SCORE = 100
POINTS_PER_QUIZ = 10
POINTS_PER_NFT = 50
POINTS_PER_STREAK_DAY = 5
POINTS_PER_LEVEL = 25
DEFAULT_NAME = "Anonymous Learner"


def total_score(progress: UserProgress) -> int:
    return (
        progress.total_perfect_scores * POINTS_PER_PERFECT_SCORE
        + progress.total_quizzes_completed * POINTS_PER_QUIZ
        + progress.total_nfts_earned * POINTS_PER_NFT
        + progress.streak_count * POINTS_PER_STREAK_DAY
        + progress.current_level * POINTS_PER_LEVEL
    )


async def rank_users(db: AsyncSession) -> list[LeaderboardEntry]:
    """Score every learner with progress and return them best first.

    Progress rows whose user no longer exists are skipped.  Ties keep
    progress insertion order.
    """
    rows = await crud.get_all_progress(db)
    users = await crud.get_users_by_ids(db, {p.user_id for p in rows})
    scored = [
        (progress, users[progress.user_id], total_score(progress))
        for progress in rows
        if progress.user_id in users
    ]
    scored.sort(key=lambda item: item[2], reverse=True)
    return [
        LeaderboardEntry(
            user_id=user.id,
            name=user.name or DEFAULT_NAME,
            total_score=score,
            current_level=progress.current_level,
            total_quizzes_completed=progress.total_quizzes_completed,
            total_perfect_scores=progress.total_perfect_scores,
            total_nfts_earned=progress.total_nfts_earned,
            streak_count=progress.streak_count,
            last_active_at=progress.last_active_at,
            rank=position,
        )
        for position, (progress, user, score) in enumerate(scored, start=1)
    ]


async def get_top_users(
    db: AsyncSession, limit: int | None = None
) -> list[LeaderboardEntry]:
    ranked = await rank_users(db)
    return ranked[:limit] if limit is not None else ranked


async def get_user_rank(db: AsyncSession, user: User | None) -> UserRankRead | None:
    """Return the caller's leaderboard entry, or ``None`` before any attempt."""

    if user is None:
        raise AuthenticationRequired()
    ranked = await rank_users(db)
    for entry in ranked:
        if entry.user_id == user.id:
            return UserRankRead(**entry.model_dump(), total_users=len(ranked))
    return None


async def get_leaderboard_stats(db: AsyncSession) -> LeaderboardStats:
    rows = await crud.get_all_progress(db)
    return LeaderboardStats(
        total_users=len(rows),
        total_quizzes_completed=sum(p.total_quizzes_completed for p in rows),
        total_perfect_scores=sum(p.total_perfect_scores for p in rows),
        total_nfts_earned=sum(p.total_nfts_earned for p in rows),
    )

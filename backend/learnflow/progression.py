"""Quiz unlocking, attempt recording and learner progress.

A quiz is open to a learner when it is the first active quiz in ordinal
order, when it names no prerequisite, or when the learner holds at least
one perfect-score attempt on its prerequisite.  Only the immediate
prerequisite is consulted; unlocking is not a walk along the whole chain.

Recording an attempt inserts an immutable :class:`QuizResult` and folds it
into the learner's :class:`UserProgress` (level, totals and daily streak)
in a single commit, so an attempt is never stored without its progress
update.
"""

import logging
from datetime import datetime, date, timedelta
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from learnflow import crud
from learnflow.errors import AccessDenied, AuthenticationRequired, NotFound, ValidationFailed
from learnflow.models import (
    DIFFICULTY_LEVELS,
    NFTBadge,
    Quiz,
    QuizResult,
    User,
    UserProgress,
)
from learnflow.schemas import (
    BadgeQuizSummary,
    BadgeRead,
    ProgressRead,
    QuizListing,
    QuizRead,
    ResultRead,
    UserProgressResponse,
)

logger = logging.getLogger(__name__)

GUEST_LOCKED_MESSAGE = "Sign in to access this quiz. Only the first quiz is open to guests."
LOCKED_MESSAGE = "Complete the previous quiz with a perfect score to unlock this quiz"
RECENT_RESULTS = 5

DIFFICULTY_RANK = {name: rank for rank, name in enumerate(DIFFICULTY_LEVELS)}


def is_quiz_unlocked(
    quiz: Quiz, first_quiz_id: int | None, perfect_quiz_ids: Iterable[int]
) -> bool:
    """Return ``True`` if ``quiz`` is open given the learner's perfect attempts."""
    if quiz.id == first_quiz_id:
        return True
    if quiz.unlock_requirement is None:
        return True
    return quiz.unlock_requirement in set(perfect_quiz_ids)


def _matches_search(quiz: Quiz, needle: str) -> bool:
    fields = [quiz.title, quiz.description, quiz.category, quiz.topic, quiz.difficulty]
    return any(needle in value.lower() for value in fields if value)


def sort_quizzes(quizzes: list[Quiz], sort_by: str) -> list[Quiz]:
    """Order quizzes for display; input is expected in ordinal order."""
    if sort_by == "order":
        return sorted(quizzes, key=lambda q: (q.order, q.id))
    if sort_by == "votes":
        return sorted(quizzes, key=lambda q: -q.vote_score)
    if sort_by == "newest":
        return sorted(quizzes, key=lambda q: (q.created_at, q.id), reverse=True)
    if sort_by == "difficulty":
        return sorted(
            quizzes,
            key=lambda q: (
                DIFFICULTY_RANK.get(q.difficulty, len(DIFFICULTY_RANK)),
                q.order,
                q.id,
            ),
        )
    raise ValidationFailed(f"Unknown sort mode: {sort_by}")


def _listing(quiz: Quiz, **state) -> QuizListing:
    data = QuizRead.model_validate(quiz).model_dump()
    return QuizListing(**data, total_questions=len(quiz.questions), **state)


async def list_quizzes(
    db: AsyncSession,
    user: User | None,
    sort_by: str = "order",
    search: str | None = None,
) -> list[QuizListing]:
    """Return active quizzes annotated with the caller's unlock state."""

    quizzes = await crud.get_active_quizzes(db)
    first_quiz_id = quizzes[0].id if quizzes else None
    quizzes = sort_quizzes(quizzes, sort_by)
    needle = (search or "").strip().lower()
    if needle:
        quizzes = [q for q in quizzes if _matches_search(q, needle)]

    if user is None:
        return [
            _listing(quiz, is_unlocked=quiz.id == first_quiz_id)
            for quiz in quizzes
        ]

    results = await crud.get_results_by_user(db, user.id)
    perfect_ids = {r.quiz_id for r in results if r.is_perfect_score}
    best_scores: dict[int, int] = {}
    for r in results:
        if r.quiz_id not in best_scores or r.score > best_scores[r.quiz_id]:
            best_scores[r.quiz_id] = r.score
    badge_quiz_ids = {b.quiz_id for b in await crud.get_badges_by_user(db, user.id)}
    votes = {v.quiz_id: v.vote_type for v in await crud.get_votes_by_user(db, user.id)}

    return [
        _listing(
            quiz,
            is_unlocked=is_quiz_unlocked(quiz, first_quiz_id, perfect_ids),
            is_completed=quiz.id in perfect_ids,
            best_score=best_scores.get(quiz.id),
            has_nft=quiz.id in badge_quiz_ids,
            user_vote=votes.get(quiz.id),
        )
        for quiz in quizzes
    ]


async def get_quiz_for_user(db: AsyncSession, quiz_id: int, user: User | None) -> Quiz:
    """Return a quiz the caller may take, or raise ``AccessDenied``."""

    quiz = await crud.get_quiz(db, quiz_id)
    if not quiz or not quiz.is_active:
        raise NotFound("Quiz not found")
    first = await crud.get_first_quiz(db)
    first_quiz_id = first.id if first else None
    if user is None:
        if quiz.id != first_quiz_id:
            raise AccessDenied(GUEST_LOCKED_MESSAGE)
        return quiz
    perfect_ids = set()
    if quiz.unlock_requirement is not None and await crud.has_perfect_result(
        db, user.id, quiz.unlock_requirement
    ):
        perfect_ids.add(quiz.unlock_requirement)
    if not is_quiz_unlocked(quiz, first_quiz_id, perfect_ids):
        raise AccessDenied(LOCKED_MESSAGE)
    return quiz


def advance_streak(
    streak_count: int, last_streak_date: datetime | None, today: date
) -> int:
    """Apply the daily streak rule for activity on ``today``."""
    if last_streak_date is None:
        return 1
    last_day = last_streak_date.date()
    if last_day == today - timedelta(days=1):
        return streak_count + 1
    if last_day != today:
        return 1
    return streak_count


def update_progress(
    progress: UserProgress | None,
    user_id: int,
    quiz_level: int,
    is_perfect: bool,
    earned_nft: bool,
    now: datetime,
) -> UserProgress:
    """Fold one attempt into ``progress``, creating the row if needed."""
    if progress is None:
        return UserProgress(
            user_id=user_id,
            current_level=quiz_level,
            total_quizzes_completed=1,
            total_perfect_scores=1 if is_perfect else 0,
            total_nfts_earned=1 if earned_nft else 0,
            streak_count=1,
            last_active_at=now,
            last_streak_date=now,
            achievements=[],
        )

    progress.total_quizzes_completed += 1
    if is_perfect:
        progress.total_perfect_scores += 1
    if earned_nft:
        progress.total_nfts_earned += 1
    if quiz_level > progress.current_level:
        progress.current_level = quiz_level
    progress.streak_count = advance_streak(
        progress.streak_count, progress.last_streak_date, now.date()
    )
    progress.last_streak_date = now
    progress.last_active_at = now
    return progress


async def record_result(
    db: AsyncSession,
    user: User | None,
    quiz_id: int,
    score: int,
    total_questions: int,
    time_spent: int | None = None,
    wallet_address: str | None = None,
    nft_transaction_id: str | None = None,
    now: datetime | None = None,
) -> QuizResult:
    """Store an attempt and update the learner's progress in one commit."""

    if user is None:
        raise AuthenticationRequired()
    quiz = await crud.get_quiz(db, quiz_id)
    if not quiz:
        raise NotFound("Quiz not found")

    now = now or datetime.utcnow()
    is_perfect = score == total_questions
    if nft_transaction_id:
        badge_status = "minted"
    elif is_perfect and wallet_address:
        badge_status = "pending"
    else:
        badge_status = "none"

    result = QuizResult(
        user_id=user.id,
        quiz_id=quiz.id,
        score=score,
        total_questions=total_questions,
        is_perfect_score=is_perfect,
        completed_at=now,
        time_spent=time_spent,
        wallet_address=wallet_address,
        nft_transaction_id=nft_transaction_id,
        badge_status=badge_status,
    )
    progress = await crud.get_progress_by_user(db, user.id)
    progress = update_progress(
        progress, user.id, quiz.level, is_perfect, bool(nft_transaction_id), now
    )
    db.add(result)
    db.add(progress)
    await db.commit()
    await db.refresh(result)
    logger.info(
        "User %s scored %d/%d on quiz %s", user.id, score, total_questions, quiz.id
    )
    return result


def badge_read(badge: NFTBadge, quiz: Quiz | None) -> BadgeRead:
    return BadgeRead(
        id=badge.id,
        quiz_id=badge.quiz_id,
        transaction_id=badge.transaction_id,
        policy_id=badge.policy_id,
        asset_name=badge.asset_name,
        wallet_address=badge.wallet_address,
        minted_at=badge.minted_at,
        metadata=badge.badge_metadata or {},
        quiz=BadgeQuizSummary(
            title=quiz.title,
            difficulty=quiz.difficulty,
            category=quiz.category,
            level=quiz.level,
        )
        if quiz
        else None,
    )


async def get_user_badges(db: AsyncSession, user: User | None) -> list[BadgeRead]:
    """Return the caller's badges, newest first, with quiz details."""

    if user is None:
        raise AuthenticationRequired()
    badges = await crud.get_badges_by_user(db, user.id)
    quizzes = await crud.get_quizzes_by_ids(db, {b.quiz_id for b in badges})
    return [badge_read(b, quizzes.get(b.quiz_id)) for b in badges]


def average_score(results: list[QuizResult]) -> float:
    """Mean fraction of questions answered correctly, 0 with no attempts."""
    if not results:
        return 0.0
    total = sum(
        r.score / r.total_questions if r.total_questions else 0.0 for r in results
    )
    return total / len(results)


async def get_user_progress(db: AsyncSession, user: User | None) -> UserProgressResponse:
    if user is None:
        raise AuthenticationRequired()
    progress = await crud.get_progress_by_user(db, user.id)
    results = await crud.get_results_by_user(db, user.id)
    recent = list(reversed(results[-RECENT_RESULTS:]))
    return UserProgressResponse(
        progress=ProgressRead.model_validate(progress) if progress else None,
        recent_results=[ResultRead.model_validate(r) for r in recent],
        nft_badges=await get_user_badges(db, user),
        total_quizzes_taken=len(results),
        average_score=average_score(results),
    )


async def get_pending_badge_results(
    db: AsyncSession, user: User | None
) -> list[QuizResult]:
    """Perfect attempts whose badge mint was started but never completed."""

    if user is None:
        raise AuthenticationRequired()
    results = await crud.get_results_by_user(db, user.id)
    return [r for r in results if r.badge_status == "pending"]

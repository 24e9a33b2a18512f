"""Quiz up/down votes.

Each learner holds at most one vote per quiz.  Voting again with the same
type removes the vote; voting with the other type flips it.  The quiz
keeps a denormalized tally (``upvotes``, ``downvotes``, ``vote_score``)
that is only ever written through :func:`set_tally`.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from learnflow import crud
from learnflow.errors import AuthenticationRequired, NotFound, ValidationFailed
from learnflow.models import VOTE_TYPES, Quiz, QuizVote, User
from learnflow.schemas import ReconcileReport, VoteTally

logger = logging.getLogger(__name__)


@dataclass
class VoteTransition:
    action: str  # "insert", "delete" or "flip"
    upvotes: int
    downvotes: int


def apply_vote(
    existing_type: str | None, requested_type: str, upvotes: int, downvotes: int
) -> VoteTransition:
    """Compute the vote row action and new tallies for one vote request."""
    if existing_type is None:
        if requested_type == "upvote":
            return VoteTransition("insert", upvotes + 1, downvotes)
        return VoteTransition("insert", upvotes, downvotes + 1)
    if existing_type == requested_type:
        if requested_type == "upvote":
            return VoteTransition("delete", max(0, upvotes - 1), downvotes)
        return VoteTransition("delete", upvotes, max(0, downvotes - 1))
    if requested_type == "upvote":
        return VoteTransition("flip", upvotes + 1, max(0, downvotes - 1))
    return VoteTransition("flip", max(0, upvotes - 1), downvotes + 1)


def tally_from(upvotes: int, downvotes: int) -> VoteTally:
    return VoteTally(
        upvotes=upvotes, downvotes=downvotes, vote_score=upvotes - downvotes
    )


def set_tally(quiz: Quiz, upvotes: int, downvotes: int) -> VoteTally:
    """Store tallies on ``quiz`` keeping ``vote_score == upvotes - downvotes``."""
    tally = tally_from(upvotes, downvotes)
    quiz.upvotes = tally.upvotes
    quiz.downvotes = tally.downvotes
    quiz.vote_score = tally.vote_score
    return tally


async def cast_vote(
    db: AsyncSession,
    user: User | None,
    quiz_id: int,
    vote_type: str,
    now: datetime | None = None,
) -> VoteTally:
    if user is None:
        raise AuthenticationRequired("User must be authenticated to vote")
    if vote_type not in VOTE_TYPES:
        raise ValidationFailed(f"Unknown vote type: {vote_type}")
    quiz = await crud.get_quiz(db, quiz_id)
    if not quiz:
        raise NotFound("Quiz not found")

    existing = await crud.get_vote(db, user.id, quiz_id)
    transition = apply_vote(
        existing.vote_type if existing else None,
        vote_type,
        quiz.upvotes or 0,
        quiz.downvotes or 0,
    )
    if transition.action == "insert":
        db.add(
            QuizVote(
                user_id=user.id,
                quiz_id=quiz_id,
                vote_type=vote_type,
                voted_at=now or datetime.utcnow(),
            )
        )
    elif transition.action == "delete":
        await db.delete(existing)
    else:
        existing.vote_type = vote_type
        existing.voted_at = now or datetime.utcnow()
        db.add(existing)

    tally = set_tally(quiz, transition.upvotes, transition.downvotes)
    db.add(quiz)
    await db.commit()
    logger.info(
        "User %s %s vote %s on quiz %s",
        user.id,
        transition.action,
        vote_type,
        quiz_id,
    )
    return tally


async def get_user_vote(db: AsyncSession, user: User | None, quiz_id: int) -> str | None:
    if user is None:
        raise AuthenticationRequired()
    vote = await crud.get_vote(db, user.id, quiz_id)
    return vote.vote_type if vote else None


async def get_vote_stats(db: AsyncSession, quiz_id: int) -> VoteTally:
    quiz = await crud.get_quiz(db, quiz_id)
    if not quiz:
        raise NotFound("Quiz not found")
    return VoteTally(
        upvotes=quiz.upvotes or 0,
        downvotes=quiz.downvotes or 0,
        vote_score=quiz.vote_score or 0,
    )


async def reconcile_vote_tallies(db: AsyncSession) -> ReconcileReport:
    """Rebuild every quiz tally from the stored vote rows."""

    counts = await crud.get_vote_counts(db)
    quizzes = await crud.get_all_quizzes(db)
    corrected = 0
    for quiz in quizzes:
        upvotes = counts.get((quiz.id, "upvote"), 0)
        downvotes = counts.get((quiz.id, "downvote"), 0)
        if (quiz.upvotes, quiz.downvotes, quiz.vote_score) != (
            upvotes,
            downvotes,
            upvotes - downvotes,
        ):
            set_tally(quiz, upvotes, downvotes)
            db.add(quiz)
            corrected += 1
    await db.commit()
    if corrected:
        logger.warning("Corrected vote tallies on %d quizzes", corrected)
    return ReconcileReport(quizzes_checked=len(quizzes), quizzes_corrected=corrected)

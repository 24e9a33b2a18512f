"""Routes for browsing, taking, voting on and generating quizzes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from learnflow.database import get_session
from learnflow.auth import get_current_user, get_optional_user
from learnflow.models import User
from learnflow.schemas import (
    QuizRead,
    QuizListing,
    ResultCreate,
    ResultRead,
    VoteRequest,
    VoteTally,
    UserVoteRead,
    AIQuizRequest,
    SortMode,
)
from learnflow.progression import list_quizzes, get_quiz_for_user, record_result
from learnflow.voting import cast_vote, get_user_vote, get_vote_stats
from learnflow.services.quiz_generator import QuizGenerator, generate_ai_quiz, get_quiz_generator

router = APIRouter(prefix="/quizzes", tags=["quizzes"])


@router.get("/", response_model=list[QuizListing])
async def browse_quizzes(
    sort_by: SortMode = Query("order"),
    search: str | None = Query(None, max_length=200),
    db: AsyncSession = Depends(get_session),
    user: User | None = Depends(get_optional_user),
):
    """List active quizzes; guests only see the first one unlocked."""
    return await list_quizzes(db, user, sort_by=sort_by, search=search)


@router.post("/generate", response_model=QuizRead, status_code=status.HTTP_201_CREATED)
async def generate_quiz(
    data: AIQuizRequest,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
    generator: QuizGenerator = Depends(get_quiz_generator),
):
    return await generate_ai_quiz(
        db,
        current_user,
        generator,
        topic=data.topic.strip(),
        difficulty=data.difficulty,
        num_questions=data.num_questions,
        category=data.category,
    )


@router.get("/{quiz_id}", response_model=QuizRead)
async def read_quiz(
    quiz_id: int,
    db: AsyncSession = Depends(get_session),
    user: User | None = Depends(get_optional_user),
):
    return await get_quiz_for_user(db, quiz_id, user)


@router.post(
    "/{quiz_id}/results",
    response_model=ResultRead,
    status_code=status.HTTP_201_CREATED,
)
async def submit_result(
    quiz_id: int,
    data: ResultCreate,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return await record_result(
        db,
        current_user,
        quiz_id,
        score=data.score,
        total_questions=data.total_questions,
        time_spent=data.time_spent,
        wallet_address=data.wallet_address,
        nft_transaction_id=data.nft_transaction_id,
    )


@router.post("/{quiz_id}/vote", response_model=VoteTally)
async def vote_on_quiz(
    quiz_id: int,
    data: VoteRequest,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """Cast, switch or withdraw (by repeating) a vote."""
    return await cast_vote(db, current_user, quiz_id, data.vote_type)


@router.get("/{quiz_id}/vote", response_model=UserVoteRead)
async def read_my_vote(
    quiz_id: int,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return UserVoteRead(vote_type=await get_user_vote(db, current_user, quiz_id))


@router.get("/{quiz_id}/votes", response_model=VoteTally)
async def read_vote_stats(quiz_id: int, db: AsyncSession = Depends(get_session)):
    return await get_vote_stats(db, quiz_id)

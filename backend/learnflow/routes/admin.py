from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from learnflow.database import get_session
from learnflow.auth import require_role
from learnflow.models import User
from learnflow.schemas import QuizRead, QuizActiveUpdate, ReconcileReport
from learnflow.crud import ensure_quiz_content, get_quiz, save_quiz
from learnflow.voting import reconcile_vote_tallies

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/quizzes/seed")
async def admin_seed_quizzes(
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_role("admin")),
):
    """Load the built-in catalogue into an empty quiz table."""
    created = await ensure_quiz_content(db)
    return {"created": created}


@router.post("/quizzes/reconcile-votes", response_model=ReconcileReport)
async def admin_reconcile_votes(
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_role("admin")),
):
    return await reconcile_vote_tallies(db)


@router.put("/quizzes/{quiz_id}", response_model=QuizRead)
async def admin_update_quiz(
    quiz_id: int,
    data: QuizActiveUpdate,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_role("admin")),
):
    quiz = await get_quiz(db, quiz_id)
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")
    quiz.is_active = data.is_active
    return await save_quiz(db, quiz)

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

Difficulty = Literal["Beginner", "Intermediate", "Advanced", "Expert"]
VoteType = Literal["upvote", "downvote"]
SortMode = Literal["order", "votes", "newest", "difficulty"]


class QuestionSchema(BaseModel):
    question: str = Field(min_length=1)
    options: List[str] = Field(min_length=4, max_length=4)
    correct_answer: int = Field(ge=0, le=3)
    explanation: str = ""


class QuizRead(BaseModel):
    id: int
    title: str
    description: str
    level: int
    difficulty: str
    category: str
    topic: Optional[str] = None
    order: int
    is_active: bool
    unlock_requirement: Optional[int] = None
    questions: List[QuestionSchema]
    upvotes: int
    downvotes: int
    vote_score: int
    is_ai_generated: bool = False
    created_by: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class QuizListing(QuizRead):
    """Quiz annotated with the caller's unlock, completion and vote state."""

    is_unlocked: bool
    is_completed: bool = False
    best_score: Optional[int] = None
    total_questions: int
    has_nft: bool = False
    user_vote: Optional[VoteType] = None


class ResultCreate(BaseModel):
    score: int = Field(ge=0)
    total_questions: int = Field(ge=1)
    time_spent: Optional[int] = Field(default=None, ge=0)
    wallet_address: Optional[str] = None
    nft_transaction_id: Optional[str] = None


class ResultRead(BaseModel):
    id: int
    quiz_id: int
    score: int
    total_questions: int
    is_perfect_score: bool
    completed_at: datetime
    time_spent: Optional[int] = None
    wallet_address: Optional[str] = None
    nft_transaction_id: Optional[str] = None
    badge_status: str

    class Config:
        from_attributes = True


class VoteRequest(BaseModel):
    vote_type: VoteType


class VoteTally(BaseModel):
    upvotes: int
    downvotes: int
    vote_score: int


class UserVoteRead(BaseModel):
    vote_type: Optional[VoteType] = None


class AIQuizRequest(BaseModel):
    topic: str = Field(min_length=1, max_length=200)
    difficulty: Difficulty = "Beginner"
    num_questions: int = Field(default=5, ge=1, le=20)
    category: Optional[str] = None


class QuizActiveUpdate(BaseModel):
    is_active: bool


class ReconcileReport(BaseModel):
    quizzes_checked: int
    quizzes_corrected: int

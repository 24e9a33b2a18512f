"""Database models used by LearnFlow.

The models are defined with SQLModel (built on SQLAlchemy and Pydantic)
and represent learners, quizzes, quiz attempts, per-learner progress,
quiz votes and minted achievement badges.  Comments are kept concise to
avoid distracting from the field definitions.
"""

from typing import Optional, List
from datetime import datetime
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON, UniqueConstraint

DIFFICULTY_LEVELS = ["Beginner", "Intermediate", "Advanced", "Expert"]
VOTE_TYPES = ["upvote", "downvote"]


class User(SQLModel, table=True):
    """Registered learner (or admin)."""
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(unique=True, index=True)
    password_hash: str
    role: str = "learner"  # 'learner' or 'admin'
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Quiz(SQLModel, table=True):
    """Multiple-choice quiz with embedded questions and a running vote tally."""

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: str = ""
    level: int = Field(default=1, index=True)
    difficulty: str = Field(default="Beginner", index=True)
    category: str = Field(default="General", index=True)
    topic: Optional[str] = None
    order: int = Field(default=0, index=True)
    is_active: bool = True
    # Previous quiz that must be passed with a perfect score first
    unlock_requirement: Optional[int] = Field(default=None, foreign_key="quiz.id")
    # Each entry: question, options (4), correct_answer (0-3), explanation
    questions: List[dict] = Field(sa_column=Column(JSON), default_factory=list)
    upvotes: int = 0
    downvotes: int = 0
    vote_score: int = Field(default=0, index=True)  # upvotes - downvotes
    is_ai_generated: bool = False
    generated_at: Optional[datetime] = None
    created_by: Optional[int] = Field(default=None, foreign_key="user.id")
    created_at: datetime = Field(default_factory=datetime.utcnow)


class QuizResult(SQLModel, table=True):
    """A single quiz attempt."""

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    quiz_id: int = Field(foreign_key="quiz.id", index=True)
    score: int
    total_questions: int
    is_perfect_score: bool = False
    completed_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    time_spent: Optional[int] = None  # seconds
    wallet_address: Optional[str] = None
    nft_transaction_id: Optional[str] = None
    badge_status: str = "none"  # none, pending, minted


class UserProgress(SQLModel, table=True):
    """Aggregate statistics for one learner, created on the first attempt."""

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", unique=True, index=True)
    current_level: int = 1
    total_quizzes_completed: int = 0
    total_perfect_scores: int = 0
    total_nfts_earned: int = 0
    streak_count: int = 0
    last_active_at: datetime = Field(default_factory=datetime.utcnow)
    last_streak_date: Optional[datetime] = None
    achievements: List[str] = Field(sa_column=Column(JSON), default_factory=list)


class QuizVote(SQLModel, table=True):
    """At most one up/down vote per learner and quiz."""

    __table_args__ = (UniqueConstraint("user_id", "quiz_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    quiz_id: int = Field(foreign_key="quiz.id", index=True)
    vote_type: str  # "upvote" or "downvote"
    voted_at: datetime = Field(default_factory=datetime.utcnow)


class NFTBadge(SQLModel, table=True):
    """Achievement badge recorded after a (simulated) mint transaction."""

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    quiz_id: int = Field(foreign_key="quiz.id", index=True)
    transaction_id: str = Field(index=True)
    policy_id: str
    asset_name: str
    wallet_address: str
    minted_at: datetime = Field(default_factory=datetime.utcnow)
    badge_metadata: dict = Field(
        sa_column=Column("metadata", JSON), default_factory=dict
    )

from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel

from .quiz import ResultRead


class ProgressRead(BaseModel):
    current_level: int
    total_quizzes_completed: int
    total_perfect_scores: int
    total_nfts_earned: int
    streak_count: int
    last_active_at: datetime
    last_streak_date: Optional[datetime] = None
    achievements: List[str] = []

    class Config:
        from_attributes = True


class BadgeQuizSummary(BaseModel):
    title: str
    difficulty: str
    category: str
    level: int


class BadgeRead(BaseModel):
    id: int
    quiz_id: int
    transaction_id: str
    policy_id: str
    asset_name: str
    wallet_address: str
    minted_at: datetime
    metadata: dict[str, Any]
    quiz: Optional[BadgeQuizSummary] = None


class UserProgressResponse(BaseModel):
    progress: Optional[ProgressRead] = None
    recent_results: List[ResultRead]
    nft_badges: List[BadgeRead]
    total_quizzes_taken: int
    average_score: float


class ProgressAnalytics(BaseModel):
    overall_assessment: str
    strengths: List[str]
    areas_for_improvement: List[str]
    recommendations: List[str]
    motivational_message: str
    next_steps: List[str]
    learning_style: str
    progress_rating: int
    strongest_categories: List[str] = []
    learning_trend: str = "Not enough data"
    is_fallback: bool = False
    generated_at: datetime

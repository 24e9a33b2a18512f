from datetime import datetime
from pydantic import BaseModel


class LeaderboardEntry(BaseModel):
    user_id: int
    name: str
    total_score: int
    current_level: int
    total_quizzes_completed: int
    total_perfect_scores: int
    total_nfts_earned: int
    streak_count: int
    last_active_at: datetime
    rank: int


class UserRankRead(LeaderboardEntry):
    total_users: int


class LeaderboardStats(BaseModel):
    total_users: int
    total_quizzes_completed: int
    total_perfect_scores: int
    total_nfts_earned: int

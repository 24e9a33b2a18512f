"""Convenience imports for all schema classes used by the API."""

from .user import UserCreate, UserResponse, UserLogin, NameUpdate
from .quiz import (
    Difficulty,
    VoteType,
    SortMode,
    QuestionSchema,
    QuizRead,
    QuizListing,
    ResultCreate,
    ResultRead,
    VoteRequest,
    VoteTally,
    UserVoteRead,
    AIQuizRequest,
    QuizActiveUpdate,
    ReconcileReport,
)
from .progress import (
    ProgressRead,
    BadgeQuizSummary,
    BadgeRead,
    UserProgressResponse,
    ProgressAnalytics,
)
from .leaderboard import LeaderboardEntry, UserRankRead, LeaderboardStats
from .badge import (
    BadgeMintRequest,
    BadgeMintResponse,
    NetworkStatus,
    ServiceWalletInfo,
)

__all__ = [
    "UserCreate",
    "UserResponse",
    "UserLogin",
    "NameUpdate",
    "Difficulty",
    "VoteType",
    "SortMode",
    "QuestionSchema",
    "QuizRead",
    "QuizListing",
    "ResultCreate",
    "ResultRead",
    "VoteRequest",
    "VoteTally",
    "UserVoteRead",
    "AIQuizRequest",
    "QuizActiveUpdate",
    "ReconcileReport",
    "ProgressRead",
    "BadgeQuizSummary",
    "BadgeRead",
    "UserProgressResponse",
    "ProgressAnalytics",
    "LeaderboardEntry",
    "UserRankRead",
    "LeaderboardStats",
    "BadgeMintRequest",
    "BadgeMintResponse",
    "NetworkStatus",
    "ServiceWalletInfo",
]

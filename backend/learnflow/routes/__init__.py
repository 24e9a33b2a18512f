"""Aggregate import for all API route modules."""

from . import (
    auth,
    users,
    quizzes,
    progress,
    leaderboard,
    badges,
    admin,
)

__all__ = [
    "auth",
    "users",
    "quizzes",
    "progress",
    "leaderboard",
    "badges",
    "admin",
]

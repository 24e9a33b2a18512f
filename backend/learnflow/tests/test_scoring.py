import asyncio
import pathlib
import sys
from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlmodel import SQLModel

sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

from learnflow.models import User, UserProgress
from learnflow.errors import AuthenticationRequired
from learnflow.scoring import (
    total_score,
    get_top_users,
    get_user_rank,
    get_leaderboard_stats,
)


def test_total_score_weights():
    progress = UserProgress(
        user_id=1,
        total_perfect_scores=2,
        total_quizzes_completed=5,
        total_nfts_earned=1,
        streak_count=3,
        current_level=2,
    )
    assert total_score(progress) == 365


async def _seed_progress(session, rows):
    users = []
    for i, (name, perfect, completed, streak) in enumerate(rows):
        user = User(name=name, email=f"user{i}@example.com", password_hash="x")
        session.add(user)
        await session.flush()
        session.add(
            UserProgress(
                user_id=user.id,
                total_perfect_scores=perfect,
                total_quizzes_completed=completed,
                streak_count=streak,
                current_level=1,
                last_active_at=datetime(2024, 1, 1),
            )
        )
        users.append(user)
    await session.commit()
    return users


def test_rank_agrees_with_leaderboard():
    async def run():
        engine = create_async_engine("sqlite+aiosqlite:///:memory:")
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        TestSession = async_sessionmaker(engine, expire_on_commit=False)
        async with TestSession() as session:
            users = await _seed_progress(
                session,
                [
                    ("Ada", 1, 3, 1),
                    ("Grace", 4, 6, 2),
                    ("Linus", 1, 3, 1),  # ties with Ada
                    ("Margaret", 0, 1, 1),
                ],
            )
            board = await get_top_users(session)
            assert [e.name for e in board] == ["Grace", "Ada", "Linus", "Margaret"]
            assert [e.rank for e in board] == [1, 2, 3, 4]
            for user in users:
                entry = await get_user_rank(session, user)
                position = [e.user_id for e in board].index(user.id) + 1
                assert entry.rank == position
                assert entry.total_users == 4

            top_two = await get_top_users(session, 2)
            assert [e.name for e in top_two] == ["Grace", "Ada"]

            stats = await get_leaderboard_stats(session)
            assert stats.total_users == 4
            assert stats.total_quizzes_completed == 13
            assert stats.total_perfect_scores == 6

    asyncio.run(run())


def test_progress_without_user_is_left_off_the_board():
    async def run():
        engine = create_async_engine("sqlite+aiosqlite:///:memory:")
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        TestSession = async_sessionmaker(engine, expire_on_commit=False)
        async with TestSession() as session:
            session.add(
                UserProgress(
                    user_id=4242,
                    total_quizzes_completed=100,
                    total_perfect_scores=50,
                    current_level=4,
                )
            )
            await session.commit()
            (user,) = await _seed_progress(session, [("Ada", 1, 1, 1)])

            board = await get_top_users(session)
            assert [(e.user_id, e.rank) for e in board] == [(user.id, 1)]

            entry = await get_user_rank(session, user)
            assert entry.rank == 1
            assert entry.total_users == 1

    asyncio.run(run())


def test_user_without_progress_has_no_rank():
    async def run():
        engine = create_async_engine("sqlite+aiosqlite:///:memory:")
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        TestSession = async_sessionmaker(engine, expire_on_commit=False)
        async with TestSession() as session:
            user = User(name="New", email="new@example.com", password_hash="x")
            session.add(user)
            await session.commit()
            assert await get_user_rank(session, user) is None
            with pytest.raises(AuthenticationRequired):
                await get_user_rank(session, None)

    asyncio.run(run())

"""End-to-end tests for the HTTP API using an in-memory database."""

import asyncio
import pathlib
import sys

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlmodel import SQLModel, select

# Allow importing the learnflow package
sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

from learnflow.main import app
from learnflow.database import get_session
from learnflow.models import Quiz
from learnflow.crud import ensure_quiz_content
from learnflow.services.quiz_generator import TemplateQuizGenerator, get_quiz_generator
from learnflow.services.badge_minter import SimulatedBadgeMinter, get_badge_minter
from learnflow.services.analytics import get_progress_advisor


class BrokenAdvisor:
    async def analyze(self, snapshot):
        raise RuntimeError("no model")


async def _setup_test_db(seed=True):
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    TestSession = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_session():
        async with TestSession() as session:
            yield session

    app.dependency_overrides.clear()
    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_quiz_generator] = TemplateQuizGenerator
    app.dependency_overrides[get_badge_minter] = SimulatedBadgeMinter
    app.dependency_overrides[get_progress_advisor] = BrokenAdvisor

    if seed:
        async with TestSession() as session:
            await ensure_quiz_content(session)
    return TestSession


async def _register_and_login(client, name, email, password="pass"):
    resp = await client.post(
        "/register", json={"name": name, "email": email, "password": password}
    )
    assert resp.status_code == 200
    resp = await client.post("/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


async def _quiz_ids(TestSession):
    async with TestSession() as session:
        result = await session.execute(select(Quiz).order_by(Quiz.order))
        return [q.id for q in result.scalars().all()]


def test_registration_and_login():
    async def run():
        await _setup_test_db(seed=False)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.post(
                "/register",
                json={"name": "Admin", "email": "admin@example.com", "password": "pw"},
            )
            assert resp.status_code == 200
            assert resp.json()["role"] == "admin"

            resp = await client.post(
                "/register",
                json={"name": "  Ada  ", "email": "ada@example.com", "password": "pw"},
            )
            assert resp.json()["role"] == "learner"
            assert resp.json()["name"] == "Ada"

            resp = await client.post(
                "/register",
                json={"name": "Dup", "email": "ada@example.com", "password": "pw"},
            )
            assert resp.status_code == 400
            assert resp.json()["detail"]["code"] == "auth_email_registered"

            resp = await client.post(
                "/login", json={"email": "ada@example.com", "password": "wrong"}
            )
            assert resp.status_code == 401

            resp = await client.post(
                "/token", data={"username": "ada@example.com", "password": "pw"}
            )
            assert resp.status_code == 200
            headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}
            resp = await client.get("/users/me", headers=headers)
            assert resp.json()["email"] == "ada@example.com"

    asyncio.run(run())


def test_update_name_validation():
    async def run():
        await _setup_test_db(seed=False)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            headers = await _register_and_login(client, "Ada", "ada@example.com")
            resp = await client.put(
                "/users/me/name", json={"name": "   "}, headers=headers
            )
            assert resp.status_code == 400
            assert resp.json() == {
                "code": "validation_failed",
                "message": "Name cannot be empty",
            }
            resp = await client.put(
                "/users/me/name", json={"name": "x" * 51}, headers=headers
            )
            assert resp.status_code == 400
            resp = await client.put(
                "/users/me/name", json={"name": " Ada Lovelace "}, headers=headers
            )
            assert resp.status_code == 200
            assert resp.json()["name"] == "Ada Lovelace"

    asyncio.run(run())


def test_anonymous_quiz_access():
    async def run():
        TestSession = await _setup_test_db()
        first, second = (await _quiz_ids(TestSession))[:2]
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get(f"/quizzes/{first}")
            assert resp.status_code == 200
            assert resp.json()["order"] == 1

            resp = await client.get(f"/quizzes/{second}")
            assert resp.status_code == 403
            assert resp.json()["code"] == "access_denied"

            resp = await client.get("/quizzes/", params={"sort_by": "votes"})
            assert resp.status_code == 200
            unlocked = [q["order"] for q in resp.json() if q["is_unlocked"]]
            assert unlocked == [1]

            resp = await client.get("/quizzes/", params={"sort_by": "sideways"})
            assert resp.status_code == 422

            resp = await client.get(
                "/quizzes/", headers={"Authorization": "Bearer not-a-token"}
            )
            assert resp.status_code == 401

            resp = await client.post(
                f"/quizzes/{first}/results", json={"score": 5, "total_questions": 5}
            )
            assert resp.status_code == 401

    asyncio.run(run())


def test_results_unlock_next_quiz_and_rank_user():
    async def run():
        TestSession = await _setup_test_db()
        first, second = (await _quiz_ids(TestSession))[:2]
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            headers = await _register_and_login(client, "Ada", "ada@example.com")

            resp = await client.get("/leaderboard/me", headers=headers)
            assert resp.status_code == 404

            resp = await client.get(f"/quizzes/{second}", headers=headers)
            assert resp.status_code == 403

            resp = await client.post(
                f"/quizzes/{first}/results",
                json={"score": 5, "total_questions": 5, "time_spent": 42},
                headers=headers,
            )
            assert resp.status_code == 201
            assert resp.json()["is_perfect_score"] is True

            resp = await client.get(f"/quizzes/{second}", headers=headers)
            assert resp.status_code == 200

            resp = await client.get("/progress/me", headers=headers)
            body = resp.json()
            assert body["progress"]["total_perfect_scores"] == 1
            assert body["progress"]["streak_count"] == 1
            assert body["average_score"] == 1.0

            resp = await client.get("/leaderboard/")
            entries = resp.json()
            assert len(entries) == 1
            # 100 + 10 + 5 + 25
            assert entries[0]["total_score"] == 140
            assert "email" not in entries[0]

            resp = await client.get("/leaderboard/me", headers=headers)
            assert resp.json()["rank"] == 1
            assert resp.json()["total_users"] == 1

            resp = await client.get("/leaderboard/stats")
            assert resp.json()["total_quizzes_completed"] == 1

            resp = await client.get("/progress/me/analytics", headers=headers)
            assert resp.status_code == 200
            assert resp.json()["is_fallback"] is True

    asyncio.run(run())


def test_vote_endpoints():
    async def run():
        TestSession = await _setup_test_db()
        first = (await _quiz_ids(TestSession))[0]
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            headers = await _register_and_login(client, "Ada", "ada@example.com")

            resp = await client.post(
                f"/quizzes/{first}/vote", json={"vote_type": "upvote"}, headers=headers
            )
            assert resp.json() == {"upvotes": 1, "downvotes": 0, "vote_score": 1}
            resp = await client.get(f"/quizzes/{first}/vote", headers=headers)
            assert resp.json()["vote_type"] == "upvote"

            resp = await client.post(
                f"/quizzes/{first}/vote", json={"vote_type": "downvote"}, headers=headers
            )
            assert resp.json() == {"upvotes": 0, "downvotes": 1, "vote_score": -1}

            resp = await client.post(
                f"/quizzes/{first}/vote", json={"vote_type": "downvote"}, headers=headers
            )
            assert resp.json()["vote_score"] == 0
            resp = await client.get(f"/quizzes/{first}/vote", headers=headers)
            assert resp.json()["vote_type"] is None

            resp = await client.get(f"/quizzes/{first}/votes")
            assert resp.json() == {"upvotes": 0, "downvotes": 0, "vote_score": 0}

            resp = await client.post(
                f"/quizzes/{first}/vote", json={"vote_type": "upvote"}
            )
            assert resp.status_code == 401

            resp = await client.get("/quizzes/9999/votes")
            assert resp.status_code == 404

    asyncio.run(run())


def test_generate_quiz_endpoint():
    async def run():
        await _setup_test_db()
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            headers = await _register_and_login(client, "Ada", "ada@example.com")
            resp = await client.post(
                "/quizzes/generate",
                json={"topic": "Smart Contracts", "difficulty": "Advanced", "num_questions": 4},
                headers=headers,
            )
            assert resp.status_code == 201
            quiz = resp.json()
            assert quiz["title"] == "AI Quiz: Smart Contracts"
            assert quiz["level"] == 3
            assert len(quiz["questions"]) == 4
            assert quiz["is_ai_generated"] is True

            # generated quizzes have no prerequisite
            resp = await client.get(f"/quizzes/{quiz['id']}", headers=headers)
            assert resp.status_code == 200

            resp = await client.post(
                "/quizzes/generate",
                json={"topic": "Smart Contracts", "num_questions": 50},
                headers=headers,
            )
            assert resp.status_code == 422

    asyncio.run(run())


def test_mint_badge_endpoint():
    async def run():
        TestSession = await _setup_test_db()
        first = (await _quiz_ids(TestSession))[0]
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            headers = await _register_and_login(client, "Ada", "ada@example.com")
            resp = await client.post(
                f"/quizzes/{first}/results",
                json={"score": 5, "total_questions": 5, "wallet_address": "addr_test1abc"},
                headers=headers,
            )
            result_id = resp.json()["id"]
            assert resp.json()["badge_status"] == "pending"

            resp = await client.get("/progress/me/pending-badges", headers=headers)
            assert [r["id"] for r in resp.json()] == [result_id]

            resp = await client.post(
                "/badges/mint",
                json={
                    "quiz_id": first,
                    "wallet_address": "addr_test1abc",
                    "student_name": "Ada",
                    "score": 4,
                    "total_questions": 5,
                },
                headers=headers,
            )
            assert resp.status_code == 400

            resp = await client.post(
                "/badges/mint",
                json={
                    "quiz_id": first,
                    "wallet_address": "addr_test1abc",
                    "student_name": "Ada",
                    "score": 5,
                    "total_questions": 5,
                    "result_id": result_id,
                },
                headers=headers,
            )
            assert resp.status_code == 200
            tx = resp.json()["transaction_id"]

            resp = await client.get("/badges/me", headers=headers)
            badges = resp.json()
            assert badges[0]["transaction_id"] == tx
            assert badges[0]["quiz"]["level"] == 1
            assert badges[0]["metadata"]["attributes"]["Student Name"] == "Ada"

            resp = await client.get("/progress/me/pending-badges", headers=headers)
            assert resp.json() == []

            resp = await client.get("/quizzes/", headers=headers)
            listing = {q["id"]: q for q in resp.json()}
            assert listing[first]["has_nft"] is True

            resp = await client.get("/badges/network", headers=headers)
            assert resp.json()["connected"] is True
            resp = await client.get("/badges/service-wallet", headers=headers)
            assert resp.json()["service_address"].startswith("addr_test1")

    asyncio.run(run())


def test_admin_quiz_management():
    async def run():
        TestSession = await _setup_test_db(seed=False)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            admin_headers = await _register_and_login(client, "Admin", "admin@example.com")
            user_headers = await _register_and_login(client, "Ada", "ada@example.com")

            resp = await client.post("/admin/quizzes/seed", headers=user_headers)
            assert resp.status_code == 403
            assert resp.json()["detail"]["code"] == "insufficient_role"

            resp = await client.post("/admin/quizzes/seed", headers=admin_headers)
            assert resp.json() == {"created": 6}
            resp = await client.post("/admin/quizzes/seed", headers=admin_headers)
            assert resp.json() == {"created": 0}

            first, second = (await _quiz_ids(TestSession))[:2]
            resp = await client.put(
                f"/admin/quizzes/{second}", json={"is_active": False}, headers=admin_headers
            )
            assert resp.json()["is_active"] is False
            resp = await client.get("/quizzes/")
            assert second not in [q["id"] for q in resp.json()]
            resp = await client.get(f"/quizzes/{second}", headers=admin_headers)
            assert resp.status_code == 404

            resp = await client.post(
                "/admin/quizzes/reconcile-votes", headers=admin_headers
            )
            assert resp.json() == {"quizzes_checked": 6, "quizzes_corrected": 0}

    asyncio.run(run())

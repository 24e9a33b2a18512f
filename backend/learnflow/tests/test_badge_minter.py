"""Tests for badge minting against a mocked Blockfrost API."""

import asyncio
import pathlib
import sys

import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlmodel import SQLModel, select

sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

from learnflow.models import NFTBadge, Quiz, User
from learnflow.crud import get_progress_by_user, get_result
from learnflow.errors import ExternalServiceError, ValidationFailed, NotFound
from learnflow.progression import record_result, get_pending_badge_results
from learnflow.services.badge_minter import (
    POLICY_ID,
    BlockfrostBadgeMinter,
    MintRequest,
    SimulatedBadgeMinter,
    get_badge_minter,
    mint_badge,
)

WALLET = "addr_test1qpz0example"


def _minter(status_code, calls=None):
    def handler(request):
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, json={"supply": {"max": "45000000000000000"}})

    return BlockfrostBadgeMinter(
        api_key="preprodKey",
        base_url="https://blockfrost.test/api/v0",
        transport=httpx.MockTransport(handler),
    )


def _request():
    return MintRequest(
        wallet_address=WALLET,
        student_name="Ada",
        quiz_title="Blockchain Basics",
        score=5,
        total_questions=5,
    )


async def _setup():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    TestSession = async_sessionmaker(engine, expire_on_commit=False)
    session = TestSession()
    session.add(Quiz(title="Blockchain Basics", order=1))
    user = User(name="Ada", email="ada@example.com", password_hash="x")
    session.add(user)
    await session.commit()
    return session, user


def test_blockfrost_minter_success():
    async def run():
        calls = []
        minted = await _minter(200, calls).mint(_request())
        assert calls[0].url.path == "/api/v0/network"
        assert calls[0].headers["project_id"] == "preprodKey"
        assert len(minted.transaction_id) == 64
        assert minted.asset_name.startswith("LearnFlowBadge")
        assert minted.policy_id == POLICY_ID
        assert minted.unit == POLICY_ID + minted.asset_name.encode().hex()
        assert minted.explorer_url.endswith(minted.transaction_id)
        attributes = minted.metadata["attributes"]
        assert attributes["Student Name"] == "Ada"
        assert attributes["Score"] == "5/5"

    asyncio.run(run())


def test_blockfrost_minter_reports_bad_key(monkeypatch):
    monkeypatch.delenv("BLOCKFROST_API_KEY", raising=False)

    async def run():
        with pytest.raises(ExternalServiceError) as exc:
            await _minter(403).mint(_request())
        assert "Invalid Blockfrost API key" in exc.value.message

        with pytest.raises(ExternalServiceError) as exc:
            await _minter(500).mint(_request())
        assert exc.value.message == "Blockfrost API error: 500"

        with pytest.raises(ExternalServiceError):
            await BlockfrostBadgeMinter(api_key="").mint(_request())

    asyncio.run(run())


def test_connection_check_without_key_reports_failure(monkeypatch):
    async def run():
        monkeypatch.delenv("BLOCKFROST_API_KEY", raising=False)
        status = await BlockfrostBadgeMinter().check_connection()
        assert not status.connected
        assert "not configured" in status.error

        status = await _minter(200).check_connection()
        assert status.connected

    asyncio.run(run())


def test_simulated_minter_is_deterministic():
    async def run():
        minter = SimulatedBadgeMinter()
        first = await minter.mint(_request())
        second = await minter.mint(_request())
        assert first.transaction_id == second.transaction_id

    asyncio.run(run())


def test_mint_requires_perfect_score():
    async def run():
        session, user = await _setup()
        with pytest.raises(ValidationFailed):
            await mint_badge(session, user, SimulatedBadgeMinter(), 1, WALLET, "Ada", 4, 5)
        await session.close()

    asyncio.run(run())


def test_mint_failure_is_wrapped_and_nothing_stored():
    async def run():
        session, user = await _setup()
        with pytest.raises(ExternalServiceError) as exc:
            await mint_badge(session, user, _minter(403), 1, WALLET, "Ada", 5, 5)
        assert exc.value.message.startswith("Failed to prepare NFT transaction: ")
        assert exc.value.status_code == 502
        badges = (await session.execute(select(NFTBadge))).scalars().all()
        assert badges == []
        await session.close()

    asyncio.run(run())


def test_mint_completes_pending_result():
    async def run():
        session, user = await _setup()
        result = await record_result(session, user, 1, 5, 5, wallet_address=WALLET)
        assert [r.id for r in await get_pending_badge_results(session, user)] == [result.id]

        response = await mint_badge(
            session, user, SimulatedBadgeMinter(), 1, WALLET, "Ada", 5, 5, result_id=result.id
        )
        assert response.success
        assert response.network == "preprod"

        stored = await get_result(session, result.id)
        assert stored.badge_status == "minted"
        assert stored.nft_transaction_id == response.transaction_id
        progress = await get_progress_by_user(session, user.id)
        assert progress.total_nfts_earned == 1
        assert await get_pending_badge_results(session, user) == []

        with pytest.raises(ValidationFailed):
            await mint_badge(
                session, user, SimulatedBadgeMinter(), 1, WALLET, "Ada", 5, 5, result_id=result.id
            )
        with pytest.raises(NotFound):
            await mint_badge(
                session, user, SimulatedBadgeMinter(), 1, WALLET, "Ada", 5, 5, result_id=999
            )
        await session.close()

    asyncio.run(run())


def test_mint_rejects_imperfect_result_despite_claimed_score():
    async def run():
        session, user = await _setup()
        result = await record_result(session, user, 1, 2, 5, wallet_address=WALLET)

        with pytest.raises(ValidationFailed):
            await mint_badge(
                session, user, SimulatedBadgeMinter(), 1, WALLET, "Ada", 5, 5, result_id=result.id
            )

        stored = await get_result(session, result.id)
        assert stored.badge_status == "none"
        assert stored.nft_transaction_id is None
        progress = await get_progress_by_user(session, user.id)
        assert progress.total_nfts_earned == 0
        badges = (await session.execute(select(NFTBadge))).scalars().all()
        assert badges == []
        await session.close()

    asyncio.run(run())


def test_mint_uses_stored_result_score():
    async def run():
        session, user = await _setup()
        result = await record_result(session, user, 1, 3, 3, wallet_address=WALLET)
        response = await mint_badge(
            session, user, SimulatedBadgeMinter(), 1, WALLET, "Ada", 9, 9, result_id=result.id
        )
        assert response.metadata["attributes"]["Score"] == "3/3"
        await session.close()

    asyncio.run(run())


def test_minter_selected_from_env(monkeypatch):
    monkeypatch.setenv("BADGE_MINTER", "simulated")
    assert isinstance(get_badge_minter(), SimulatedBadgeMinter)
    monkeypatch.setenv("BADGE_MINTER", "blockfrost")
    assert isinstance(get_badge_minter(), BlockfrostBadgeMinter)

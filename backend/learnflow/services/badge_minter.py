"""Achievement badge minting on the Cardano preprod network.

Minting is simulated: the Blockfrost minter only verifies that the
explorer API is reachable with the configured project key, then prepares
CIP-25 style metadata and a transaction id.  Failures are not replaced
by a fallback; they surface to the caller as ``ExternalServiceError``.
"""

import hashlib
import logging
import os
import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from learnflow import crud
from learnflow.errors import (
    AuthenticationRequired,
    ExternalServiceError,
    LearnFlowError,
    NotFound,
    ValidationFailed,
)
from learnflow.models import NFTBadge, User
from learnflow.schemas import BadgeMintResponse, NetworkStatus, ServiceWalletInfo

logger = logging.getLogger(__name__)

DEFAULT_BLOCKFROST_URL = "https://cardano-preprod.blockfrost.io/api/v0"
NETWORK = "preprod"
POLICY_ID = "a1b2c3d4e5f6789012345678901234567890123456789012345678"
EXPLORER_TX_URL = "https://preprod.cardanoscan.io/transaction/{}"
SERVICE_WALLET_ADDRESS = (
    "addr_test1qz2fxv2umyhttkxyxp8x0dlpdt3k6cwng5pxj3jhsydzer3jcu5d8ps7zex2k2xt3uqxgjqnnj0vs2qd4a"
)
FAUCET_URL = "https://docs.cardano.org/cardano-testnet/tools/faucet/"
BADGE_IMAGE = "ipfs://QmYourImageHashHere"
ISSUER = "LearnFlow Platform"


@dataclass
class MintRequest:
    wallet_address: str
    student_name: str
    quiz_title: str
    score: int
    total_questions: int


@dataclass
class MintedBadge:
    transaction_id: str
    policy_id: str
    asset_name: str
    metadata: dict = field(default_factory=dict)
    network: str = NETWORK
    note: str = ""

    @property
    def unit(self) -> str:
        return self.policy_id + self.asset_name.encode().hex()

    @property
    def explorer_url(self) -> str:
        return EXPLORER_TX_URL.format(self.transaction_id)


def build_badge_metadata(request: MintRequest, earned_on: str) -> dict:
    return {
        "name": f"LearnFlow Badge - {request.quiz_title}",
        "description": f"Achievement badge for completing {request.quiz_title} with a perfect score",
        "image": BADGE_IMAGE,
        "media_type": "image/png",
        "attributes": {
            "Student Name": request.student_name,
            "Quiz Title": request.quiz_title,
            "Score": f"{request.score}/{request.total_questions}",
            "Date Earned": earned_on,
            "Achievement Type": "Perfect Score",
            "Network": "Cardano Preprod",
            "Issuer": ISSUER,
        },
    }


class BadgeMinter(Protocol):
    async def mint(self, request: MintRequest) -> MintedBadge:
        ...

    async def check_connection(self) -> NetworkStatus:
        ...


class BlockfrostBadgeMinter:

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key or os.getenv("BLOCKFROST_API_KEY", "")
        self.base_url = base_url or os.getenv("BLOCKFROST_URL", DEFAULT_BLOCKFROST_URL)
        self.timeout = timeout or float(os.getenv("BLOCKFROST_TIMEOUT", "10"))
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        if not self.api_key:
            raise ExternalServiceError("Blockfrost API key not configured")
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"project_id": self.api_key},
            timeout=self.timeout,
            transport=self._transport,
        )

    async def mint(self, request: MintRequest) -> MintedBadge:
        async with self._client() as client:
            response = await client.get("/network")
        if response.status_code == 403:
            raise ExternalServiceError(
                "Invalid Blockfrost API key - please check your configuration"
            )
        if response.is_error:
            raise ExternalServiceError(f"Blockfrost API error: {response.status_code}")
        logger.info("Connected to Cardano %s network: %s", NETWORK, response.json())

        # Placeholder for a real signed mint transaction hash
        transaction_id = secrets.token_hex(32)
        asset_name = f"LearnFlowBadge{int(time.time() * 1000)}"
        metadata = build_badge_metadata(
            request, datetime.utcnow().date().isoformat()
        )
        return MintedBadge(
            transaction_id=transaction_id,
            policy_id=POLICY_ID,
            asset_name=asset_name,
            metadata=metadata,
            note="NFT transaction prepared - real minting implementation in progress",
        )

    async def check_connection(self) -> NetworkStatus:
        try:
            async with self._client() as client:
                network = await client.get("/network")
                health = await client.get("/health")
            if network.is_error or health.is_error:
                raise ExternalServiceError(
                    f"API connection failed: {network.status_code}"
                )
            return NetworkStatus(
                connected=True,
                network=network.json(),
                health=health.json(),
                service_wallet="Ready for minting",
                message=f"Successfully connected to Cardano {NETWORK} network via Blockfrost API",
            )
        except (httpx.HTTPError, ExternalServiceError) as exc:
            logger.warning("Blockfrost connection error: %s", exc)
            return NetworkStatus(
                connected=False,
                error=str(exc) or "Unknown error",
                message="Failed to connect to Cardano network",
            )


class SimulatedBadgeMinter:
    """Offline minter producing a transaction id derived from the request."""

    async def mint(self, request: MintRequest) -> MintedBadge:
        digest = hashlib.sha256(
            "|".join(
                [
                    request.wallet_address,
                    request.student_name,
                    request.quiz_title,
                    f"{request.score}/{request.total_questions}",
                ]
            ).encode()
        ).hexdigest()
        return MintedBadge(
            transaction_id=digest,
            policy_id=POLICY_ID,
            asset_name=f"LearnFlowBadge{digest[:12]}",
            metadata=build_badge_metadata(
                request, datetime.utcnow().date().isoformat()
            ),
            note="Simulated badge mint",
        )

    async def check_connection(self) -> NetworkStatus:
        return NetworkStatus(
            connected=True,
            service_wallet="Simulated",
            message="Using simulated badge minting",
        )


def get_badge_minter() -> BadgeMinter:
    """FastAPI dependency selecting the minter from ``BADGE_MINTER``."""
    if os.getenv("BADGE_MINTER", "blockfrost").lower() == "simulated":
        return SimulatedBadgeMinter()
    return BlockfrostBadgeMinter()


def service_wallet_info() -> ServiceWalletInfo:
    return ServiceWalletInfo(
        service_address=SERVICE_WALLET_ADDRESS,
        faucet_url=FAUCET_URL,
        instructions=[
            "1. Copy the service wallet address above",
            "2. Go to the Cardano testnet faucet",
            "3. Request preprod ADA for the service wallet",
            "4. Wait for the transaction to confirm",
            "5. Test the connection again",
        ],
    )


async def mint_badge(
    db: AsyncSession,
    user: User | None,
    minter: BadgeMinter,
    quiz_id: int,
    wallet_address: str,
    student_name: str,
    score: int,
    total_questions: int,
    result_id: int | None = None,
) -> BadgeMintResponse:
    """Mint a badge for a perfect attempt and record it.

    When ``result_id`` names one of the caller's perfect attempts on the
    quiz, that attempt is marked as minted and counted towards
    ``total_nfts_earned`` in the same commit as the badge, using the
    stored score.  Without ``result_id`` only the badge is stored; the
    count follows when the attempt is recorded with the transaction id.
    """
    if user is None:
        raise AuthenticationRequired()
    quiz = await crud.get_quiz(db, quiz_id)
    if not quiz:
        raise NotFound("Quiz not found")

    result = None
    if result_id is not None:
        result = await crud.get_result(db, result_id)
        if not result or result.user_id != user.id or result.quiz_id != quiz.id:
            raise NotFound("Quiz result not found")
        if result.badge_status == "minted":
            raise ValidationFailed("A badge was already minted for this result")
        if not result.is_perfect_score:
            raise ValidationFailed("Badges can only be minted for a perfect score")
        score, total_questions = result.score, result.total_questions
    if score != total_questions:
        raise ValidationFailed("Badges can only be minted for a perfect score")

    request = MintRequest(
        wallet_address=wallet_address,
        student_name=student_name,
        quiz_title=quiz.title,
        score=score,
        total_questions=total_questions,
    )
    try:
        minted = await minter.mint(request)
    except Exception as exc:
        reason = exc.message if isinstance(exc, LearnFlowError) else str(exc)
        logger.error("Error with NFT transaction for user %s: %s", user.id, reason)
        raise ExternalServiceError(
            f"Failed to prepare NFT transaction: {reason or 'Unknown error'}"
        ) from exc

    badge = NFTBadge(
        user_id=user.id,
        quiz_id=quiz.id,
        transaction_id=minted.transaction_id,
        policy_id=minted.policy_id,
        asset_name=minted.asset_name,
        wallet_address=wallet_address,
        badge_metadata=minted.metadata,
    )
    db.add(badge)
    if result is not None:
        result.badge_status = "minted"
        result.nft_transaction_id = minted.transaction_id
        result.wallet_address = wallet_address
        db.add(result)
        progress = await crud.get_progress_by_user(db, user.id)
        if progress is not None:
            progress.total_nfts_earned += 1
            db.add(progress)
    await db.commit()
    await db.refresh(badge)
    logger.info(
        "Minted badge %s for user %s on quiz %s", minted.transaction_id, user.id, quiz.id
    )
    return BadgeMintResponse(
        badge_id=badge.id,
        transaction_id=minted.transaction_id,
        policy_id=minted.policy_id,
        asset_name=minted.asset_name,
        unit=minted.unit,
        metadata=minted.metadata,
        explorer_url=minted.explorer_url,
        network=minted.network,
        recipient_address=wallet_address,
        note=minted.note,
    )

from typing import Any, List, Optional
from pydantic import BaseModel, Field


class BadgeMintRequest(BaseModel):
    quiz_id: int
    wallet_address: str = Field(min_length=1)
    student_name: str = Field(min_length=1)
    score: int = Field(ge=0)
    total_questions: int = Field(ge=1)
    # Pending quiz result this mint completes, if any
    result_id: Optional[int] = None


class BadgeMintResponse(BaseModel):
    success: bool = True
    badge_id: int
    transaction_id: str
    policy_id: str
    asset_name: str
    unit: str
    metadata: dict[str, Any]
    explorer_url: str
    network: str
    recipient_address: str
    note: str


class NetworkStatus(BaseModel):
    connected: bool
    network: Optional[dict[str, Any]] = None
    health: Optional[dict[str, Any]] = None
    service_wallet: Optional[str] = None
    error: Optional[str] = None
    message: str


class ServiceWalletInfo(BaseModel):
    service_address: str
    faucet_url: str
    instructions: List[str]

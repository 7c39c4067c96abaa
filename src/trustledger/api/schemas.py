"""Pydantic request/response schemas for the TrustLedger API.

These are separate from Protean commands (anti-corruption pattern).
The API layer is the external contract; commands are internal domain concepts.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class InitializeAccessRequest(BaseModel):
    admin: str


class RoleRequest(BaseModel):
    caller: str
    role: str  # "Admin", "ProductManager" or "Broadcaster"
    account: str


class CallerRequest(BaseModel):
    caller: str


class AddProductRequest(BaseModel):
    caller: str
    product_id: str | None = None  # zero or missing ids are reported as InvalidInput
    vendor: str | None = None


class SetProductActiveRequest(BaseModel):
    caller: str
    is_active: bool


class PostReviewRequest(BaseModel):
    reviewer: str
    transaction_id: str | None = None
    rating: int  # range checked by the domain, which reports OutOfRange


class BatchTrustScoreRequest(BaseModel):
    product_ids: list[str] = Field(default_factory=list)


class BroadcastRequest(BaseModel):
    caller: str
    destination_domain: int
    destination_address: str
    gas_budget: int = 0
    fee_token: str | None = None
    fee_amount: int = 0


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool
    failure_reason: str = "Insufficient fee"


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    product_id: str
    vendor: str
    is_active: bool
    total_reviews: int
    sum_of_ratings: int
    created_at: datetime | None = None


class ExistsResponse(BaseModel):
    product_id: str
    exists: bool


class ReviewIdResponse(BaseModel):
    review_id: int


class ReviewResponse(BaseModel):
    review_id: int
    product_id: str
    reviewer: str
    transaction_id: str
    rating: int
    posted_at: datetime


class ReviewListResponse(BaseModel):
    product_id: str
    reviews: list[ReviewResponse]


class ReviewCountResponse(BaseModel):
    count: int


class TransactionUsageResponse(BaseModel):
    transaction_id: str
    spent: bool
    review_id: int | None = None


class TrustScoreResponse(BaseModel):
    product_id: str
    total_reviews: int
    average_rating: int
    last_updated: datetime | None = None


class TrustScoreListResponse(BaseModel):
    scores: list[TrustScoreResponse]


class TrustScoreHistoryEntry(BaseModel):
    total_reviews: int
    sum_of_ratings: int
    average_rating: int
    updated_at: datetime


class TrustScoreHistoryResponse(BaseModel):
    product_id: str
    entries: list[TrustScoreHistoryEntry]


class MessageIdResponse(BaseModel):
    message_id: str


class BroadcastResponse(BaseModel):
    message_id: str
    product_id: str
    average_rating: int
    total_reviews: int
    destination_domain: int
    destination_address: str
    gas_budget: int
    fee_token: str | None = None
    fee_amount: int
    payload: str
    snapshot: TrustScoreResponse  # payload decoded
    sent_by: str
    sent_at: datetime


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str

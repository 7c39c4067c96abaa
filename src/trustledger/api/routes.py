"""FastAPI routes for the TrustLedger bounded context.

Each mutating route translates a Pydantic schema into a Protean command and
submits it through ``dispatch``. Read routes go straight to the component
readers.
"""

import os

from fastapi import APIRouter, HTTPException

from trustledger.access.management import (
    GrantRole,
    InitializeAccess,
    PauseLedger,
    RevokeRole,
    UnpauseLedger,
)
from trustledger.api.schemas import (
    AddProductRequest,
    BatchTrustScoreRequest,
    BroadcastRequest,
    BroadcastResponse,
    CallerRequest,
    ConfigureGatewayRequest,
    ExistsResponse,
    GatewayConfigResponse,
    InitializeAccessRequest,
    MessageIdResponse,
    PostReviewRequest,
    ProductIdResponse,
    ProductResponse,
    ReviewCountResponse,
    ReviewIdResponse,
    ReviewListResponse,
    ReviewResponse,
    RoleRequest,
    SetProductActiveRequest,
    StatusResponse,
    TransactionUsageResponse,
    TrustScoreHistoryEntry,
    TrustScoreHistoryResponse,
    TrustScoreListResponse,
    TrustScoreResponse,
)
from trustledger.broadcast.sending import BroadcastTrustScore, get_broadcast
from trustledger.broadcast.snapshot import decode_snapshot
from trustledger.dispatch import dispatch
from trustledger.gateway import get_gateway
from trustledger.gateway.fake_adapter import FakeGateway
from trustledger.product.activation import SetProductActive
from trustledger.product.registration import AddProduct
from trustledger.product.registry import get_product, product_exists
from trustledger.projections.score_history import score_history
from trustledger.review.ledger import get_review, review_count, reviews_for_product
from trustledger.review.posting import PostReview
from trustledger.trust.aggregator import get_trust_score, get_trust_scores
from trustledger.usage.usage import lookup

access_router = APIRouter(prefix="/access", tags=["access"])
product_router = APIRouter(prefix="/products", tags=["products"])
review_router = APIRouter(tags=["reviews"])
trust_router = APIRouter(tags=["trust-scores"])
broadcast_router = APIRouter(prefix="/broadcasts", tags=["broadcasts"])


def _review_response(review) -> ReviewResponse:
    return ReviewResponse(
        review_id=review.review_id,
        product_id=review.product_id,
        reviewer=str(review.reviewer),
        transaction_id=review.transaction_id,
        rating=review.rating,
        posted_at=review.posted_at,
    )


def _score_response(snapshot) -> TrustScoreResponse:
    return TrustScoreResponse(
        product_id=snapshot.product_id,
        total_reviews=snapshot.total_reviews,
        average_rating=snapshot.average_rating,
        last_updated=snapshot.last_updated,
    )


# ---------------------------------------------------------------------------
# Access
# ---------------------------------------------------------------------------
@access_router.post("/initialize", status_code=201, response_model=StatusResponse)
async def initialize_access(body: InitializeAccessRequest) -> StatusResponse:
    """Install the first administrator."""
    dispatch(InitializeAccess(admin=body.admin))
    return StatusResponse(status="initialized")


@access_router.post("/roles", status_code=201, response_model=StatusResponse)
async def grant_role(body: RoleRequest) -> StatusResponse:
    dispatch(GrantRole(caller=body.caller, role=body.role, account=body.account))
    return StatusResponse()


@access_router.put("/roles/revoke", response_model=StatusResponse)
async def revoke_role(body: RoleRequest) -> StatusResponse:
    dispatch(RevokeRole(caller=body.caller, role=body.role, account=body.account))
    return StatusResponse()


@access_router.put("/pause", response_model=StatusResponse)
async def pause_ledger(body: CallerRequest) -> StatusResponse:
    dispatch(PauseLedger(caller=body.caller))
    return StatusResponse(status="paused")


@access_router.put("/unpause", response_model=StatusResponse)
async def unpause_ledger(body: CallerRequest) -> StatusResponse:
    dispatch(UnpauseLedger(caller=body.caller))
    return StatusResponse(status="unpaused")


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def add_product(body: AddProductRequest) -> ProductIdResponse:
    """Register a product and seed its trust score."""
    product_id = dispatch(AddProduct(caller=body.caller, product_id=body.product_id, vendor=body.vendor))
    return ProductIdResponse(product_id=product_id)


@product_router.get("/{product_id}", response_model=ProductResponse)
async def read_product(product_id: str) -> ProductResponse:
    product = get_product(product_id)
    return ProductResponse(
        product_id=product.product_id,
        vendor=str(product.vendor),
        is_active=product.is_active,
        total_reviews=product.total_reviews,
        sum_of_ratings=product.sum_of_ratings,
        created_at=product.created_at,
    )


@product_router.get("/{product_id}/exists", response_model=ExistsResponse)
async def check_product_exists(product_id: str) -> ExistsResponse:
    return ExistsResponse(product_id=product_id, exists=product_exists(product_id))


@product_router.put("/{product_id}/active", response_model=StatusResponse)
async def set_product_active(product_id: str, body: SetProductActiveRequest) -> StatusResponse:
    dispatch(SetProductActive(caller=body.caller, product_id=product_id, is_active=body.is_active))
    return StatusResponse()


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
@product_router.post("/{product_id}/reviews", status_code=201, response_model=ReviewIdResponse)
async def post_review(product_id: str, body: PostReviewRequest) -> ReviewIdResponse:
    """Post a purchase-backed review."""
    review_id = dispatch(
        PostReview(
            reviewer=body.reviewer,
            product_id=product_id,
            transaction_id=body.transaction_id,
            rating=body.rating,
        )
    )
    return ReviewIdResponse(review_id=review_id)


@product_router.get("/{product_id}/reviews", response_model=ReviewListResponse)
async def list_product_reviews(product_id: str, offset: int = 0, limit: int = 50) -> ReviewListResponse:
    get_product(product_id)
    reviews = reviews_for_product(product_id, offset=offset, limit=limit)
    return ReviewListResponse(product_id=product_id, reviews=[_review_response(r) for r in reviews])


@review_router.get("/reviews/count", response_model=ReviewCountResponse)
async def count_reviews() -> ReviewCountResponse:
    return ReviewCountResponse(count=review_count())


@review_router.get("/reviews/{review_id}", response_model=ReviewResponse)
async def read_review(review_id: int) -> ReviewResponse:
    return _review_response(get_review(review_id))


@review_router.get("/transactions/{transaction_id}", response_model=TransactionUsageResponse)
async def read_transaction_usage(transaction_id: str) -> TransactionUsageResponse:
    status = lookup(transaction_id)
    return TransactionUsageResponse(transaction_id=transaction_id, spent=status.spent, review_id=status.review_id)


# ---------------------------------------------------------------------------
# Trust scores
# ---------------------------------------------------------------------------
@trust_router.get("/products/{product_id}/trust-score", response_model=TrustScoreResponse)
async def read_trust_score(product_id: str) -> TrustScoreResponse:
    return _score_response(get_trust_score(product_id))


@trust_router.get("/products/{product_id}/trust-score/history", response_model=TrustScoreHistoryResponse)
async def read_trust_score_history(product_id: str) -> TrustScoreHistoryResponse:
    get_product(product_id)
    entries = [
        TrustScoreHistoryEntry(
            total_reviews=entry.total_reviews,
            sum_of_ratings=entry.sum_of_ratings,
            average_rating=entry.average_rating,
            updated_at=entry.updated_at,
        )
        for entry in score_history(product_id)
    ]
    return TrustScoreHistoryResponse(product_id=product_id, entries=entries)


@trust_router.post("/trust-scores/batch", response_model=TrustScoreListResponse)
async def read_trust_scores(body: BatchTrustScoreRequest) -> TrustScoreListResponse:
    """Scores for many products; unknown ids come back zero-valued."""
    return TrustScoreListResponse(scores=[_score_response(s) for s in get_trust_scores(body.product_ids)])


# ---------------------------------------------------------------------------
# Broadcasts
# ---------------------------------------------------------------------------
@product_router.post("/{product_id}/broadcasts", status_code=201, response_model=MessageIdResponse)
def broadcast_trust_score(product_id: str, body: BroadcastRequest) -> MessageIdResponse:
    """Hand the product's trust score to the messaging gateway.

    A plain ``def`` so the blocking gateway call runs in the threadpool.
    """
    message_id = dispatch(
        BroadcastTrustScore(
            caller=body.caller,
            product_id=product_id,
            destination_domain=body.destination_domain,
            destination_address=body.destination_address,
            gas_budget=body.gas_budget,
            fee_token=body.fee_token,
            fee_amount=body.fee_amount,
        )
    )
    return MessageIdResponse(message_id=message_id)


@broadcast_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior (non-production only)."""
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(should_succeed=body.should_succeed, failure_reason=body.failure_reason)
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
    )


@broadcast_router.get("/{message_id}", response_model=BroadcastResponse)
async def read_broadcast(message_id: str) -> BroadcastResponse:
    broadcast = get_broadcast(message_id)
    return BroadcastResponse(
        message_id=broadcast.message_id,
        product_id=broadcast.product_id,
        average_rating=broadcast.average_rating,
        total_reviews=broadcast.total_reviews,
        destination_domain=broadcast.destination_domain,
        destination_address=broadcast.destination_address,
        gas_budget=broadcast.gas_budget,
        fee_token=broadcast.fee_token,
        fee_amount=broadcast.fee_amount,
        payload=broadcast.payload,
        snapshot=_score_response(decode_snapshot(broadcast.payload_bytes())),
        sent_by=str(broadcast.sent_by),
        sent_at=broadcast.sent_at,
    )

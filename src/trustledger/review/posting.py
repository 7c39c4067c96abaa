"""PostReview — accept a purchase-backed review and refresh the trust score.

Every check runs before anything is written, in this order:

1. product must be registered               -> NotFound
2. ledger must not be paused                -> PausedState
3. product must be active                   -> InvalidInput
4. purchase proof must be non-zero          -> InvalidInput
5. purchase proof must be unspent           -> AlreadyUsed
6. rating must be within 1..100             -> OutOfRange
7. reviewer must not be the product vendor  -> Unauthorized

Only then are the product counters advanced, the trust score recomputed,
the review appended and the proof consumed. All writes belong to the command's
unit of work and are committed together.
"""

from datetime import UTC, datetime

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from trustledger.access.guards import require_not_paused
from trustledger.domain import trustledger, logger
from trustledger.errors import InvalidInput, OutOfRange, Unauthorized
from trustledger.product.product import Product
from trustledger.product.registry import get_product
from trustledger.review import ledger
from trustledger.review.review import Review
from trustledger.shared.limits import MAX_RATING, MIN_RATING
from trustledger.trust.aggregator import load_trust_score, recompute
from trustledger.trust.trust_score import TrustScore
from trustledger.usage.usage import check_and_consume, ensure_unspent


@trustledger.command(part_of="Review")
class PostReview:
    reviewer = Identifier(required=True)
    product_id = String(max_length=255)
    transaction_id = String(max_length=255)
    rating = Integer(required=True)


@trustledger.command_handler(part_of=Review)
class PostReviewHandler:
    @handle(PostReview)
    def post_review(self, command):
        product = get_product(command.product_id)
        require_not_paused()

        if not product.is_active:
            raise InvalidInput({"product_id": [f"Product {product.product_id} is not accepting reviews"]})

        ensure_unspent(command.transaction_id)

        if command.rating < MIN_RATING or command.rating > MAX_RATING:
            raise OutOfRange({"rating": [f"Rating must be between {MIN_RATING} and {MAX_RATING}"]})

        if product.is_vendor(command.reviewer):
            raise Unauthorized({"reviewer": ["Vendors cannot review their own products"]})

        score = load_trust_score(product.product_id)
        now = datetime.now(UTC)

        product.record_rating(command.rating, at=now)
        recompute(score, product, at=now)
        review = ledger.append(
            product_id=product.product_id,
            reviewer=command.reviewer,
            transaction_id=command.transaction_id,
            rating=command.rating,
            total_reviews=score.total_reviews,
            average_rating=score.average_rating,
            posted_at=now,
        )
        check_and_consume(command.transaction_id, review_id=review.review_id, at=now)

        current_domain.repository_for(Product).add(product)
        current_domain.repository_for(TrustScore).add(score)

        logger.info(
            "Review posted",
            review_id=review.review_id,
            product_id=product.product_id,
            rating=command.rating,
            average_rating=score.average_rating,
            total_reviews=score.total_reviews,
        )
        return review.review_id

"""Review aggregate and the ledger counter that numbers reviews.

Reviews are immutable once created: there is no edit or delete. Review ids
come from the single ReviewLedger counter, are global across products, start
at 0 and have no gaps. A transition that aborts never commits its increment.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from trustledger.domain import trustledger
from trustledger.review.events import ReviewPosted
from trustledger.shared.identities import normalize_identity
from trustledger.shared.limits import MAX_RATING, MIN_RATING

LEDGER_ID = "reviews"


@trustledger.aggregate
class ReviewLedger:
    ledger_id = String(identifier=True, required=True, max_length=50)
    review_count = Integer(default=0)

    @classmethod
    def open(cls):
        return cls(ledger_id=LEDGER_ID, review_count=0)

    def next_review_id(self) -> int:
        review_id = self.review_count
        self.review_count = review_id + 1
        return review_id


@trustledger.aggregate
class Review:
    ledger_key = String(identifier=True, required=True, max_length=50)  # str(review_id)
    review_id = Integer(required=True)
    product_id = String(required=True, max_length=255)
    reviewer = Identifier(required=True)
    transaction_id = String(required=True, max_length=255)
    rating = Integer(required=True)
    posted_at = DateTime(required=True)

    @invariant.post
    def rating_must_be_in_range(self):
        if self.rating is not None and (self.rating < MIN_RATING or self.rating > MAX_RATING):
            raise ValidationError({"rating": [f"Rating must be between {MIN_RATING} and {MAX_RATING}"]})

    @classmethod
    def post(
        cls,
        review_id,
        product_id,
        reviewer,
        transaction_id,
        rating,
        total_reviews,
        average_rating,
        posted_at=None,
    ):
        """Build an accepted review. Callers validate the transition beforehand.

        ``total_reviews`` and ``average_rating`` are the product's values after
        this review was applied; they travel on the ReviewPosted event.
        """
        product_id = normalize_identity(product_id)
        reviewer = normalize_identity(reviewer)
        transaction_id = normalize_identity(transaction_id)
        now = posted_at or datetime.now(UTC)
        review = cls(
            ledger_key=str(review_id),
            review_id=review_id,
            product_id=product_id,
            reviewer=reviewer,
            transaction_id=transaction_id,
            rating=rating,
            posted_at=now,
        )
        review.raise_(
            ReviewPosted(
                review_id=review_id,
                product_id=product_id,
                reviewer=reviewer,
                transaction_id=transaction_id,
                rating=rating,
                total_reviews=total_reviews,
                average_rating=average_rating,
                posted_at=now,
            )
        )
        return review

"""Domain events for the Review aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from trustledger.domain import trustledger


@trustledger.event(part_of="Review")
class ReviewPosted:
    """A purchase-backed review was accepted into the ledger.

    Carries the product's counters and trust score after the review was applied.
    """

    __version__ = "v1"

    review_id = Integer(required=True)
    product_id = String(required=True)
    reviewer = Identifier(required=True)
    transaction_id = String(required=True)
    rating = Integer(required=True)
    total_reviews = Integer(required=True)
    average_rating = Integer(required=True)
    posted_at = DateTime(required=True)

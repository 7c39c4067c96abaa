"""Domain events for the TrustScore aggregate."""

from protean.fields import DateTime, Integer, String

from trustledger.domain import trustledger


@trustledger.event(part_of="TrustScore")
class TrustScoreUpdated:
    """A product's cached trust score was recomputed after an accepted review."""

    __version__ = "v1"

    product_id = String(required=True)
    total_reviews = Integer(required=True)
    sum_of_ratings = Integer(required=True)
    average_rating = Integer(required=True)
    updated_at = DateTime(required=True)

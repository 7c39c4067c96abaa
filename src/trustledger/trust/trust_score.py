"""TrustScore aggregate — the cached average rating and review count per product.

The cache is written only by the aggregator (``trustledger.trust.aggregator``)
and is never stale: it is recomputed in the same unit of work that updates
the product's counters.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from protean.fields import DateTime, Integer, String

from trustledger.domain import trustledger
from trustledger.shared.identities import normalize_identity
from trustledger.trust.events import TrustScoreUpdated


@dataclass(frozen=True)
class TrustScoreSnapshot:
    """Read-only view of a product's trust score.

    ``average_rating`` is basis-scaled: 8000 means an average of 80.00.
    """

    product_id: str
    total_reviews: int = 0
    average_rating: int = 0
    last_updated: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "average_rating": self.average_rating,
            "total_reviews": self.total_reviews,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }


@trustledger.aggregate
class TrustScore:
    product_id = String(identifier=True, required=True, max_length=255)
    total_reviews = Integer(default=0)
    average_rating = Integer(default=0)
    last_updated = DateTime()

    @classmethod
    def seed(cls, product_id, at=None):
        """Zero-valued score for a newly registered product."""
        return cls(
            product_id=normalize_identity(product_id),
            total_reviews=0,
            average_rating=0,
            last_updated=at or datetime.now(UTC),
        )

    def refresh(self, total_reviews, sum_of_ratings, average_rating, at=None):
        now = at or datetime.now(UTC)
        self.total_reviews = total_reviews
        self.average_rating = average_rating
        self.last_updated = now

        self.raise_(
            TrustScoreUpdated(
                product_id=self.product_id,
                total_reviews=total_reviews,
                sum_of_ratings=sum_of_ratings,
                average_rating=average_rating,
                updated_at=now,
            )
        )

    def snapshot(self) -> TrustScoreSnapshot:
        return TrustScoreSnapshot(
            product_id=self.product_id,
            total_reviews=self.total_reviews,
            average_rating=self.average_rating,
            last_updated=self.last_updated,
        )

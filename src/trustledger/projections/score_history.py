"""TrustScoreHistory — one row per recomputation of a product's trust score."""

from protean.core.projector import on
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from trustledger.domain import trustledger
from trustledger.shared.identities import normalize_identity
from trustledger.trust.events import TrustScoreUpdated
from trustledger.trust.trust_score import TrustScore


@trustledger.projection
class TrustScoreHistory:
    entry_id = Identifier(identifier=True, required=True)  # "{product_id}:{total_reviews}"
    product_id = String(required=True, max_length=255)
    total_reviews = Integer(required=True)
    sum_of_ratings = Integer(required=True)
    average_rating = Integer(required=True)
    updated_at = DateTime(required=True)


@trustledger.projector(projector_for=TrustScoreHistory, aggregates=[TrustScore])
class TrustScoreHistoryProjector:
    @on(TrustScoreUpdated)
    def on_trust_score_updated(self, event):
        current_domain.repository_for(TrustScoreHistory).add(
            TrustScoreHistory(
                entry_id=f"{event.product_id}:{event.total_reviews}",
                product_id=event.product_id,
                total_reviews=event.total_reviews,
                sum_of_ratings=event.sum_of_ratings,
                average_rating=event.average_rating,
                updated_at=event.updated_at,
            )
        )


def score_history(product_id, limit=100) -> list[TrustScoreHistory]:
    return (
        current_domain.repository_for(TrustScoreHistory)
        ._dao.query.filter(product_id=normalize_identity(product_id))
        .order_by("total_reviews")
        .limit(limit)
        .all()
        .items
    )

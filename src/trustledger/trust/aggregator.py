"""Trust score aggregation.

``recompute`` derives a product's average from its registry counters:

    average_rating = floor(sum_of_ratings * RATING_BASIS / total_reviews)

and overwrites the cached TrustScore. The readers below expose the cache.
``get_trust_score`` fails for unknown products while ``get_trust_scores``
returns zero-valued entries for them; batch callers get one entry per
requested id without having to filter first.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from trustledger.errors import NotFound, Overflow, TrustScoreInvariantError
from trustledger.shared.identities import is_zero_identity, normalize_identity
from trustledger.shared.limits import AVERAGE_RATING_CEILING, RATING_BASIS
from trustledger.trust.trust_score import TrustScore, TrustScoreSnapshot


def compute_average(sum_of_ratings: int, total_reviews: int) -> int:
    if total_reviews == 0:
        raise TrustScoreInvariantError("Trust score recomputed for a product without reviews")

    average = (sum_of_ratings * RATING_BASIS) // total_reviews
    if average > AVERAGE_RATING_CEILING:
        raise Overflow({"average_rating": [f"Average rating {average} exceeds {AVERAGE_RATING_CEILING}"]})
    return average


def recompute(score: TrustScore, product, at=None) -> TrustScore:
    """Refresh ``score`` from ``product``'s current counters."""
    average = compute_average(product.sum_of_ratings, product.total_reviews)
    score.refresh(
        total_reviews=product.total_reviews,
        sum_of_ratings=product.sum_of_ratings,
        average_rating=average,
        at=at,
    )
    return score


def load_trust_score(product_id) -> TrustScore:
    if is_zero_identity(product_id):
        raise NotFound({"product_id": [f"Product {product_id} is not registered"]})
    try:
        return current_domain.repository_for(TrustScore).get(normalize_identity(product_id))
    except ObjectNotFoundError:
        raise NotFound({"product_id": [f"Product {product_id} is not registered"]}) from None


def get_trust_score(product_id) -> TrustScoreSnapshot:
    return load_trust_score(product_id).snapshot()


def get_trust_scores(product_ids) -> list[TrustScoreSnapshot]:
    results = []
    for product_id in product_ids:
        try:
            results.append(get_trust_score(product_id))
        except NotFound:
            results.append(TrustScoreSnapshot(product_id=normalize_identity(product_id)))
    return results

"""Review ledger — append-only store of reviews."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from trustledger.errors import NotFound
from trustledger.review.review import LEDGER_ID, Review, ReviewLedger
from trustledger.shared.identities import normalize_identity


def _load_ledger() -> ReviewLedger:
    try:
        return current_domain.repository_for(ReviewLedger).get(LEDGER_ID)
    except ObjectNotFoundError:
        return ReviewLedger.open()


def append(product_id, reviewer, transaction_id, rating, total_reviews, average_rating, posted_at=None) -> Review:
    """Number and store a review whose transition has already been validated."""
    ledger = _load_ledger()
    review = Review.post(
        review_id=ledger.next_review_id(),
        product_id=product_id,
        reviewer=reviewer,
        transaction_id=transaction_id,
        rating=rating,
        total_reviews=total_reviews,
        average_rating=average_rating,
        posted_at=posted_at,
    )

    current_domain.repository_for(ReviewLedger).add(ledger)
    current_domain.repository_for(Review).add(review)
    return review


def review_count() -> int:
    return _load_ledger().review_count


def get_review(review_id) -> Review:
    if review_id is None or review_id < 0 or review_id >= review_count():
        raise NotFound({"review_id": [f"Review {review_id} does not exist"]})
    try:
        return current_domain.repository_for(Review).get(str(review_id))
    except ObjectNotFoundError:
        raise NotFound({"review_id": [f"Review {review_id} does not exist"]}) from None


def reviews_for_product(product_id, offset=0, limit=50) -> list[Review]:
    """A product's reviews in posting order."""
    return (
        current_domain.repository_for(Review)
        ._dao.query.filter(product_id=normalize_identity(product_id))
        .order_by("review_id")
        .offset(offset)
        .limit(limit)
        .all()
        .items
    )

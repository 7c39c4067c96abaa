"""Product aggregate — registry record and running rating counters.

A product keeps two counters, ``total_reviews`` and ``sum_of_ratings``.
They only ever change together, through ``record_rating``, and both are
bounded by the width of the ledger's counters.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String

from trustledger.domain import trustledger
from trustledger.errors import InvalidInput, OutOfRange, Overflow
from trustledger.product.events import ProductActivationChanged, ProductAdded
from trustledger.shared.identities import is_zero_identity, normalize_identity, same_identity
from trustledger.shared.limits import MAX_RATING, MIN_RATING, UINT256_MAX


@trustledger.aggregate
class Product:
    """A vendor's product, open to purchase-backed reviews while active."""

    product_id = String(identifier=True, required=True, max_length=255)
    vendor = Identifier(required=True)
    is_active = Boolean(default=True)
    total_reviews = Integer(default=0)
    sum_of_ratings = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def counters_must_not_be_negative(self):
        if (self.total_reviews or 0) < 0 or (self.sum_of_ratings or 0) < 0:
            raise ValidationError({"counters": ["Review counters cannot be negative"]})

    @invariant.post
    def sum_must_fit_within_review_count(self):
        if (self.sum_of_ratings or 0) > (self.total_reviews or 0) * MAX_RATING:
            raise ValidationError({"sum_of_ratings": ["Sum of ratings exceeds total reviews times the maximum rating"]})

    @classmethod
    def register(cls, product_id, vendor, added_by=None):
        """Register a new, active product with zeroed counters."""
        if is_zero_identity(product_id):
            raise InvalidInput({"product_id": ["Product id cannot be the zero identity"]})
        if is_zero_identity(vendor):
            raise InvalidInput({"vendor": ["Vendor cannot be the zero identity"]})

        product_id = normalize_identity(product_id)
        vendor = normalize_identity(vendor)
        now = datetime.now(UTC)
        product = cls(
            product_id=product_id,
            vendor=vendor,
            is_active=True,
            total_reviews=0,
            sum_of_ratings=0,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=product_id,
                vendor=vendor,
                is_active=True,
                added_by=str(added_by) if added_by else None,
                added_at=now,
            )
        )
        return product

    def is_vendor(self, account) -> bool:
        return same_identity(self.vendor, account)

    def set_active(self, is_active, changed_by=None):
        """Open or close the product for new reviews. Past reviews are untouched."""
        now = datetime.now(UTC)
        self.is_active = bool(is_active)
        self.updated_at = now

        self.raise_(
            ProductActivationChanged(
                product_id=self.product_id,
                is_active=self.is_active,
                changed_by=str(changed_by) if changed_by else None,
                changed_at=now,
            )
        )

    def record_rating(self, rating, at=None):
        """Add one accepted rating to the running counters."""
        if rating < MIN_RATING or rating > MAX_RATING:
            raise OutOfRange({"rating": [f"Rating must be between {MIN_RATING} and {MAX_RATING}"]})

        total_reviews = self.total_reviews + 1
        sum_of_ratings = self.sum_of_ratings + rating
        if total_reviews > UINT256_MAX:
            raise Overflow({"total_reviews": ["Review counter would overflow"]})
        if sum_of_ratings > UINT256_MAX:
            raise Overflow({"sum_of_ratings": ["Rating accumulator would overflow"]})

        with atomic_change(self):
            self.total_reviews = total_reviews
            self.sum_of_ratings = sum_of_ratings
            self.updated_at = at or datetime.now(UTC)

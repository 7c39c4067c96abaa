"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from trustledger.domain import trustledger


@trustledger.event(part_of="Product")
class ProductAdded:
    """A product was registered and can now receive reviews."""

    __version__ = "v1"

    product_id = String(required=True)
    vendor = Identifier(required=True)
    is_active = Boolean(required=True)
    added_by = Identifier()
    added_at = DateTime(required=True)


@trustledger.event(part_of="Product")
class ProductActivationChanged:
    """A product was opened to, or closed for, new reviews."""

    __version__ = "v1"

    product_id = String(required=True)
    is_active = Boolean(required=True)
    changed_by = Identifier()
    changed_at = DateTime(required=True)

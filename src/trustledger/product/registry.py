"""Read access to the product registry."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from trustledger.errors import NotFound
from trustledger.product.product import Product
from trustledger.shared.identities import is_zero_identity, normalize_identity


def get_product(product_id) -> Product:
    """Return the registered product or raise NotFound."""
    if is_zero_identity(product_id):
        raise NotFound({"product_id": [f"Product {product_id} is not registered"]})
    try:
        return current_domain.repository_for(Product).get(normalize_identity(product_id))
    except ObjectNotFoundError:
        raise NotFound({"product_id": [f"Product {product_id} is not registered"]}) from None


def product_exists(product_id) -> bool:
    try:
        get_product(product_id)
    except NotFound:
        return False
    return True

"""Product registration — command and handler.

Registering a product also seeds its zero-valued trust score, in the same
unit of work, so every registered product has a cached score from the start.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from trustledger.access.guards import require_not_paused, require_role
from trustledger.access.policy import Role
from trustledger.domain import trustledger, logger
from trustledger.errors import AlreadyExists
from trustledger.product.product import Product
from trustledger.product.registry import product_exists
from trustledger.trust.trust_score import TrustScore


@trustledger.command(part_of="Product")
class AddProduct:
    caller = Identifier(required=True)
    product_id = String(max_length=255)
    vendor = String(max_length=255)


@trustledger.command_handler(part_of=Product)
class AddProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        require_not_paused()
        require_role(Role.PRODUCT_MANAGER, command.caller)

        if product_exists(command.product_id):
            raise AlreadyExists({"product_id": [f"Product {command.product_id} is already registered"]})

        product = Product.register(
            product_id=command.product_id,
            vendor=command.vendor,
            added_by=command.caller,
        )
        score = TrustScore.seed(product_id=product.product_id, at=product.created_at)

        current_domain.repository_for(Product).add(product)
        current_domain.repository_for(TrustScore).add(score)

        logger.info("Product added", product_id=product.product_id, vendor=str(product.vendor))
        return product.product_id

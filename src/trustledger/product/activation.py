"""Product activation — command and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from trustledger.access.guards import has_role, require_not_paused
from trustledger.access.policy import Role
from trustledger.domain import trustledger, logger
from trustledger.errors import Unauthorized
from trustledger.product.product import Product
from trustledger.product.registry import get_product


@trustledger.command(part_of="Product")
class SetProductActive:
    caller = Identifier(required=True)
    product_id = String(max_length=255)
    is_active = Boolean(required=True)


@trustledger.command_handler(part_of=Product)
class SetProductActiveHandler:
    @handle(SetProductActive)
    def set_product_active(self, command):
        require_not_paused()

        product = get_product(command.product_id)
        if not (product.is_vendor(command.caller) or has_role(Role.PRODUCT_MANAGER, command.caller)):
            raise Unauthorized({"caller": ["Only the vendor or a product manager can change product activation"]})

        product.set_active(command.is_active, changed_by=command.caller)
        current_domain.repository_for(Product).add(product)

        logger.info("Product activation changed", product_id=product.product_id, is_active=product.is_active)

"""BroadcastTrustScore — hand a product's trust score to another domain.

One synchronous call to the messaging gateway. A failed hand-off aborts the
command with RemoteSendFailure; a successful one returns the gateway's
message id and records the broadcast. Delivery is never confirmed here.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from trustledger.access.guards import require_not_paused, require_role
from trustledger.access.policy import Role
from trustledger.broadcast.broadcast import Broadcast
from trustledger.broadcast.snapshot import encode_snapshot
from trustledger.domain import trustledger, logger
from trustledger.errors import InvalidInput, NotFound, RemoteSendFailure
from trustledger.gateway import get_gateway
from trustledger.product.registry import get_product
from trustledger.shared.identities import is_zero_identity
from trustledger.trust.aggregator import get_trust_score


@trustledger.command(part_of="Broadcast")
class BroadcastTrustScore:
    caller = Identifier(required=True)
    product_id = String(max_length=255)
    destination_domain = Integer()
    destination_address = String(max_length=255)
    gas_budget = Integer(default=0)
    fee_token = String(max_length=255)
    fee_amount = Integer(default=0)


@trustledger.command_handler(part_of=Broadcast)
class BroadcastTrustScoreHandler:
    @handle(BroadcastTrustScore)
    def broadcast_trust_score(self, command):
        require_not_paused()
        require_role(Role.BROADCASTER, command.caller)

        product = get_product(command.product_id)
        if not product.is_active:
            raise InvalidInput({"product_id": [f"Product {product.product_id} is not active"]})
        if product.total_reviews == 0:
            raise InvalidInput({"product_id": [f"Product {product.product_id} has no reviews to broadcast"]})
        if is_zero_identity(command.destination_domain):
            raise InvalidInput({"destination_domain": ["Destination domain cannot be zero"]})
        if is_zero_identity(command.destination_address):
            raise InvalidInput({"destination_address": ["Destination address cannot be the zero identity"]})
        if (command.gas_budget or 0) < 0 or (command.fee_amount or 0) < 0:
            raise InvalidInput({"fee": ["Gas budget and fee amount cannot be negative"]})

        snapshot = get_trust_score(product.product_id)
        payload = encode_snapshot(snapshot)

        gateway = get_gateway()
        try:
            result = gateway.send(
                destination_domain=command.destination_domain,
                destination_address=command.destination_address,
                fee_token=command.fee_token,
                fee_amount=command.fee_amount or 0,
                gas_budget=command.gas_budget or 0,
                payload=payload,
            )
        except Exception as exc:
            logger.error("Gateway raised during send", product_id=product.product_id, error=str(exc))
            raise RemoteSendFailure({"gateway": [f"{type(gateway).__name__} failed: {exc}"]}) from exc

        if not result.success:
            logger.warning(
                "Gateway rejected broadcast",
                product_id=product.product_id,
                gateway=type(gateway).__name__,
                reason=result.failure_reason,
            )
            raise RemoteSendFailure({"gateway": [result.failure_reason or "Gateway rejected the message"]})

        broadcast = Broadcast.record(
            message_id=result.message_id,
            snapshot=snapshot,
            payload=payload,
            destination_domain=command.destination_domain,
            destination_address=command.destination_address,
            gas_budget=command.gas_budget,
            fee_token=command.fee_token,
            fee_amount=command.fee_amount,
            sent_by=command.caller,
        )
        current_domain.repository_for(Broadcast).add(broadcast)

        logger.info(
            "Trust score broadcast",
            message_id=broadcast.message_id,
            product_id=product.product_id,
            average_rating=snapshot.average_rating,
            total_reviews=snapshot.total_reviews,
            destination_domain=command.destination_domain,
        )
        return broadcast.message_id


def get_broadcast(message_id) -> Broadcast:
    try:
        return current_domain.repository_for(Broadcast).get(str(message_id))
    except ObjectNotFoundError:
        raise NotFound({"message_id": [f"Broadcast {message_id} does not exist"]}) from None

"""Broadcast aggregate — record of a snapshot handed to the messaging gateway."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, String, Text

from trustledger.broadcast.events import TrustScoreBroadcast
from trustledger.domain import trustledger


@trustledger.aggregate
class Broadcast:
    message_id = String(identifier=True, required=True, max_length=255)
    product_id = String(required=True, max_length=255)
    average_rating = Integer(required=True)
    total_reviews = Integer(required=True)
    snapshot_taken_at = DateTime()
    destination_domain = Integer(required=True)
    destination_address = String(required=True, max_length=255)
    gas_budget = Integer(default=0)
    fee_token = String(max_length=255)
    fee_amount = Integer(default=0)
    payload = Text(required=True)  # hex-encoded snapshot bytes
    sent_by = Identifier(required=True)
    sent_at = DateTime(required=True)

    @classmethod
    def record(
        cls,
        message_id,
        snapshot,
        payload,
        destination_domain,
        destination_address,
        gas_budget,
        fee_token,
        fee_amount,
        sent_by,
    ):
        now = datetime.now(UTC)
        broadcast = cls(
            message_id=str(message_id),
            product_id=snapshot.product_id,
            average_rating=snapshot.average_rating,
            total_reviews=snapshot.total_reviews,
            snapshot_taken_at=snapshot.last_updated,
            destination_domain=destination_domain,
            destination_address=destination_address,
            gas_budget=gas_budget or 0,
            fee_token=fee_token,
            fee_amount=fee_amount or 0,
            payload="0x" + payload.hex(),
            sent_by=str(sent_by),
            sent_at=now,
        )
        broadcast.raise_(
            TrustScoreBroadcast(
                message_id=str(message_id),
                product_id=snapshot.product_id,
                average_rating=snapshot.average_rating,
                total_reviews=snapshot.total_reviews,
                destination_domain=destination_domain,
                destination_address=destination_address,
                sent_by=str(sent_by),
                sent_at=now,
            )
        )
        return broadcast

    def payload_bytes(self) -> bytes:
        return bytes.fromhex(self.payload.removeprefix("0x"))

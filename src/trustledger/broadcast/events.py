"""Domain events for the Broadcast aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from trustledger.domain import trustledger


@trustledger.event(part_of="Broadcast")
class TrustScoreBroadcast:
    """A trust-score snapshot was handed to the messaging gateway.

    Hand-off only: nothing here says the message was delivered.
    """

    __version__ = "v1"

    message_id = String(required=True)
    product_id = String(required=True)
    average_rating = Integer(required=True)
    total_reviews = Integer(required=True)
    destination_domain = Integer(required=True)
    destination_address = String(required=True)
    sent_by = Identifier(required=True)
    sent_at = DateTime(required=True)

"""Messaging gateway port (abstract interface).

The ledger only builds a message and hands it off. Delivery, relaying,
ordering and fee settlement belong to the gateway. Adapters report a failed
hand-off as an unsuccessful SendResult instead of raising.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class SendResult:
    """Result of handing a message to the gateway."""

    success: bool
    message_id: str | None = None
    failure_reason: str | None = None


class MessagingGateway(ABC):
    """Abstract cross-domain messaging gateway."""

    @abstractmethod
    def send(
        self,
        destination_domain: int,
        destination_address: str,
        fee_token: str | None,
        fee_amount: int,
        gas_budget: int,
        payload: bytes,
    ) -> SendResult:
        """Hand ``payload`` to the gateway for delivery to the destination."""
        ...

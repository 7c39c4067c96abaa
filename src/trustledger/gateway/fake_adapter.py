"""Configurable fake messaging gateway for development and testing.

Accepts every message (or rejects every message, once configured to fail)
without contacting any relay, and keeps a log of the calls it received.
"""

from uuid import uuid4

from trustledger.gateway.port import MessagingGateway, SendResult


class FakeGateway(MessagingGateway):
    """Configurable fake messaging gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Insufficient fee"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Insufficient fee") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(
        self,
        destination_domain: int,
        destination_address: str,
        fee_token: str | None,
        fee_amount: int,
        gas_budget: int,
        payload: bytes,
    ) -> SendResult:
        self.calls.append(
            {
                "method": "send",
                "destination_domain": destination_domain,
                "destination_address": destination_address,
                "fee_token": fee_token,
                "fee_amount": fee_amount,
                "gas_budget": gas_budget,
                "payload": payload,
            }
        )

        if self.should_succeed:
            return SendResult(success=True, message_id=f"0x{uuid4().hex}")
        return SendResult(success=False, failure_reason=self.failure_reason)

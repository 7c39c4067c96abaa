"""Messaging gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing (default)
- HttpRelayGateway when MESSAGING_GATEWAY=http
"""

import os

from trustledger.gateway.fake_adapter import FakeGateway
from trustledger.gateway.http_adapter import HttpRelayGateway
from trustledger.gateway.port import MessagingGateway

_current_gateway: MessagingGateway | None = None


def _build_gateway() -> MessagingGateway:
    adapter = os.environ.get("MESSAGING_GATEWAY", "fake")
    if adapter == "fake":
        return FakeGateway()
    if adapter == "http":
        base_url = os.environ.get("MESSAGING_RELAY_URL")
        if not base_url:
            raise ValueError("MESSAGING_RELAY_URL must be set when MESSAGING_GATEWAY=http")
        return HttpRelayGateway(
            base_url=base_url,
            api_key=os.environ.get("MESSAGING_RELAY_API_KEY"),
            timeout=float(os.environ.get("MESSAGING_RELAY_TIMEOUT", "10")),
        )
    raise ValueError(f"Unknown messaging gateway adapter: {adapter}")


def get_gateway() -> MessagingGateway:
    """Return the current messaging gateway, building it on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _build_gateway()
    return _current_gateway


def set_gateway(gateway: MessagingGateway) -> None:
    """Override the active messaging gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to the environment-configured gateway."""
    global _current_gateway
    _current_gateway = None

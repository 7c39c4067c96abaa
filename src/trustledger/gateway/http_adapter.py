"""HTTP relay messaging gateway.

Hands messages to a relay service that owns the cross-domain transport:

    POST {base_url}/messages
    {
        "destination_domain": 10,
        "destination_address": "0xabc...",
        "fee_token": "0xfee...",
        "fee_amount": 1000,
        "gas_budget": 200000,
        "payload": "0x7b22..."
    }

A 2xx response carries ``{"message_id": "..."}``. Anything else, including
transport errors and timeouts, is reported as a failed SendResult.
"""

import httpx
import structlog

from trustledger.gateway.port import MessagingGateway, SendResult

logger = structlog.get_logger(__name__)


class HttpRelayGateway(MessagingGateway):
    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _post(self, body: dict) -> httpx.Response:
        url = f"{self.base_url}/messages"
        if self._client is not None:
            return self._client.post(url, json=body, headers=self._headers(), timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(url, json=body, headers=self._headers())

    def send(
        self,
        destination_domain: int,
        destination_address: str,
        fee_token: str | None,
        fee_amount: int,
        gas_budget: int,
        payload: bytes,
    ) -> SendResult:
        body = {
            "destination_domain": destination_domain,
            "destination_address": destination_address,
            "fee_token": fee_token,
            "fee_amount": fee_amount,
            "gas_budget": gas_budget,
            "payload": "0x" + payload.hex(),
        }

        try:
            response = self._post(body)
        except httpx.TimeoutException:
            logger.error("Relay request timed out", base_url=self.base_url)
            return SendResult(success=False, failure_reason="Relay request timed out")
        except httpx.HTTPError as exc:
            logger.error("Relay request failed", base_url=self.base_url, error=str(exc))
            return SendResult(success=False, failure_reason=f"Relay request failed: {exc}")

        if not response.is_success:
            logger.error("Relay rejected message", status_code=response.status_code, detail=response.text)
            return SendResult(
                success=False,
                failure_reason=f"HTTP {response.status_code}: {response.text}",
            )

        try:
            message_id = response.json().get("message_id")
        except ValueError:
            message_id = None
        if not message_id:
            return SendResult(success=False, failure_reason="Relay response did not include a message id")

        logger.info("Relay accepted message", message_id=message_id, destination_domain=destination_domain)
        return SendResult(success=True, message_id=str(message_id))

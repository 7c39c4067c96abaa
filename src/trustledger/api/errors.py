"""Map TrustLedger's named failures to HTTP responses.

Each condition gets its own status code and the body names the condition:

    {"error": "AlreadyUsed", "messages": {"transaction_id": ["..."]}}
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from trustledger.errors import ERROR_STATUS_CODES


def _messages(exc):
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        return messages
    return {"detail": [str(messages or exc)]}


def _handler_for(status_code: int):
    async def handle_domain_error(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content={"error": type(exc).__name__, "messages": _messages(exc)},
        )

    return handle_domain_error


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's generic handlers, then the ledger's specific ones."""
    register_exception_handlers(app)
    for exc_cls, status_code in ERROR_STATUS_CODES.items():
        app.add_exception_handler(exc_cls, _handler_for(status_code))

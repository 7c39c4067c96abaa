"""TrustLedger API package."""

from trustledger.api.errors import register_error_handlers
from trustledger.api.routes import (
    access_router,
    broadcast_router,
    product_router,
    review_router,
    trust_router,
)

routers = [access_router, product_router, review_router, trust_router, broadcast_router]

__all__ = [
    "access_router",
    "broadcast_router",
    "product_router",
    "register_error_handlers",
    "review_router",
    "routers",
    "trust_router",
]

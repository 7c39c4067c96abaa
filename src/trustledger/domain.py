"""TrustLedger bounded context — purchase-gated reviews and product trust scores.

Keeps a registry of products, an append-only ledger of reviews backed by
single-use purchase proofs, a cached trust score per product, and hands
trust-score snapshots to an external cross-domain messaging gateway.
"""

import structlog
from protean.domain import Domain

from trustledger.utils.logging import configure_logging

configure_logging()

trustledger = Domain(name="trustledger")

logger = structlog.get_logger(__name__)

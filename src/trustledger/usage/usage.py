"""Transaction-usage guard — single-use purchase proofs.

A TransactionUsage record exists exactly when its proof has been spent.
Records are never changed or removed, so the consuming review id is
permanent. ``check_and_consume`` runs inside a command dispatched under the
ledger guard, which makes the check and the mark one indivisible step.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Integer, String
from protean.utils.globals import current_domain

from trustledger.domain import trustledger
from trustledger.errors import AlreadyUsed, InvalidInput
from trustledger.shared.identities import is_zero_identity, normalize_identity


@dataclass(frozen=True)
class UsageStatus:
    spent: bool
    review_id: int | None = None


@trustledger.aggregate
class TransactionUsage:
    transaction_id = String(identifier=True, required=True, max_length=255)
    review_id = Integer(required=True)
    spent_at = DateTime(required=True)


def _find(transaction_id):
    try:
        return current_domain.repository_for(TransactionUsage).get(normalize_identity(transaction_id))
    except ObjectNotFoundError:
        return None


def lookup(transaction_id) -> UsageStatus:
    """Report whether a proof is spent and, if so, by which review."""
    if is_zero_identity(transaction_id):
        return UsageStatus(spent=False)
    usage = _find(transaction_id)
    if usage is None:
        return UsageStatus(spent=False)
    return UsageStatus(spent=True, review_id=usage.review_id)


def ensure_unspent(transaction_id) -> None:
    """Fail with InvalidInput for a zero proof and AlreadyUsed for a spent one."""
    if is_zero_identity(transaction_id):
        raise InvalidInput({"transaction_id": ["Transaction id cannot be the zero identity"]})

    status = lookup(transaction_id)
    if status.spent:
        raise AlreadyUsed(
            {"transaction_id": [f"Transaction {transaction_id} was already used by review {status.review_id}"]}
        )


def check_and_consume(transaction_id, review_id, at=None) -> TransactionUsage:
    """Mark a proof as spent by ``review_id``."""
    ensure_unspent(transaction_id)

    usage = TransactionUsage(
        transaction_id=normalize_identity(transaction_id),
        review_id=review_id,
        spent_at=at or datetime.now(UTC),
    )
    current_domain.repository_for(TransactionUsage).add(usage)
    return usage

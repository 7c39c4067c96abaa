"""Named failure conditions of the TrustLedger domain.

Every abort is raised as one of these so callers can tell conditions apart.
They extend Protean's own exceptions, so they carry a field-keyed ``messages``
dict and roll back the unit of work like any other domain error.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class InvalidInput(ValidationError):
    """Malformed or zero argument, or an operation on a product in the wrong state."""


class OutOfRange(ValidationError):
    """Rating outside the accepted 1..100 range."""


class AlreadyExists(ValidationError):
    """Duplicate product registration."""


class AlreadyUsed(ValidationError):
    """Purchase proof already consumed by an earlier review."""


class Unauthorized(ValidationError):
    """Caller lacks the required role, or a vendor tried to review their own product."""


class PausedState(ValidationError):
    """Mutating call while the ledger is paused."""


class Overflow(ValidationError):
    """A counter or derived value would exceed its bound."""


class RemoteSendFailure(ValidationError):
    """The messaging gateway rejected or failed to accept a message."""


class ReentrantCall(ValidationError):
    """A mutating entry point was entered again before it completed."""


class NotFound(ObjectNotFoundError):
    """Unknown product, review or broadcast identifier."""


class TrustScoreInvariantError(RuntimeError):
    """Trust score recomputed for a product without reviews."""


ERROR_STATUS_CODES = {
    InvalidInput: 400,
    OutOfRange: 400,
    Unauthorized: 403,
    NotFound: 404,
    AlreadyExists: 409,
    AlreadyUsed: 409,
    ReentrantCall: 409,
    Overflow: 422,
    PausedState: 423,
    RemoteSendFailure: 502,
}

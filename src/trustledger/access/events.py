"""Domain events for the AccessPolicy aggregate."""

from protean.fields import DateTime, Identifier, String

from trustledger.domain import trustledger


@trustledger.event(part_of="AccessPolicy")
class AccessInitialized:
    """The ledger's first administrator was installed."""

    __version__ = "v1"

    policy_id = String(required=True)
    admin = Identifier(required=True)
    initialized_at = DateTime(required=True)


@trustledger.event(part_of="AccessPolicy")
class RoleGranted:
    __version__ = "v1"

    policy_id = String(required=True)
    role = String(required=True)
    account = Identifier(required=True)
    granted_by = Identifier(required=True)
    granted_at = DateTime(required=True)


@trustledger.event(part_of="AccessPolicy")
class RoleRevoked:
    __version__ = "v1"

    policy_id = String(required=True)
    role = String(required=True)
    account = Identifier(required=True)
    revoked_by = Identifier(required=True)
    revoked_at = DateTime(required=True)


@trustledger.event(part_of="AccessPolicy")
class LedgerPaused:
    """All mutating entry points are disabled until unpaused."""

    __version__ = "v1"

    policy_id = String(required=True)
    paused_by = Identifier(required=True)
    paused_at = DateTime(required=True)


@trustledger.event(part_of="AccessPolicy")
class LedgerUnpaused:
    __version__ = "v1"

    policy_id = String(required=True)
    unpaused_by = Identifier(required=True)
    unpaused_at = DateTime(required=True)

"""AccessPolicy aggregate — roles and the ledger-wide pause flag.

A single policy record (``policy_id = "default"``) backs the authorization
and pause gates. Role membership is kept as a JSON object mapping each role
to the accounts holding it.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, String, Text

from trustledger.access.events import (
    AccessInitialized,
    LedgerPaused,
    LedgerUnpaused,
    RoleGranted,
    RoleRevoked,
)
from trustledger.domain import trustledger
from trustledger.errors import InvalidInput
from trustledger.shared.identities import is_zero_identity, normalize_identity, same_identity

DEFAULT_POLICY_ID = "default"


class Role(Enum):
    ADMIN = "Admin"
    PRODUCT_MANAGER = "ProductManager"
    BROADCASTER = "Broadcaster"


def _role_name(role):
    value = role.value if isinstance(role, Role) else role
    try:
        return Role(value).value
    except ValueError:
        raise InvalidInput({"role": [f"Unknown role: {value}"]}) from None


@trustledger.aggregate
class AccessPolicy:
    policy_id = String(identifier=True, required=True, max_length=50)
    roles = Text()  # JSON: {"Admin": ["acct-1"], "Broadcaster": [...]}
    paused = Boolean(default=False)
    updated_at = DateTime()

    @classmethod
    def initialize(cls, admin, policy_id=DEFAULT_POLICY_ID):
        """Install the first administrator."""
        if is_zero_identity(admin):
            raise InvalidInput({"admin": ["Administrator account cannot be the zero identity"]})

        now = datetime.now(UTC)
        policy = cls(
            policy_id=policy_id,
            roles=json.dumps({Role.ADMIN.value: [normalize_identity(admin)]}),
            paused=False,
            updated_at=now,
        )
        policy.raise_(
            AccessInitialized(
                policy_id=policy_id,
                admin=str(admin),
                initialized_at=now,
            )
        )
        return policy

    def _load_roles(self):
        return json.loads(self.roles) if self.roles else {}

    def members(self, role):
        return list(self._load_roles().get(_role_name(role), []))

    def has_role(self, role, account):
        if is_zero_identity(account):
            return False
        return any(same_identity(member, account) for member in self.members(role))

    def grant(self, role, account, granted_by):
        role_name = _role_name(role)
        if is_zero_identity(account):
            raise InvalidInput({"account": ["Cannot grant a role to the zero identity"]})

        if self.has_role(role_name, account):
            return

        now = datetime.now(UTC)
        roles = self._load_roles()
        roles.setdefault(role_name, []).append(normalize_identity(account))
        self.roles = json.dumps(roles)
        self.updated_at = now

        self.raise_(
            RoleGranted(
                policy_id=self.policy_id,
                role=role_name,
                account=str(account),
                granted_by=str(granted_by),
                granted_at=now,
            )
        )

    def revoke(self, role, account, revoked_by):
        role_name = _role_name(role)
        if not self.has_role(role_name, account):
            return

        roles = self._load_roles()
        remaining = [m for m in roles.get(role_name, []) if not same_identity(m, account)]
        if role_name == Role.ADMIN.value and not remaining:
            raise InvalidInput({"role": ["Cannot revoke the last administrator"]})

        now = datetime.now(UTC)
        roles[role_name] = remaining
        self.roles = json.dumps(roles)
        self.updated_at = now

        self.raise_(
            RoleRevoked(
                policy_id=self.policy_id,
                role=role_name,
                account=str(account),
                revoked_by=str(revoked_by),
                revoked_at=now,
            )
        )

    def pause(self, paused_by):
        if self.paused:
            raise InvalidInput({"paused": ["Ledger is already paused"]})

        now = datetime.now(UTC)
        self.paused = True
        self.updated_at = now
        self.raise_(LedgerPaused(policy_id=self.policy_id, paused_by=str(paused_by), paused_at=now))

    def unpause(self, unpaused_by):
        if not self.paused:
            raise InvalidInput({"paused": ["Ledger is not paused"]})

        now = datetime.now(UTC)
        self.paused = False
        self.updated_at = now
        self.raise_(LedgerUnpaused(policy_id=self.policy_id, unpaused_by=str(unpaused_by), unpaused_at=now))

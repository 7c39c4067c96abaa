"""Precondition guards run at the start of every mutating entry point.

Handlers call these explicitly, in order, before touching any state:

    require_not_paused()
    require_role(Role.BROADCASTER, command.caller)

The ReentrancyGuard wraps whole commands (see ``trustledger.dispatch``).
"""

import threading
from contextlib import contextmanager

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from trustledger.access.policy import DEFAULT_POLICY_ID, AccessPolicy, Role
from trustledger.errors import PausedState, ReentrantCall, Unauthorized

logger = structlog.get_logger(__name__)


def load_policy():
    """Return the access policy, or None before the ledger is initialized."""
    try:
        return current_domain.repository_for(AccessPolicy).get(DEFAULT_POLICY_ID)
    except ObjectNotFoundError:
        return None


def has_role(role, caller) -> bool:
    policy = load_policy()
    return policy is not None and policy.has_role(role, caller)


def require_role(role, caller) -> None:
    if not has_role(role, caller):
        role_name = role.value if isinstance(role, Role) else role
        logger.info("Role check failed", role=role_name, caller=str(caller))
        raise Unauthorized({"caller": [f"Account {caller} does not hold the {role_name} role"]})


def require_not_paused() -> None:
    policy = load_policy()
    if policy is not None and policy.paused:
        raise PausedState({"ledger": ["Ledger is paused"]})


class ReentrancyGuard:
    """Mutual exclusion around state-mutating entry points.

    Different threads queue on the lock. The thread already holding it gets
    ReentrantCall instead of a deadlock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._owner: int | None = None
        self._entry: str | None = None

    @property
    def held(self) -> bool:
        return self._owner is not None

    @contextmanager
    def acquire(self, entry_point: str = "command"):
        if self._owner == threading.get_ident():
            raise ReentrantCall({"entry_point": [f"{entry_point} re-entered while {self._entry} is running"]})

        with self._lock:
            self._owner = threading.get_ident()
            self._entry = entry_point
            try:
                yield
            finally:
                self._owner = None
                self._entry = None

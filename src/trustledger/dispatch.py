"""Single entry point for state-changing commands.

Every mutating command is processed synchronously while the ledger guard is
held, so each one runs and commits as one serialized transition. Two
commands racing on the same purchase proof are therefore ordered, and the
second one sees the first one's committed usage record.
"""

from protean.utils.globals import current_domain

from trustledger.access.guards import ReentrancyGuard
from trustledger.utils.logging import bind_context, clear_context

ledger_guard = ReentrancyGuard()


def dispatch(command):
    """Process ``command`` under the ledger guard and return the handler's result."""
    command_name = type(command).__name__
    with ledger_guard.acquire(command_name):
        bind_context(command=command_name)
        try:
            return current_domain.process(command, asynchronous=False)
        finally:
            clear_context()

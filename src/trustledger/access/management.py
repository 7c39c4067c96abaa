"""Role and pause management — commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from trustledger.access.guards import require_role
from trustledger.access.policy import DEFAULT_POLICY_ID, AccessPolicy, Role
from trustledger.domain import trustledger, logger
from trustledger.errors import AlreadyExists


@trustledger.command(part_of="AccessPolicy")
class InitializeAccess:
    admin = Identifier(required=True)


@trustledger.command(part_of="AccessPolicy")
class GrantRole:
    caller = Identifier(required=True)
    role = String(required=True, max_length=50)
    account = Identifier(required=True)


@trustledger.command(part_of="AccessPolicy")
class RevokeRole:
    caller = Identifier(required=True)
    role = String(required=True, max_length=50)
    account = Identifier(required=True)


@trustledger.command(part_of="AccessPolicy")
class PauseLedger:
    caller = Identifier(required=True)


@trustledger.command(part_of="AccessPolicy")
class UnpauseLedger:
    caller = Identifier(required=True)


@trustledger.command_handler(part_of=AccessPolicy)
class AccessManagementHandler:
    @handle(InitializeAccess)
    def initialize_access(self, command):
        repo = current_domain.repository_for(AccessPolicy)
        try:
            repo.get(DEFAULT_POLICY_ID)
        except ObjectNotFoundError:
            policy = AccessPolicy.initialize(admin=command.admin)
            repo.add(policy)
            logger.info("Access policy initialized", admin=str(command.admin))
            return policy.policy_id

        raise AlreadyExists({"policy": ["Access policy is already initialized"]})

    @handle(GrantRole)
    def grant_role(self, command):
        require_role(Role.ADMIN, command.caller)

        repo = current_domain.repository_for(AccessPolicy)
        policy = repo.get(DEFAULT_POLICY_ID)
        policy.grant(command.role, command.account, granted_by=command.caller)
        repo.add(policy)

    @handle(RevokeRole)
    def revoke_role(self, command):
        require_role(Role.ADMIN, command.caller)

        repo = current_domain.repository_for(AccessPolicy)
        policy = repo.get(DEFAULT_POLICY_ID)
        policy.revoke(command.role, command.account, revoked_by=command.caller)
        repo.add(policy)

    @handle(PauseLedger)
    def pause_ledger(self, command):
        require_role(Role.ADMIN, command.caller)

        repo = current_domain.repository_for(AccessPolicy)
        policy = repo.get(DEFAULT_POLICY_ID)
        policy.pause(paused_by=command.caller)
        repo.add(policy)
        logger.warning("Ledger paused", caller=str(command.caller))

    @handle(UnpauseLedger)
    def unpause_ledger(self, command):
        require_role(Role.ADMIN, command.caller)

        repo = current_domain.repository_for(AccessPolicy)
        policy = repo.get(DEFAULT_POLICY_ID)
        policy.unpause(unpaused_by=command.caller)
        repo.add(policy)
        logger.info("Ledger unpaused", caller=str(command.caller))

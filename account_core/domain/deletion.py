"""
Account deletion - Admin-initiated removal that keeps every project owned.

The deleting admin takes over the target's projects. Reassignment and
removal are delegated to the repository as one transaction, so no
reader ever sees a project whose owner is gone or about to go.
"""

import logging
from dataclasses import dataclass

from .exceptions import NotAuthorized
from .models import Actor
from .policy import can_delete
from .ports import AccountRepository, DeletionResult

logger = logging.getLogger(__name__)


@dataclass
class AccountDeletionService:
    repository: AccountRepository

    def delete(self, actor: Actor | None, target_id: int) -> DeletionResult:
        """
        Delete an account, transferring its projects to the actor.

        Raises:
            NotAuthorized: If the actor is not an admin
            AccountNotFound: If no account has target_id
        """
        if actor is None or not can_delete(actor):
            raise NotAuthorized("delete")

        target = self.repository.find_by_id(target_id)

        if actor.id == target.id:
            logger.warning("Admin %s attempted to delete own account", actor.id)
            return DeletionResult.CANNOT_DELETE_SELF

        reassigned = self.repository.delete_reassigning_projects(target.id, new_owner_id=actor.id)
        logger.info(
            "Account %s deleted by %s, %d project(s) reassigned",
            target.id,
            actor.id,
            reassigned,
        )
        return DeletionResult.DELETED

"""
Activation workflow - Email activation gating for local accounts.

States (forward-only):
    UNACTIVATED -> ACTIVATED   (presented token matches stored digest)

Federated accounts are created already activated and never enter this
workflow. Only the digest of a token is stored; the plaintext token
exists just long enough to be embedded in the activation email.
Re-issuing a token overwrites the digest, so links from earlier emails
stop working.
"""

import logging
from dataclasses import dataclass

from .exceptions import AccountNotFound
from .models import Account
from .ports import AccountRepository, ActivationResult, CredentialHasher, EmailSender

logger = logging.getLogger(__name__)


@dataclass
class ActivationWorkflow:
    """Issues activation tokens and confirms them."""

    repository: AccountRepository
    email_sender: EmailSender
    hasher: CredentialHasher

    def issue_token(self, account: Account) -> tuple[str, str]:
        """
        Generate a fresh token and store its digest on the account.

        Returns:
            (plaintext token, digest)
        """
        token = self.hasher.new_token()
        digest = self.hasher.digest(token)
        self.repository.set_activation_digest(account.id, digest)
        account.activation_digest = digest
        return token, digest

    def regenerate_token(self, account: Account) -> tuple[str, str]:
        """Replace the account's token, invalidating any previously sent link."""
        logger.info("Regenerating activation token for account %s", account.id)
        return self.issue_token(account)

    def send(self, account: Account, token: str) -> bool:
        """
        Dispatch the activation email.

        The digest is already committed when this runs; a delivery
        failure is logged and reported, never rolled back.

        Returns:
            True if the sender accepted the message
        """
        try:
            self.email_sender.send_activation_email(account, token)
        except Exception:
            logger.exception("Failed to send activation email for account %s", account.id)
            return False
        return True

    def activate(self, account_id: int, token: str) -> ActivationResult:
        """
        Confirm an activation token.

        Unknown accounts report INVALID_TOKEN so the response does not
        reveal which ids exist.
        """
        try:
            account = self.repository.find_by_id(account_id)
        except AccountNotFound:
            return ActivationResult.INVALID_TOKEN

        if account.activated:
            return ActivationResult.ALREADY_ACTIVATED

        digest = account.activation_digest
        if digest is None or not self.hasher.verify(token, digest):
            logger.warning("Invalid activation token for account %s", account_id)
            return ActivationResult.INVALID_TOKEN

        # Conditional update: a concurrent regeneration or activation wins.
        if not self.repository.activate(account_id, digest):
            logger.warning("Activation of account %s lost a race", account_id)
            return ActivationResult.INVALID_TOKEN

        logger.info("Account %s activated", account_id)
        return ActivationResult.ACTIVATED

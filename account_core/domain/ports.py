"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, together with the result enums the domain
returns for business refusals. Adapters implement these protocols.
"""

from enum import Enum
from typing import Any, Protocol

from .models import Account, NewAccount, Page, Project


class ActivationResult(Enum):
    """
    Result of an activation attempt.

    Used by ActivationWorkflow.activate() to indicate success or the
    user-recoverable reason for failure.
    """

    ACTIVATED = "activated"
    INVALID_TOKEN = "invalid_token"
    ALREADY_ACTIVATED = "already_activated"


class RegistrationOutcome(Enum):
    """
    Outcome of a signup.

    - CREATED: New local account persisted, activation email dispatched
    - REISSUED: Existing unactivated account received a fresh token
    - ALREADY_REGISTERED: Email belongs to an activated account
    - VALIDATION_FAILED: Attributes rejected, nothing persisted
    """

    CREATED = "created"
    REISSUED = "reissued"
    ALREADY_REGISTERED = "already_registered"
    VALIDATION_FAILED = "validation_failed"


class DeletionResult(Enum):
    """Result of an admin-initiated account deletion."""

    DELETED = "deleted"
    CANNOT_DELETE_SELF = "cannot_delete_self"


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def find_by_id(self, account_id: int) -> Account:
        """
        Load an account by id.

        Raises:
            AccountNotFound: If no account has this id
        """
        ...

    def find_by_email(self, email: str) -> Account | None:
        """Load an account by normalized email, or None."""
        ...

    def find_by_provider_uid(self, provider: str, uid: str) -> Account | None:
        """Load the account linked to a federated identity, or None."""
        ...

    def list_page(self, page_token: str | None, page_size: int) -> Page[Account]:
        """
        List accounts ordered by id, starting after page_token.

        Returns:
            Page whose next_page_token is None on the last page
        """
        ...

    def list_projects(self, owner_id: int) -> list[Project]:
        """List the projects owned by an account."""
        ...

    def create(self, account: NewAccount) -> Account:
        """
        Persist a new account.

        Raises:
            EmailAlreadyTaken: If the email unique constraint is violated
        """
        ...

    def update(self, account_id: int, changes: dict[str, Any]) -> Account:
        """
        Apply column changes to an account and return the updated row.

        Raises:
            AccountNotFound: If no account has this id
            EmailAlreadyTaken: If the new email belongs to another account
        """
        ...

    def set_activation_digest(self, account_id: int, digest: str) -> None:
        """Overwrite the stored activation digest without touching updated_at."""
        ...

    def activate(self, account_id: int, expected_digest: str) -> bool:
        """
        Atomically mark an account activated and clear its digest.

        Only applies while the account is unactivated and still holds
        expected_digest.

        Returns:
            True if the account was activated by this call
        """
        ...

    def delete_reassigning_projects(self, account_id: int, new_owner_id: int) -> int:
        """
        Reassign every project of account_id to new_owner_id, then delete
        the account, as a single transaction.

        Returns:
            Number of projects reassigned
        """
        ...


class EmailSender(Protocol):
    """Port interface for activation email delivery."""

    def send_activation_email(self, account: Account, token: str) -> None:
        """
        Send the activation link for an account.

        Args:
            account: Recipient account
            token: Plaintext activation token to embed in the link
        """
        ...


class CredentialHasher(Protocol):
    """Port interface for one-way digests of passwords and tokens."""

    def digest(self, secret: str) -> str:
        """Compute a salted one-way digest of a secret."""
        ...

    def verify(self, secret: str, digest: str) -> bool:
        """Check a secret against a digest produced by digest()."""
        ...

    def new_token(self) -> str:
        """Generate a random URL-safe token."""
        ...

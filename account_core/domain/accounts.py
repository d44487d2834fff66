"""
Account service - Entry points for the request-handling layer.

Every operation takes the acting identity explicitly and checks the
authorization policy before touching state. Denials raise NotAuthorized
so nothing runs partially.
"""

import logging
from dataclasses import dataclass
from typing import Any

from .activation import ActivationWorkflow
from .deletion import AccountDeletionService
from .exceptions import EmailAlreadyTaken, NotAuthorized, ValidationFailed
from .models import Account, AccountDetail, AccountSummary, Actor, Page
from .policy import can_edit_or_view, can_view_list
from .ports import AccountRepository, ActivationResult, CredentialHasher, DeletionResult
from .registration import AccountRegistrar, RegistrationResult
from .validation import normalize_email, validate_account_attrs

logger = logging.getLogger(__name__)

# Attributes a user may change through update_account.
EDITABLE_FIELDS = ("name", "email", "password", "password_confirmation")


@dataclass
class AccountService:
    repository: AccountRepository
    registrar: AccountRegistrar
    activation: ActivationWorkflow
    deletion: AccountDeletionService
    hasher: CredentialHasher
    page_size: int = 30

    def list_accounts(self, actor: Actor | None, page_token: str | None = None) -> Page[AccountSummary]:
        if not can_view_list(actor):
            raise NotAuthorized("list")
        page = self.repository.list_page(page_token, self.page_size)
        return Page(
            items=[AccountSummary(id=a.id, name=a.name) for a in page.items],
            next_page_token=page.next_page_token,
        )

    def get_account(self, actor: Actor | None, account_id: int) -> AccountDetail:
        account = self._load_authorized(actor, account_id)
        projects = self.repository.list_projects(account.id)
        return AccountDetail.from_account(account, projects)

    def register_account(self, email: str, attrs: dict[str, Any]) -> RegistrationResult:
        return self.registrar.register(email, attrs)

    def edit_account(self, actor: Actor | None, account_id: int) -> AccountDetail:
        """
        Load the editable view of an account.

        The authorization check runs before anything is returned so that
        prefilled form values never expose another user's email.
        """
        return AccountDetail.from_account(self._load_authorized(actor, account_id))

    def update_account(self, actor: Actor | None, account_id: int, attrs: dict[str, Any]) -> AccountDetail:
        """
        Apply a self or admin edit of name/email/password.

        Raises:
            NotAuthorized: If the actor may not edit this account
            ValidationFailed: If any attribute is invalid
        """
        self._load_authorized(actor, account_id)

        attrs = {k: v for k, v in attrs.items() if k in EDITABLE_FIELDS}
        validate_account_attrs(attrs, creating=False)

        changes: dict[str, Any] = {}
        if "name" in attrs:
            changes["name"] = attrs["name"].strip()
        if "email" in attrs:
            changes["email"] = normalize_email(attrs["email"])
        if attrs.get("password"):
            changes["password_digest"] = self.hasher.digest(attrs["password"])

        try:
            updated = self.repository.update(account_id, changes)
        except EmailAlreadyTaken:
            raise ValidationFailed({"email": ["has already been taken"]}) from None

        logger.info("Account %s updated fields: %s", account_id, ", ".join(sorted(changes)))
        return AccountDetail.from_account(updated)

    def delete_account(self, actor: Actor | None, account_id: int) -> DeletionResult:
        return self.deletion.delete(actor, account_id)

    def activate_account(self, account_id: int, token: str) -> ActivationResult:
        return self.activation.activate(account_id, token)

    def authenticate(self, email: str, password: str) -> Actor | None:
        """
        Resolve credentials to an actor.

        Unknown emails, wrong passwords, passwordless (federated) and
        unactivated accounts all resolve to None.
        """
        account = self.repository.find_by_email(normalize_email(email))
        if account is None or account.password_digest is None:
            return None
        if not self.hasher.verify(password, account.password_digest):
            return None
        if not account.activated:
            return None
        return Actor.from_account(account)

    def _load_authorized(self, actor: Actor | None, account_id: int) -> Account:
        # Anonymous callers are denied before the lookup so ids are not probed.
        if actor is None:
            raise NotAuthorized("anonymous")
        account = self.repository.find_by_id(account_id)
        if not can_edit_or_view(actor, account):
            raise NotAuthorized(str(account_id))
        return account

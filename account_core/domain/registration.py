"""
Registration domain service - New signup vs. duplicate signup resolution.

Local signups (email + password):

    email unknown              -> create unactivated account, send token  (CREATED)
    email held, unactivated    -> regenerate token, resend                (REISSUED)
    email held, activated      -> nothing changes                         (ALREADY_REGISTERED)
    attributes invalid         -> nothing persisted, no token             (VALIDATION_FAILED)

At most one unactivated placeholder exists per email; retries reuse it.
Two concurrent signups for the same email are settled by the database
unique constraint: the loser re-reads the row and follows the
"email held" branches.

Federated signups (e.g. GitHub) create an already-activated account,
but only for providers listed as trusted.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from .activation import ActivationWorkflow
from .exceptions import EmailAlreadyTaken, UntrustedProvider, ValidationFailed
from .models import LOCAL_PROVIDER, Account, NewAccount
from .ports import AccountRepository, CredentialHasher, RegistrationOutcome
from .validation import normalize_email, validate_account_attrs

logger = logging.getLogger(__name__)


@dataclass
class RegistrationResult:
    outcome: RegistrationOutcome
    account: Account | None = None
    errors: dict[str, list[str]] = field(default_factory=dict)
    notification_sent: bool = False


@dataclass
class AccountRegistrar:
    """
    Domain service for account signup.

    Orchestrates the registration flow: email normalization, duplicate
    detection, password hashing, account persistence and activation
    token issuance.
    """

    repository: AccountRepository
    activation: ActivationWorkflow
    hasher: CredentialHasher
    trusted_providers: tuple[str, ...] = ("github",)

    def register(self, email: str, attrs: dict[str, Any]) -> RegistrationResult:
        """
        Register a local account.

        Args:
            email: Candidate email address (will be normalized)
            attrs: name, password and optional password_confirmation

        Returns:
            RegistrationResult describing what happened
        """
        normalized_email = normalize_email(email)

        existing = self.repository.find_by_email(normalized_email)
        if existing is not None:
            return self._resolve_existing(existing)

        try:
            validate_account_attrs({**attrs, "email": normalized_email}, creating=True)
        except ValidationFailed as e:
            return RegistrationResult(RegistrationOutcome.VALIDATION_FAILED, errors=e.errors)

        new_account = NewAccount(
            email=normalized_email,
            name=attrs["name"].strip(),
            provider=LOCAL_PROVIDER,
            password_digest=self.hasher.digest(attrs["password"]),
            activated=False,
        )
        try:
            account = self.repository.create(new_account)
        except EmailAlreadyTaken:
            # Lost a race with a concurrent signup for the same email.
            existing = self.repository.find_by_email(normalized_email)
            if existing is None:
                raise
            return self._resolve_existing(existing)

        logger.info("Created account %s", account.id)
        token, _ = self.activation.issue_token(account)
        sent = self.activation.send(account, token)
        return RegistrationResult(RegistrationOutcome.CREATED, account, notification_sent=sent)

    def register_federated(self, provider: str, uid: str, email: str, name: str) -> Account:
        """
        Find or create the account for a federated identity.

        Raises:
            UntrustedProvider: If the provider may not skip activation
            EmailAlreadyTaken: If the email belongs to a different account
        """
        if provider not in self.trusted_providers:
            raise UntrustedProvider(provider)

        linked = self.repository.find_by_provider_uid(provider, uid)
        if linked is not None:
            return linked

        normalized_email = normalize_email(email)
        validate_account_attrs({"name": name, "email": normalized_email, "password": None}, creating=False)

        try:
            account = self.repository.create(
                NewAccount(
                    email=normalized_email,
                    name=name.strip(),
                    provider=provider,
                    uid=uid,
                    activated=True,
                )
            )
        except EmailAlreadyTaken:
            # A concurrent login for the same identity may have won the insert.
            linked = self.repository.find_by_provider_uid(provider, uid)
            if linked is None:
                raise
            return linked

        logger.info("Created %s account %s", provider, account.id)
        return account

    def _resolve_existing(self, account: Account) -> RegistrationResult:
        if account.activated:
            return RegistrationResult(RegistrationOutcome.ALREADY_REGISTERED, account)

        token, _ = self.activation.regenerate_token(account)
        sent = self.activation.send(account, token)
        return RegistrationResult(RegistrationOutcome.REISSUED, account, notification_sent=sent)

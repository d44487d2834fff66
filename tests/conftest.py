"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- An in-memory AccountRepository honouring the port's contract
- A recording EmailSender
- Fast bcrypt hashing and wired domain services
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import pytest

from account_core.adapters.hashing.bcrypt_hasher import BcryptCredentialHasher
from account_core.domain.accounts import AccountService
from account_core.domain.activation import ActivationWorkflow
from account_core.domain.deletion import AccountDeletionService
from account_core.domain.exceptions import AccountNotFound, EmailAlreadyTaken
from account_core.domain.models import Account, NewAccount, Page, Project
from account_core.domain.registration import AccountRegistrar


class InMemoryAccountRepository:
    """AccountRepository backed by dicts. Returns copies, like a real database."""

    def __init__(self) -> None:
        self.accounts: dict[int, Account] = {}
        self.projects: dict[int, Project] = {}
        self._next_id = 1
        self._next_project_id = 1
        self.fail_delete = False

    # Test helpers

    def add_account(self, email: str, name: str = "User", **kwargs: Any) -> Account:
        account = Account(id=self._next_id, email=email, name=name, **kwargs)
        self._next_id += 1
        self.accounts[account.id] = account
        return copy.copy(account)

    def add_project(self, owner_id: int, name: str = "project") -> Project:
        project = Project(id=self._next_project_id, owner_id=owner_id, name=name)
        self._next_project_id += 1
        self.projects[project.id] = project
        return copy.copy(project)

    # AccountRepository

    def find_by_id(self, account_id: int) -> Account:
        if account_id not in self.accounts:
            raise AccountNotFound(str(account_id))
        return copy.copy(self.accounts[account_id])

    def find_by_email(self, email: str) -> Account | None:
        for account in self.accounts.values():
            if account.email == email:
                return copy.copy(account)
        return None

    def find_by_provider_uid(self, provider: str, uid: str) -> Account | None:
        for account in self.accounts.values():
            if account.provider == provider and account.uid == uid:
                return copy.copy(account)
        return None

    def list_page(self, page_token: str | None, page_size: int) -> Page[Account]:
        try:
            after_id = int(page_token) if page_token else 0
        except ValueError:
            after_id = 0
        ids = sorted(i for i in self.accounts if i > after_id)
        items = [copy.copy(self.accounts[i]) for i in ids[:page_size]]
        next_token = str(items[-1].id) if items and len(ids) > page_size else None
        return Page(items=items, next_page_token=next_token)

    def list_projects(self, owner_id: int) -> list[Project]:
        return [copy.copy(p) for p in self.projects.values() if p.owner_id == owner_id]

    def create(self, account: NewAccount) -> Account:
        if self.find_by_email(account.email) is not None:
            raise EmailAlreadyTaken(account.email)
        now = datetime.now(timezone.utc)
        return self.add_account(
            account.email,
            account.name,
            provider=account.provider,
            uid=account.uid,
            password_digest=account.password_digest,
            activated=account.activated,
            activated_at=now if account.activated else None,
            created_at=now,
            updated_at=now,
        )

    def update(self, account_id: int, changes: dict[str, Any]) -> Account:
        unknown = set(changes) - {"name", "email", "password_digest"}
        if unknown:
            raise ValueError(f"Cannot update columns: {', '.join(sorted(unknown))}")
        stored = self.accounts.get(account_id)
        if stored is None:
            raise AccountNotFound(str(account_id))
        email = changes.get("email")
        if email is not None:
            other = self.find_by_email(email)
            if other is not None and other.id != account_id:
                raise EmailAlreadyTaken(email)
        for key, value in changes.items():
            setattr(stored, key, value)
        stored.updated_at = datetime.now(timezone.utc)
        return copy.copy(stored)

    def set_activation_digest(self, account_id: int, digest: str) -> None:
        if account_id not in self.accounts:
            raise AccountNotFound(str(account_id))
        self.accounts[account_id].activation_digest = digest

    def activate(self, account_id: int, expected_digest: str) -> bool:
        stored = self.accounts.get(account_id)
        if stored is None or stored.activated or stored.activation_digest != expected_digest:
            return False
        stored.activated = True
        stored.activated_at = datetime.now(timezone.utc)
        stored.activation_digest = None
        return True

    def delete_reassigning_projects(self, account_id: int, new_owner_id: int) -> int:
        if account_id not in self.accounts:
            raise AccountNotFound(str(account_id))
        owned = [p for p in self.projects.values() if p.owner_id == account_id]
        if self.fail_delete:
            raise RuntimeError("database unavailable")
        # Applied together, mirroring a single transaction.
        for project in owned:
            project.owner_id = new_owner_id
        del self.accounts[account_id]
        return len(owned)


@dataclass
class RecordingEmailSender:
    """EmailSender that records (account_id, email, token) tuples."""

    sent: list[tuple[int, str, str]] = field(default_factory=list)
    fail: bool = False

    def send_activation_email(self, account: Account, token: str) -> None:
        if self.fail:
            raise ConnectionError("SMTP unavailable")
        self.sent.append((account.id, account.email, token))

    @property
    def last_token(self) -> str:
        return self.sent[-1][2]


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def hasher() -> BcryptCredentialHasher:
    # Lowest bcrypt cost keeps the suite fast.
    return BcryptCredentialHasher(cost=4)


@pytest.fixture
def activation(
    repository: InMemoryAccountRepository,
    sender: RecordingEmailSender,
    hasher: BcryptCredentialHasher,
) -> ActivationWorkflow:
    return ActivationWorkflow(repository=repository, email_sender=sender, hasher=hasher)


@pytest.fixture
def registrar(
    repository: InMemoryAccountRepository,
    activation: ActivationWorkflow,
    hasher: BcryptCredentialHasher,
) -> AccountRegistrar:
    return AccountRegistrar(repository=repository, activation=activation, hasher=hasher)


@pytest.fixture
def deletion(repository: InMemoryAccountRepository) -> AccountDeletionService:
    return AccountDeletionService(repository=repository)


@pytest.fixture
def service(
    repository: InMemoryAccountRepository,
    registrar: AccountRegistrar,
    activation: ActivationWorkflow,
    deletion: AccountDeletionService,
    hasher: BcryptCredentialHasher,
) -> AccountService:
    return AccountService(
        repository=repository,
        registrar=registrar,
        activation=activation,
        deletion=deletion,
        hasher=hasher,
        page_size=2,
    )

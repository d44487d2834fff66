"""
Domain models - Accounts, projects and the read models built from them.

Plain dataclasses with no framework imports. Secret material
(password_digest, activation_digest) lives only on Account; the
read models never carry it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, TypeVar

T = TypeVar("T")

LOCAL_PROVIDER = "local"


@dataclass
class Account:
    """A user account as stored by the repository."""

    id: int
    email: str
    name: str
    provider: str = LOCAL_PROVIDER
    uid: str | None = None
    password_digest: str | None = None
    activated: bool = False
    activated_at: datetime | None = None
    activation_digest: str | None = None
    admin: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def federated(self) -> bool:
        return self.provider != LOCAL_PROVIDER


@dataclass
class NewAccount:
    """Attributes for an account that has not been persisted yet."""

    email: str
    name: str
    provider: str = LOCAL_PROVIDER
    uid: str | None = None
    password_digest: str | None = None
    activated: bool = False


@dataclass
class Project:
    """A resource owned by exactly one account."""

    id: int
    owner_id: int
    name: str


@dataclass(frozen=True)
class Actor:
    """The authenticated identity performing an operation."""

    id: int
    admin: bool = False

    @classmethod
    def from_account(cls, account: Account) -> "Actor":
        return cls(id=account.id, admin=account.admin)


@dataclass
class AccountSummary:
    id: int
    name: str


@dataclass
class AccountDetail:
    """Public view of an account. Never includes credential digests."""

    id: int
    email: str
    name: str
    provider: str
    activated: bool
    admin: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    projects: list[Project] = field(default_factory=list)

    @classmethod
    def from_account(cls, account: Account, projects: list[Project] | None = None) -> "AccountDetail":
        return cls(
            id=account.id,
            email=account.email,
            name=account.name,
            provider=account.provider,
            activated=account.activated,
            admin=account.admin,
            created_at=account.created_at,
            updated_at=account.updated_at,
            projects=list(projects or []),
        )


@dataclass
class Page(Generic[T]):
    """One page of a keyset-paginated listing."""

    items: list[T]
    next_page_token: str | None = None

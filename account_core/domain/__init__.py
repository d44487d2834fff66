"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account lifecycle rules: authorization,
activation gating, signup resolution and ownership-preserving deletion.
It defines its own port interfaces for infrastructure abstraction.
"""

from .accounts import AccountService
from .activation import ActivationWorkflow
from .deletion import AccountDeletionService
from .exceptions import (
    AccountError,
    AccountNotFound,
    EmailAlreadyTaken,
    NotAuthorized,
    UntrustedProvider,
    ValidationFailed,
)
from .models import Account, AccountDetail, AccountSummary, Actor, NewAccount, Page, Project
from .ports import (
    AccountRepository,
    ActivationResult,
    CredentialHasher,
    DeletionResult,
    EmailSender,
    RegistrationOutcome,
)
from .registration import AccountRegistrar, RegistrationResult

__all__ = [
    "Account",
    "AccountDeletionService",
    "AccountDetail",
    "AccountError",
    "AccountNotFound",
    "AccountRegistrar",
    "AccountRepository",
    "AccountService",
    "AccountSummary",
    "ActivationResult",
    "ActivationWorkflow",
    "Actor",
    "CredentialHasher",
    "DeletionResult",
    "EmailAlreadyTaken",
    "EmailSender",
    "NewAccount",
    "NotAuthorized",
    "Page",
    "Project",
    "RegistrationOutcome",
    "RegistrationResult",
    "UntrustedProvider",
    "ValidationFailed",
]

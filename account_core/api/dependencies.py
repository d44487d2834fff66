"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from functools import lru_cache

from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from psycopg_pool import ConnectionPool

from account_core.adapters.hashing.bcrypt_hasher import BcryptCredentialHasher
from account_core.adapters.repository.postgres import PostgresAccountRepository
from account_core.adapters.smtp.console import ConsoleEmailSender
from account_core.config.settings import get_settings
from account_core.domain.accounts import AccountService
from account_core.domain.activation import ActivationWorkflow
from account_core.domain.deletion import AccountDeletionService
from account_core.domain.models import Actor
from account_core.domain.registration import AccountRegistrar


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresAccountRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresAccountRepository(pool)


@lru_cache
def get_email_sender() -> ConsoleEmailSender:
    """Get console email sender (singleton)."""
    return ConsoleEmailSender(base_url=get_settings().base_url)


@lru_cache
def get_hasher() -> BcryptCredentialHasher:
    """Get bcrypt hasher configured from settings (singleton)."""
    settings = get_settings()
    return BcryptCredentialHasher(
        cost=settings.bcrypt_cost,
        token_bytes=settings.activation_token_bytes,
    )


def get_account_service(request: Request) -> AccountService:
    """
    Create the account service with injected dependencies.

    Wires the repository, email sender and hasher into each domain service.
    """
    settings = get_settings()
    repository = get_repository(request)
    hasher = get_hasher()
    activation = ActivationWorkflow(
        repository=repository,
        email_sender=get_email_sender(),
        hasher=hasher,
    )
    registrar = AccountRegistrar(
        repository=repository,
        activation=activation,
        hasher=hasher,
        trusted_providers=tuple(settings.trusted_providers),
    )
    return AccountService(
        repository=repository,
        registrar=registrar,
        activation=activation,
        deletion=AccountDeletionService(repository=repository),
        hasher=hasher,
        page_size=settings.page_size,
    )


# Credentials are optional: routes decide what an anonymous actor may do.
http_basic = HTTPBasic(auto_error=False)


def get_actor(
    credentials: HTTPBasicCredentials | None = Depends(http_basic),
    service: AccountService = Depends(get_account_service),
) -> Actor | None:
    """
    Resolve the acting identity from HTTP BASIC AUTH.

    Returns None for missing or invalid credentials; the authorization
    policy then treats the request as anonymous.
    """
    if credentials is None:
        return None
    return service.authenticate(credentials.username, credentials.password)

"""
Domain exceptions - Semantic error types for account management.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
"""


class AccountError(Exception):
    """Base class for account domain errors."""

    pass


class NotAuthorized(AccountError):
    """The actor may not perform the requested operation."""

    pass


class AccountNotFound(AccountError):
    """No account exists for the given id."""

    pass


class EmailAlreadyTaken(AccountError):
    """Email is already held by another account (unique constraint)."""

    pass


class UntrustedProvider(AccountError):
    """Federated provider is not trusted to skip email activation."""

    pass


class ValidationFailed(AccountError):
    """
    Account attributes failed validation.

    Carries field-level messages so callers can render them back
    next to the offending inputs.
    """

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__(", ".join(sorted(errors)))
        self.errors = errors

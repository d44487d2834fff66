"""
Authorization policy - Who may act on which account.

Pure predicates. An absent actor (anonymous request) is always denied;
callers translate False into a deny, never into an internal error.
"""

from .models import Account, Actor


def can_view_list(actor: Actor | None) -> bool:
    """Only admins may list accounts."""
    return actor is not None and actor.admin


def can_delete(actor: Actor | None) -> bool:
    """Only admins may delete accounts."""
    return actor is not None and actor.admin


def can_edit_or_view(actor: Actor | None, target: Account) -> bool:
    """An account may be viewed or edited by its owner or by an admin."""
    if actor is None:
        return False
    return actor.id == target.id or actor.admin

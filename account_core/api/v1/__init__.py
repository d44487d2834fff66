"""
API v1 package.

Contains versioned API routes for the account management API.
"""

from account_core.api.v1.routes import router

__all__ = ["router"]

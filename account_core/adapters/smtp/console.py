"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging activation links for development use.
"""

import logging
from urllib.parse import urlencode

from account_core.domain.models import Account

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, base_url: str = "http://localhost:8000") -> None:
        self._base_url = base_url.rstrip("/")

    def activation_link(self, account: Account, token: str) -> str:
        query = urlencode({"token": token})
        return f"{self._base_url}/v1/accounts/{account.id}/activate?{query}"

    def send_activation_email(self, account: Account, token: str) -> None:
        """
        Log the activation link (simulates email delivery).

        Args:
            account: Recipient account
            token: Plaintext activation token
        """
        logger.info(
            "[ACTIVATION] Email: %s Link: %s",
            account.email,
            self.activation_link(account, token),
        )

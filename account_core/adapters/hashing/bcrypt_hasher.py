"""
bcrypt credential hasher - Implements CredentialHasher protocol.

Digests both passwords and activation tokens with bcrypt, so a stolen
digest cannot be replayed as an activation link.

Input longer than 72 bytes is never truncated: bcrypt would silently
ignore the tail, making every password with the same 72-byte prefix
verify against the same digest.
"""

import secrets

import bcrypt

BCRYPT_MAX_BYTES = 72


class BcryptCredentialHasher:
    """
    Implements CredentialHasher protocol via bcrypt.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, cost: int = 10, token_bytes: int = 32) -> None:
        """
        Args:
            cost: bcrypt work factor
            token_bytes: Entropy of generated tokens
        """
        self._cost = cost
        self._token_bytes = token_bytes

    def digest(self, secret: str) -> str:
        """
        Raises:
            ValueError: If the secret exceeds 72 bytes
        """
        encoded = secret.encode()
        if len(encoded) > BCRYPT_MAX_BYTES:
            raise ValueError(f"secret exceeds {BCRYPT_MAX_BYTES} bytes")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._cost)).decode()

    def verify(self, secret: str, digest: str) -> bool:
        """Constant-time check; an over-long secret or malformed digest never verifies."""
        encoded = secret.encode()
        if len(encoded) > BCRYPT_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, digest.encode())
        except ValueError:
            return False

    def new_token(self) -> str:
        return secrets.token_urlsafe(self._token_bytes)

"""Password hashing with bcrypt."""

import bcrypt

from src.exceptions import HashingError

BCRYPT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


class CredentialHasher:
    """One-way password hashing and constant-time verification."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt with a fresh salt.

        Args:
            password: Plain-text password to hash

        Returns:
            Bcrypt hash string (salt and cost embedded)

        Raises:
            HashingError: If bcrypt fails internally
        """
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        except (ValueError, TypeError) as e:
            raise HashingError(f"bcrypt hashing failed: {e}") from e
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a bcrypt hash.

        A malformed hash or oversized input counts as a mismatch.

        Args:
            password: Plain-text password to check
            password_hash: Bcrypt hash to verify against

        Returns:
            True if the password matches, False otherwise
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            return False

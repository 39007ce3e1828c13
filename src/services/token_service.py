"""Signed access tokens (JWT)."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import structlog

from src.exceptions import ConfigurationError, TokenExpiredError, TokenInvalidError

logger = structlog.get_logger(__name__)

JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60


class TokenIssuer:
    """Issues and verifies stateless tokens carrying a user id.

    The signing secret is fixed at construction; the issuer is built once
    at application startup and shared read-only afterwards.
    """

    def __init__(
        self,
        secret: str,
        expires_in: timedelta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    ):
        if not secret:
            raise ConfigurationError("JWT_SECRET is not set; cannot sign tokens")
        self._secret = secret
        self.expires_in = expires_in

    def issue(self, user_id: str, now: Optional[datetime] = None) -> str:
        """Create a signed token for ``user_id``.

        Args:
            user_id: Identifier placed in the ``id`` claim
            now: Issuance instant, defaults to the current UTC time

        Returns:
            Encoded JWT string
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "id": user_id,
            "iat": issued_at,
            "exp": issued_at + self.expires_in,
        }
        token = jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)
        logger.debug(
            "access_token_issued",
            user_id=user_id,
            expires_minutes=int(self.expires_in.total_seconds() // 60),
        )
        return token

    def verify(self, token: str) -> str:
        """Check signature and expiry and return the embedded user id.

        Raises:
            TokenExpiredError: If the token is past its expiry
            TokenInvalidError: If the signature or payload is bad
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp", "id"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError()
        except jwt.InvalidTokenError as e:
            logger.info("access_token_rejected", reason=str(e))
            raise TokenInvalidError()

        user_id = payload.get("id")
        if not isinstance(user_id, str) or not user_id:
            raise TokenInvalidError()
        return user_id

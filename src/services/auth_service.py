"""Authentication service: registration and login."""

from fastapi.concurrency import run_in_threadpool
import structlog

from src.exceptions import (
    BadRequestError,
    DuplicateUserError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from src.models.user import User
from src.services.hashing_service import MAX_PASSWORD_BYTES, CredentialHasher
from src.services.token_service import TokenIssuer
from src.services.user_service import UserDirectory

logger = structlog.get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Orchestrates the user directory, password hasher and token issuer.

    Each request path does exactly one directory read; ``register`` writes
    once on success and never on failure, ``login`` never writes.
    """

    def __init__(
        self,
        users: UserDirectory,
        hasher: CredentialHasher,
        tokens: TokenIssuer,
    ):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        picture_path: str = "",
    ) -> User:
        """Create a new user with a hashed password.

        Args:
            first_name: Given name
            last_name: Family name
            email: Login email (normalized before use)
            password: Plain-text password (hashed, never stored)
            picture_path: Asset filename of the profile picture

        Returns:
            The persisted User

        Raises:
            BadRequestError: If the password exceeds bcrypt's input limit
            DuplicateUserError: If the email is already registered
        """
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise BadRequestError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            )

        email = normalize_email(email)

        if await self.users.exists(email):
            logger.warning("registration_rejected_duplicate")
            raise DuplicateUserError()

        password_hash = await run_in_threadpool(self.hasher.hash, password)

        user = await self.users.create(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash,
            picture_path=picture_path,
        )
        logger.info("user_registered", user_id=user.id)
        return user

    async def login(self, email: str, password: str) -> tuple[str, User]:
        """Check credentials and issue an access token.

        Returns:
            Tuple of (token, user)

        Raises:
            UserNotFoundError: If no user has this email
            InvalidCredentialsError: If the password does not match
        """
        user = await self.users.get_by_email(normalize_email(email))
        if user is None:
            logger.warning("login_unknown_email")
            raise UserNotFoundError()

        matches = await run_in_threadpool(self.hasher.verify, password, user.password)
        if not matches:
            logger.warning("login_invalid_password", user_id=user.id)
            raise InvalidCredentialsError()

        token = self.tokens.issue(user.id)
        logger.info("user_logged_in", user_id=user.id)
        return token, user

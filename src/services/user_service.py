"""User directory backed by the ``users`` collection."""

from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError

from src.exceptions import DuplicateUserError
from src.models.user import User

logger = structlog.get_logger(__name__)

USERS_COLLECTION = "users"


class UserDirectory:
    """Lookup and creation of user records keyed by email."""

    def __init__(self, collection: Any):
        self.collection = collection

    async def exists(self, email: str) -> bool:
        """Check whether a user with this email is already registered."""
        document = await self.collection.find_one({"email": email}, {"_id": 1})
        return document is not None

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user, including its password hash, by email.

        Args:
            email: Normalized email to look up

        Returns:
            User or None if not found
        """
        document = await self.collection.find_one({"email": email})
        if document is None:
            return None
        return User.from_document(document)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by id; malformed ids are treated as unknown."""
        try:
            object_id = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None

        document = await self.collection.find_one({"_id": object_id})
        if document is None:
            return None
        return User.from_document(document)

    async def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        picture_path: str = "",
    ) -> User:
        """Insert a new user record with an empty friends list.

        Args:
            first_name: Given name
            last_name: Family name
            email: Normalized, unique email
            password_hash: Bcrypt hash (never plaintext)
            picture_path: Asset filename of the profile picture

        Returns:
            The persisted User with its assigned id

        Raises:
            DuplicateUserError: If the unique email index rejects the insert
        """
        now = datetime.now(timezone.utc)
        document = {
            "_id": ObjectId(),
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password_hash,
            "picturePath": picture_path,
            "friends": [],
            "createdAt": now,
            "updatedAt": now,
        }

        try:
            await self.collection.insert_one(document)
        except DuplicateKeyError:
            logger.warning("user_insert_duplicate_email")
            raise DuplicateUserError()

        logger.info("user_created", user_id=str(document["_id"]))
        return User.from_document(document)

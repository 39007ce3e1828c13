"""Post creation and feed listing."""

from datetime import datetime, timezone
from typing import Any

import structlog
from bson import ObjectId

from src.exceptions import UserNotFoundError
from src.models.post import Post
from src.services.user_service import UserDirectory

logger = structlog.get_logger(__name__)

POSTS_COLLECTION = "posts"


class PostService:
    """Service for creating posts in the ``posts`` collection."""

    def __init__(self, collection: Any, users: UserDirectory):
        self.collection = collection
        self.users = users

    async def create_post(
        self,
        user_id: str,
        description: str = "",
        picture_path: str = "",
    ) -> list[Post]:
        """Create a post authored by ``user_id`` and return the updated feed.

        The author's name and profile picture are copied onto the post.

        Raises:
            UserNotFoundError: If the author no longer exists
        """
        author = await self.users.get_by_id(user_id)
        if author is None:
            raise UserNotFoundError()

        now = datetime.now(timezone.utc)
        document = {
            "_id": ObjectId(),
            "userId": author.id,
            "firstName": author.first_name,
            "lastName": author.last_name,
            "description": description,
            "picturePath": picture_path,
            "userPicturePath": author.picture_path,
            "likes": {},
            "comments": [],
            "createdAt": now,
            "updatedAt": now,
        }
        await self.collection.insert_one(document)
        logger.info("post_created", post_id=str(document["_id"]), user_id=author.id)

        return await self.list_posts()

    async def list_posts(self) -> list[Post]:
        """All posts, newest first."""
        cursor = self.collection.find({}).sort("createdAt", -1)
        documents = await cursor.to_list(length=None)
        return [Post.from_document(d) for d in documents]

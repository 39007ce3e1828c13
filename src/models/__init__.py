"""Models package exports."""

from src.models.auth import LoginRequest, LoginResponse
from src.models.post import Post
from src.models.user import User, UserPublic

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "Post",
    "User",
    "UserPublic",
]

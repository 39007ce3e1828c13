"""Services package exports."""

from src.services.auth_service import AuthService
from src.services.hashing_service import CredentialHasher
from src.services.logging_service import configure_logging, get_logger
from src.services.post_service import PostService
from src.services.token_service import TokenIssuer
from src.services.upload_service import AssetStore
from src.services.user_service import UserDirectory

__all__ = [
    "AssetStore",
    "AuthService",
    "CredentialHasher",
    "PostService",
    "TokenIssuer",
    "UserDirectory",
    "configure_logging",
    "get_logger",
]

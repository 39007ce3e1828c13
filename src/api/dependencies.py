"""FastAPI dependencies for services, authentication and uploads."""

from typing import Annotated, Optional

from fastapi import Depends, File, Request, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.exceptions import AccessDeniedError
from src.services.auth_service import AuthService
from src.services.post_service import PostService

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_post_service(request: Request) -> PostService:
    return request.app.state.post_service


async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Extract and verify the user id from a Bearer token.

    Args:
        credentials: Bearer token from the Authorization header

    Returns:
        The user id carried by the token

    Raises:
        AccessDeniedError: If no Bearer token was sent (403)
        TokenExpiredError: If the token is past its expiry (401)
        TokenInvalidError: If the token fails verification (401)
    """
    if credentials is None:
        raise AccessDeniedError()

    return request.app.state.token_issuer.verify(credentials.credentials)


async def save_picture(
    request: Request,
    picture: Annotated[Optional[UploadFile], File()] = None,
) -> Optional[str]:
    """Store the optional ``picture`` upload before the route handler runs.

    Returns:
        The stored filename, or None if no file was sent
    """
    if picture is None or not picture.filename:
        return None

    return await request.app.state.asset_store.save(picture)

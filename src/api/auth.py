"""Authentication API endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Form, status

from src.api.dependencies import get_auth_service, save_picture
from src.models.auth import LoginRequest, LoginResponse
from src.models.user import UserPublic
from src.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=UserPublic,
)
async def register(
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    uploaded_picture: Annotated[Optional[str], Depends(save_picture)],
    first_name: Annotated[str, Form(alias="firstName", min_length=1)],
    last_name: Annotated[str, Form(alias="lastName", min_length=1)],
    email: Annotated[str, Form(min_length=3, max_length=255)],
    password: Annotated[str, Form(min_length=1)],
    picture_path: Annotated[str, Form(alias="picturePath")] = "",
) -> UserPublic:
    """Register a new user from a multipart form.

    An optional ``picture`` file is stored in the asset directory first; the
    ``picturePath`` field wins over the uploaded filename when both are sent.

    Raises:
        DuplicateUserError 400: If the email is already registered
    """
    user = await auth_service.register(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=password,
        picture_path=picture_path or uploaded_picture or "",
    )
    # The stored password hash is never returned
    return user.to_public()


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> LoginResponse:
    """Login with email and password.

    Returns:
        LoginResponse with an access token and the public user

    Raises:
        UserNotFoundError 404: If no user has this email
        InvalidCredentialsError 400: If the password is wrong
    """
    token, user = await auth_service.login(request.email, request.password)
    return LoginResponse(token=token, user=user.to_public())

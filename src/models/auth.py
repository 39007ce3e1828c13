"""Auth request and response models with validation."""

from pydantic import BaseModel, Field, field_validator

from src.models.user import UserPublic


class LoginRequest(BaseModel):
    """Login credentials.

    Attributes:
        email: Email the account was registered with
        password: Plain-text password
    """

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Emails are matched case-insensitively."""
        return v.strip().lower()


class LoginResponse(BaseModel):
    """Successful login response.

    Attributes:
        token: Signed access token, valid for one hour
        user: Public view of the authenticated user
    """

    token: str
    user: UserPublic

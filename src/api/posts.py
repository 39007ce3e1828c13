"""Post API endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Form, status

from src.api.dependencies import get_current_user_id, get_post_service, save_picture
from src.models.post import Post
from src.services.post_service import PostService

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=list[Post])
async def create_post(
    user_id: Annotated[str, Depends(get_current_user_id)],
    uploaded_picture: Annotated[Optional[str], Depends(save_picture)],
    post_service: Annotated[PostService, Depends(get_post_service)],
    description: Annotated[str, Form()] = "",
    picture_path: Annotated[str, Form(alias="picturePath")] = "",
) -> list[Post]:
    """Create a post as the token's user and return the whole feed.

    The token is checked before the ``picture`` upload is stored.
    """
    return await post_service.create_post(
        user_id=user_id,
        description=description,
        picture_path=picture_path or uploaded_picture or "",
    )

"""Post models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Post(BaseModel):
    """A post in the feed, denormalized with its author's name and picture."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(alias="_id")
    user_id: str
    first_name: str
    last_name: str
    description: str = ""
    picture_path: str = ""
    user_picture_path: str = ""
    likes: dict[str, bool] = Field(default_factory=dict)
    comments: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Post":
        data = dict(document)
        data["_id"] = str(data["_id"])
        return cls.model_validate(data)

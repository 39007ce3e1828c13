"""User models for the document store and API responses."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UserPublic(BaseModel):
    """A registered user as returned to clients (no password hash).

    Field names are camelCase on the wire and in the store, with the
    store's ``_id`` exposed as-is.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(alias="_id")
    first_name: str
    last_name: str
    email: str
    picture_path: str = ""
    friends: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class User(UserPublic):
    """A stored user record, including the bcrypt password hash."""

    password: str = Field(repr=False)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "User":
        """Build a User from a raw store document (ObjectId ``_id``)."""
        data = dict(document)
        data["_id"] = str(data["_id"])
        data["friends"] = [str(f) for f in data.get("friends", [])]
        return cls.model_validate(data)

    def to_public(self) -> UserPublic:
        """Strip the password hash for outward responses."""
        return UserPublic.model_validate(self.model_dump(exclude={"password"}))

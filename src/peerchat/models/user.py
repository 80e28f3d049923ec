"""
User and auth models: the `/auth/*` response bodies.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: str = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    username: str = ""
    email: str = ""
    profile_photo: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("profilePhoto", "profile_photo"),
        serialization_alias="profilePhoto",
    )


class AuthState(BaseModel):
    """Login / register response: bearer token plus the local user."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    token: str
    user: User

    def with_profile_photo(self, profile_photo: Optional[str]) -> "AuthState":
        return self.model_copy(update={"user": self.user.model_copy(update={"profile_photo": profile_photo})})

"""User payloads returned by the userinfo and users endpoints."""

from enum import IntEnum
from typing import Union

from pydantic import Field

from goauth.models.base import GoAuthBaseModel


class UserStatus(IntEnum):
    """Account status of a user."""

    DISABLED = 0
    ACTIVE = 1


class UserInfo(GoAuthBaseModel):
    """Claims about the user owning an access token (``/oauth/userinfo``)."""

    sub: str = Field(..., description="Unique user identifier")
    nickname: str = Field(default="")
    picture: str = Field(default="", description="Avatar URL")
    updated_at: int = Field(default=0, description="Last profile update (Unix seconds)")


class UserDetail(GoAuthBaseModel):
    """Full user record (``/users/{id}`` and ``/users/sub/{sub}``).

    Attributes:
        id: Primary key, numeric or opaque depending on the backend version.
        subject: Public user identifier; prefer it over ``id``.
        status: Account status.
        role: Role name, e.g. "user" or "admin".
        created_at: Creation time (ISO 8601).
        updated_at: Last update time (ISO 8601).
    """

    id: Union[int, str]
    subject: str = Field(default="")
    username: str = Field(default="")
    nickname: str = Field(default="")
    avatar: str = Field(default="")
    status: UserStatus = Field(default=UserStatus.ACTIVE)
    role: str = Field(default="")
    created_at: str = Field(default="")
    updated_at: str = Field(default="")

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

"""Circle and member models.

Field names follow the backend's ``CircleResponse``/``MemberResponse``
payloads (camelCase on the wire, snake_case in Python).
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import Field, field_validator

from carcircle.models._base import CircleBaseModel, OpenStrEnum, check_optional_url


class CirclePrivacy(OpenStrEnum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"
    INVITE_ONLY = "INVITE_ONLY"


class CircleType(OpenStrEnum):
    FAMILY = "FAMILY"
    FRIENDS = "FRIENDS"
    WORK = "WORK"
    HOBBY = "HOBBY"
    COMMUNITY = "COMMUNITY"
    OTHER = "OTHER"


class MemberRole(OpenStrEnum):
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"
    VIEWER = "VIEWER"


# Known values resolve to members; anything else stays the backend's string.
OpenCirclePrivacy = Annotated[CirclePrivacy | str, Field(union_mode="left_to_right")]
OpenCircleType = Annotated[CircleType | str, Field(union_mode="left_to_right")]
OpenMemberRole = Annotated[MemberRole | str, Field(union_mode="left_to_right")]


class Member(CircleBaseModel):
    """A user belonging to exactly one circle."""

    user_id: str = Field(min_length=1)
    """Backend user identifier, unique within the circle."""
    user_name: str = Field(min_length=1)
    user_avatar: str | None = None
    """Avatar URL, or empty string."""
    nickname: str | None = None
    role: OpenMemberRole | None = None
    """``ADMIN``/``MEMBER``/``VIEWER`` or a backend-introduced role string."""

    @field_validator("user_avatar")
    @classmethod
    def _check_avatar(cls, value: str | None) -> str | None:
        return check_optional_url(value)


def _check_unique_members(members: list[Member] | None) -> list[Member] | None:
    if not members:
        return members
    seen: set[str] = set()
    for member in members:
        if member.user_id in seen:
            raise ValueError(f"duplicate member userId {member.user_id}")
        seen.add(member.user_id)
    return members


class _CircleFields(CircleBaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    circle_type: OpenCircleType | None = None
    privacy: OpenCirclePrivacy | None = None
    avatar_url: str | None = None
    settings: dict[str, Any] | None = None

    @field_validator("avatar_url")
    @classmethod
    def _check_avatar_url(cls, value: str | None) -> str | None:
        return check_optional_url(value)


class CircleCreate(_CircleFields):
    """Payload for ``POST /circles``; id, invite code and timestamp are assigned."""

    members: list[Member] | None = None

    @field_validator("members")
    @classmethod
    def _unique_members(cls, value: list[Member] | None) -> list[Member] | None:
        return _check_unique_members(value)


class Circle(_CircleFields):
    """A circle as owned by the remote backend (or its local shadow)."""

    id: str = Field(min_length=1)
    invite_code: str | None = None
    members: list[Member] = Field(default_factory=list)
    """Ordered by join order."""
    created_at: str | None = None

    @field_validator("members")
    @classmethod
    def _unique_members(cls, value: list[Member]) -> list[Member]:
        _check_unique_members(value)
        return value

    def with_member(self, member: Member) -> Circle:
        """Return a copy with *member* appended, replacing any same-user entry."""
        members = [m for m in self.members if m.user_id != member.user_id]
        members.append(member)
        return self.model_copy(update={"members": members})

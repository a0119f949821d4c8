"""Identifier, invite-code and demo-data generators for locally made circles."""

from __future__ import annotations

import secrets
import string
import uuid

from carcircle.models.circle import Member, MemberRole

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits
INVITE_CODE_LENGTH = 8


def new_circle_id() -> str:
    """UUID4 string, the same shape the backend assigns."""
    return str(uuid.uuid4())


def generate_invite_code() -> str:
    """8 characters of ``A-Z0-9``, e.g. ``AB12CD34``."""
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))


def is_valid_invite_code(code: str | None) -> bool:
    """Check the invite code format; dashes (``AB12-CD34``) are ignored."""
    if not code:
        return False
    normalized = code.replace("-", "")
    if len(normalized) != INVITE_CODE_LENGTH:
        return False
    return all(ch in INVITE_CODE_ALPHABET for ch in normalized)


def _token(length: int) -> str:
    return secrets.token_hex(length)[:length]


def random_circle_name(prefix: str = "Circle") -> str:
    return f"{prefix}-{_token(6)}"


def random_member() -> Member:
    return Member(
        user_id=str(uuid.uuid4()),
        user_name=f"user_{_token(8)}",
        user_avatar=f"https://picsum.photos/seed/{_token(6)}/100/100",
        nickname=f"nick_{_token(4)}",
        role=secrets.choice(list(MemberRole)),
    )

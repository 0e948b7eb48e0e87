"""ID helpers."""

from __future__ import annotations

import uuid

MAX_SESSION_ID_LENGTH = 200


def new_session_id() -> str:
    """Generate a random UUID4 session identifier."""
    return str(uuid.uuid4())


def is_valid_session_id(value: object) -> bool:
    return isinstance(value, str) and 0 < len(value.strip()) <= MAX_SESSION_ID_LENGTH

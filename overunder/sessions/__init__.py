"""Chat session lifecycle."""

from .session_manager import (
    DEFAULT_SESSION_TITLE,
    WELCOME_MESSAGE,
    SessionManager,
    derive_title,
    new_id,
)

__all__ = [
    "SessionManager",
    "derive_title",
    "new_id",
    "DEFAULT_SESSION_TITLE",
    "WELCOME_MESSAGE",
]

"""Stub login for the single demo account.

There is no credential check: ``login`` always yields the demo user and
records it as the current user in the store, ``logout`` forgets it.
"""

import json
from typing import Optional

from pydantic import ValidationError

from overunder.models.chat import User
from overunder.storage.kv_store import KeyValueStore
from overunder.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_USER_KEY = "overunder_user"

DEMO_USER = User(
    id="user_12345",
    name="Demo User",
    email="demo.user@gmail.com",
    avatar_url="https://ui-avatars.com/api/?name=Demo+User&background=0D8ABC&color=fff",
)


class AuthManager:
    """Keeps the current-user record in the key-value store.

    Usage:
        auth = AuthManager(store)
        user = auth.login()
        auth.current_user()  # -> user, also after a restart
        auth.logout()
    """

    def __init__(self, store: KeyValueStore, user_key: str = DEFAULT_USER_KEY):
        self.store = store
        self.user_key = user_key

    def login(self, user: User = DEMO_USER) -> User:
        """Log in as ``user`` (the demo account by default) and persist it."""
        self.store.set(self.user_key, json.dumps(user.to_record(), ensure_ascii=False))
        logger.info("User {} logged in", user.id)
        return user

    def logout(self) -> None:
        self.store.remove(self.user_key)

    def current_user(self) -> Optional[User]:
        """The persisted current user, or None if absent or unreadable."""
        stored = self.store.get(self.user_key)
        if not stored:
            return None
        try:
            return User.model_validate_json(stored)
        except ValidationError as e:
            logger.warning("Ignoring unreadable user record: {}", e.error_count())
            return None

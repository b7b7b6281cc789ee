"""Chat session persistence and lifecycle rules."""

import json
import time
from typing import Callable, Optional

from pydantic import ValidationError

from overunder.errors import StorageError
from overunder.models.chat import ChatMessage, ChatSession
from overunder.state import AppState
from overunder.storage.kv_store import KeyValueStore
from overunder.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SESSIONS_KEY = "overunder_sessions"
DEFAULT_SESSION_TITLE = "New Analysis"
TITLE_MAX_LENGTH = 30

WELCOME_MESSAGE = ChatMessage(
    id="welcome-msg",
    role="model",
    text=(
        "Hello! I'm OverUnder. I can help you analyze whether a stock is "
        "overvalued or undervalued using real-time data and key financial "
        "ratios (P/E, PEG, P/B, etc.). Which stock would you like to analyze today?"
    ),
)

_last_stamp = 0


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def new_id() -> str:
    """Time-ordered unique id (epoch microseconds, strictly increasing)."""
    global _last_stamp
    stamp = time.time_ns() // 1000
    if stamp <= _last_stamp:
        stamp = _last_stamp + 1
    _last_stamp = stamp
    return str(stamp)


def derive_title(session: ChatSession, text: str) -> str:
    """Title for ``session`` after the user sends ``text``.

    Only the first user message names a session: when the session holds at
    most one message (the welcome message) the text becomes the title, cut
    to 30 characters plus "..." if longer. Later messages keep the title.
    """
    if len(session.messages) > 1:
        return session.title
    if len(text) > TITLE_MAX_LENGTH:
        return text[:TITLE_MAX_LENGTH] + "..."
    return text


class SessionManager:
    """Creates, stores, lists and deletes chat sessions.

    All users' sessions live in one JSON array under ``sessions_key``;
    they are partitioned by ``userId`` on read. Every write reads the whole
    array, changes it and writes it back, so the last writer wins.

    Usage:
        manager = SessionManager(store)
        session = manager.start_new_session(user.id)
        sessions = manager.list_sessions(user.id)
    """

    def __init__(
        self,
        store: KeyValueStore,
        sessions_key: str = DEFAULT_SESSIONS_KEY,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = new_id,
    ):
        """Initialize the manager

        Args:
            store: Persistence store
            sessions_key: Store key of the all-sessions array
            clock: Returns the current time in epoch milliseconds
            id_factory: Returns a fresh unique id
        """
        self.store = store
        self.sessions_key = sessions_key
        self.clock = clock
        self.id_factory = id_factory

    # ── Raw collection ─────────────────────────────

    def _read_records(self, strict: bool = False) -> list[dict]:
        """Read the stored array; missing or corrupt data reads as empty.

        With ``strict`` a store read failure propagates instead, so a write
        never replaces a collection it could not read.
        """
        try:
            stored = self.store.get(self.sessions_key)
        except StorageError as e:
            if strict:
                raise
            logger.error("Failed to read sessions: {}", e)
            return []
        if not stored:
            return []

        try:
            records = json.loads(stored)
        except json.JSONDecodeError as e:
            logger.warning("Stored sessions are not valid JSON, ignoring: {}", e)
            return []
        if not isinstance(records, list):
            logger.warning("Stored sessions are not a JSON array, ignoring")
            return []
        return [r for r in records if isinstance(r, dict)]

    def _write_records(self, records: list[dict]) -> None:
        self.store.set(self.sessions_key, json.dumps(records, ensure_ascii=False))

    # ── Operations ─────────────────────────────────

    def create_session(self, user_id: str) -> ChatSession:
        """Build a new empty session. The caller persists it."""
        now = self.clock()
        return ChatSession(
            id=self.id_factory(),
            user_id=user_id,
            title=DEFAULT_SESSION_TITLE,
            messages=[],
            created_at=now,
            last_modified=now,
        )

    def seeded_session(self, user_id: str) -> ChatSession:
        """New session holding only the welcome message. Not persisted."""
        session = self.create_session(user_id)
        return session.model_copy(update={"messages": [WELCOME_MESSAGE]})

    def start_new_session(self, user_id: str) -> ChatSession:
        """Create a session seeded with the welcome message and persist it."""
        session = self.seeded_session(user_id)
        self.save_session(session)
        return session

    def list_sessions(self, user_id: str) -> list[ChatSession]:
        """Sessions owned by ``user_id``, most recently modified first."""
        sessions = []
        for record in self._read_records():
            if record.get("userId") != user_id:
                continue
            try:
                sessions.append(ChatSession.model_validate(record))
            except ValidationError as e:
                logger.warning(
                    "Skipping invalid session {}: {}", record.get("id"), e.error_count()
                )
        sessions.sort(key=lambda s: s.last_modified, reverse=True)
        return sessions

    def get_session(self, session_id: str) -> Optional[ChatSession]:
        for record in self._read_records():
            if record.get("id") == session_id:
                try:
                    return ChatSession.model_validate(record)
                except ValidationError:
                    return None
        return None

    def save_session(self, session: ChatSession) -> None:
        """Insert or replace the session with the same id.

        Raises:
            StorageError: the store rejected the write
        """
        records = self._read_records(strict=True)
        record = session.to_record()

        for index, existing in enumerate(records):
            if existing.get("id") == session.id:
                records[index] = record
                break
        else:
            records.append(record)

        self._write_records(records)

    def delete_session(self, session_id: str) -> None:
        """Remove a session by id; unknown ids are ignored."""
        records = self._read_records(strict=True)
        remaining = [r for r in records if r.get("id") != session_id]
        if len(remaining) == len(records):
            return
        self._write_records(remaining)

    # ── Projection sync ────────────────────────────

    def commit(
        self,
        state: AppState,
        session: ChatSession,
        move_to_front: bool = False,
        persist: bool = True,
    ) -> bool:
        """Apply ``session`` to the in-memory projection, then persist it.

        The projection changes first so the UI never waits on the store. If
        the store rejects the write the projection is rebuilt from what the
        store actually holds.

        Returns:
            True if the write was confirmed (or not requested)
        """
        state.upsert(session, move_to_front=move_to_front)
        if not persist:
            return True

        try:
            self.save_session(session)
        except StorageError as e:
            logger.error("Failed to persist session {}: {}", session.id, e)
            self.reconcile(state)
            return False
        return True

    def reconcile(self, state: AppState) -> None:
        """Replace the projection with the stored sessions of the current user."""
        if state.current_user is None:
            state.sessions = []
            state.active_session_id = None
            return

        state.sessions = self.list_sessions(state.current_user.id)
        if state.find(state.active_session_id or "") is None:
            state.active_session_id = state.sessions[0].id if state.sessions else None
        logger.info("Reconciled {} session(s) from store", len(state.sessions))

    # ── Message helpers ────────────────────────────

    def append_message(self, session: ChatSession, message: ChatMessage) -> ChatSession:
        """Return a copy with ``message`` appended and ``lastModified`` bumped.

        A user message also runs title derivation.
        """
        title = session.title
        if message.role == "user":
            title = derive_title(session, message.text)
        return session.model_copy(update={
            "messages": [*session.messages, message],
            "title": title,
            "last_modified": self.clock(),
        })

    def replace_message(
        self,
        session: ChatSession,
        message_id: str,
        message: ChatMessage,
    ) -> ChatSession:
        """Return a copy where ``message`` takes the place of ``message_id``.

        Appends instead if no message has that id.
        """
        messages = list(session.messages)
        for index, existing in enumerate(messages):
            if existing.id == message_id:
                messages[index] = message
                break
        else:
            messages.append(message)
        return session.model_copy(update={
            "messages": messages,
            "last_modified": self.clock(),
        })

"""In-memory application state shared by the controllers."""

from dataclasses import dataclass, field
from typing import Optional

from overunder.models.chat import ChatSession, User


@dataclass
class AppState:
    """What the user currently sees.

    ``sessions`` is the optimistic projection of the user's sessions in
    display order; the store is the source of truth it is reconciled
    against. ``pending`` holds ids of sessions with an exchange in flight.

    Attributes:
        current_user: Logged-in user, None when logged out
        sessions: Sessions in display order (most active first)
        active_session_id: Id of the selected session
        pending: Session ids waiting on a model response
    """
    current_user: Optional[User] = None
    sessions: list[ChatSession] = field(default_factory=list)
    active_session_id: Optional[str] = None
    pending: set[str] = field(default_factory=set)

    @property
    def active_session(self) -> Optional[ChatSession]:
        if self.active_session_id is None:
            return None
        return self.find(self.active_session_id)

    def find(self, session_id: str) -> Optional[ChatSession]:
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None

    def is_processing(self, session_id: Optional[str] = None) -> bool:
        """Whether ``session_id`` (default: the active session) is awaiting a reply."""
        session_id = session_id or self.active_session_id
        return session_id in self.pending

    def upsert(self, session: ChatSession, move_to_front: bool = False) -> None:
        """Replace the session with the same id in place, or put it first."""
        others = [s for s in self.sessions if s.id != session.id]
        if move_to_front or len(others) == len(self.sessions):
            self.sessions = [session, *others]
            return
        self.sessions = [session if s.id == session.id else s for s in self.sessions]

    def remove(self, session_id: str) -> None:
        self.sessions = [s for s in self.sessions if s.id != session_id]

    def clear(self) -> None:
        self.current_user = None
        self.sessions = []
        self.active_session_id = None
        self.pending = set()

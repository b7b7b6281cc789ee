"""Tests for the in-memory application state."""

from overunder.models.chat import ChatSession, User
from overunder.state import AppState


def _session(session_id: str, title: str = "t") -> ChatSession:
    return ChatSession(
        id=session_id, user_id="u1", title=title, created_at=0, last_modified=0
    )


class TestAppState:
    """Tests for AppState helpers."""

    def test_defaults(self):
        """A fresh state is logged out and empty."""
        state = AppState()

        assert state.current_user is None
        assert state.sessions == []
        assert state.active_session is None
        assert not state.is_processing()

    def test_active_session(self):
        """The active session is looked up by id."""
        state = AppState(sessions=[_session("a"), _session("b")], active_session_id="b")
        assert state.active_session.id == "b"

    def test_active_session_missing(self):
        """An active id with no session resolves to None."""
        state = AppState(sessions=[_session("a")], active_session_id="gone")
        assert state.active_session is None

    def test_upsert_new_goes_first(self):
        """A new session is put at the front."""
        state = AppState(sessions=[_session("a")])

        state.upsert(_session("b"))

        assert [s.id for s in state.sessions] == ["b", "a"]

    def test_upsert_existing_in_place(self):
        """An existing session keeps its position."""
        state = AppState(sessions=[_session("a"), _session("b")])

        state.upsert(_session("b", title="renamed"))

        assert [s.id for s in state.sessions] == ["a", "b"]
        assert state.find("b").title == "renamed"

    def test_upsert_move_to_front(self):
        """move_to_front reorders an existing session."""
        state = AppState(sessions=[_session("a"), _session("b")])

        state.upsert(_session("b"), move_to_front=True)

        assert [s.id for s in state.sessions] == ["b", "a"]

    def test_remove(self):
        """remove drops the session and ignores unknown ids."""
        state = AppState(sessions=[_session("a"), _session("b")])

        state.remove("a")
        state.remove("zzz")

        assert [s.id for s in state.sessions] == ["b"]

    def test_is_processing(self):
        """Pending ids are reported per session, active by default."""
        state = AppState(sessions=[_session("a"), _session("b")], active_session_id="a")
        state.pending.add("b")

        assert not state.is_processing()
        assert state.is_processing("b")

    def test_clear(self):
        """clear resets everything."""
        state = AppState(
            current_user=User(id="u1", name="Ann", email="a@b.c"),
            sessions=[_session("a")],
            active_session_id="a",
            pending={"a"},
        )

        state.clear()

        assert state == AppState()

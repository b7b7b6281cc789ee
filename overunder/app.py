"""Top-level controller: owns the application state and wires the parts."""

from pathlib import Path
from typing import Optional

from overunder.auth import AuthManager
from overunder.chat.conversation import ChannelFactory, ConversationController
from overunder.chat.model_channel import ModelChannel, OpenAIChatChannel
from overunder.errors import StorageError
from overunder.models.chat import ChatMessage, ChatSession, User
from overunder.sessions.session_manager import SessionManager
from overunder.settings import Settings, get_settings, load_settings
from overunder.state import AppState
from overunder.storage.kv_store import KeyValueStore, create_store
from overunder.utils.logger import get_logger, setup_logger

logger = get_logger(__name__)


class AppController:
    """Login, session selection and messaging over one ``AppState``.

    Usage:
        app = AppController.from_settings()
        app.restore() or app.login()
        reply = await app.send_message("Is NVDA overvalued?")
    """

    def __init__(
        self,
        auth: AuthManager,
        manager: SessionManager,
        conversation: ConversationController,
        state: Optional[AppState] = None,
    ):
        self.auth = auth
        self.manager = manager
        self.conversation = conversation
        self.state = state or AppState()

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        store: Optional[KeyValueStore] = None,
        channel_factory: Optional[ChannelFactory] = None,
    ) -> "AppController":
        settings = settings or get_settings()
        store = store or create_store(settings)

        def openai_channel(session_id: str) -> ModelChannel:
            return OpenAIChatChannel(config=settings.llm)

        manager = SessionManager(store, sessions_key=settings.storage.sessions_key)
        return cls(
            auth=AuthManager(store, user_key=settings.storage.user_key),
            manager=manager,
            conversation=ConversationController(manager, channel_factory or openai_channel),
        )

    # ── Auth ───────────────────────────────────────

    def login(self) -> User:
        user = self.auth.login()
        self.state.current_user = user
        self.load_sessions(user.id)
        return user

    def restore(self) -> Optional[User]:
        """Resume the persisted user, if any, and load their sessions."""
        user = self.auth.current_user()
        if user is not None:
            self.state.current_user = user
            self.load_sessions(user.id)
        return user

    def logout(self) -> None:
        self.auth.logout()
        self.state.clear()

    # ── Sessions ───────────────────────────────────

    def load_sessions(self, user_id: str) -> None:
        """Load the user's sessions and select the most recent one.

        A user without sessions gets a new one seeded with the welcome message.
        """
        self.state.sessions = self.manager.list_sessions(user_id)
        if self.state.sessions:
            self.state.active_session_id = self.state.sessions[0].id
        else:
            self.start_new_chat()

    def start_new_chat(self) -> Optional[ChatSession]:
        user = self.state.current_user
        if user is None:
            return None
        session = self.manager.seeded_session(user.id)
        self.manager.commit(self.state, session, move_to_front=True)
        if self.state.find(session.id) is not None:
            self.state.active_session_id = session.id
        return session

    def select_session(self, session_id: str) -> bool:
        if self.state.find(session_id) is None:
            return False
        self.state.active_session_id = session_id
        return True

    def delete_session(self, session_id: str) -> None:
        """Delete a session; deleting the active one selects the next most recent.

        When no session is left a fresh one is started.
        """
        try:
            self.manager.delete_session(session_id)
        except StorageError as e:
            logger.error("Failed to delete session {}: {}", session_id, e)
            self.manager.reconcile(self.state)
            return
        self.conversation.forget(session_id)
        self.state.remove(session_id)

        if self.state.active_session_id != session_id:
            return
        if self.state.sessions:
            self.state.active_session_id = self.state.sessions[0].id
        else:
            self.state.active_session_id = None
            self.start_new_chat()

    @property
    def active_session(self) -> Optional[ChatSession]:
        return self.state.active_session

    # ── Messaging ──────────────────────────────────

    async def send_message(self, text: str) -> Optional[ChatMessage]:
        return await self.conversation.send(self.state, text)


def init_app(
    config_path: Optional[Path] = None,
    channel_factory: Optional[ChannelFactory] = None,
) -> AppController:
    """Load settings, install the log sinks and build the controller.

    Args:
        config_path: YAML config file; defaults to config/config.yaml
        channel_factory: Overrides the OpenAI channel per session

    Returns:
        Controller with the persisted user (if any) restored
    """
    settings = load_settings(config_path)

    setup_logger(
        log_file=settings.logging.file,
        level="DEBUG" if settings.debug else settings.logging.level,
        rotation=settings.logging.rotation,
        retention=settings.logging.retention,
    )
    logger.info("Initializing OverUnder ({} store)", settings.storage.backend)

    app = AppController.from_settings(settings, channel_factory=channel_factory)
    app.restore()
    return app

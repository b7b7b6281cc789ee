"""A single user message and model reply exchange, folded into the active session."""

from enum import Enum
from typing import Callable, Optional

from overunder.chat.model_channel import ModelChannel, OpenAIChatChannel
from overunder.models.chat import ChatMessage
from overunder.reports.report_extractor import extract_report
from overunder.sessions.session_manager import SessionManager, new_id
from overunder.state import AppState
from overunder.utils.logger import get_logger

logger = get_logger(__name__)

ERROR_REPLY_TEXT = "I encountered an error. Please try again."


class ExchangePhase(Enum):
    """Per-session exchange state.

    IDLE → SENDING → AWAITING_RESPONSE → FULFILLED | FAILED → IDLE
    """
    IDLE = "idle"
    SENDING = "sending"
    AWAITING_RESPONSE = "awaiting_response"
    FULFILLED = "fulfilled"
    FAILED = "failed"


ChannelFactory = Callable[[str], ModelChannel]


def _default_channel_factory(session_id: str) -> ModelChannel:
    return OpenAIChatChannel()


class ConversationController:
    """Drives message exchanges between the user and the model channel.

    Each session gets its own channel (and so its own model-side context),
    created on first use. At most one exchange per session is in flight;
    exchanges in different sessions may overlap.

    Usage:
        conversation = ConversationController(manager)
        reply = await conversation.send(state, "Analyze AAPL")
    """

    def __init__(
        self,
        manager: SessionManager,
        channel_factory: ChannelFactory = _default_channel_factory,
    ):
        self.manager = manager
        self.channel_factory = channel_factory
        self._channels: dict[str, ModelChannel] = {}
        self._phases: dict[str, ExchangePhase] = {}

    def phase(self, session_id: str) -> ExchangePhase:
        return self._phases.get(session_id, ExchangePhase.IDLE)

    def _set_phase(self, session_id: str, phase: ExchangePhase) -> None:
        logger.debug("Session {}: {} -> {}", session_id, self.phase(session_id).value, phase.value)
        if phase is ExchangePhase.IDLE:
            self._phases.pop(session_id, None)
        else:
            self._phases[session_id] = phase

    def channel_for(self, session_id: str) -> ModelChannel:
        channel = self._channels.get(session_id)
        if channel is None:
            channel = self.channel_factory(session_id)
            self._channels[session_id] = channel
        return channel

    def forget(self, session_id: str) -> None:
        """Drop the model channel of a deleted session."""
        self._channels.pop(session_id, None)

    async def send(self, state: AppState, text: str) -> Optional[ChatMessage]:
        """Send ``text`` in the active session and wait for the reply.

        Ignored (returns None) for blank text, when nobody is logged in, when
        no session is active, or while the active session already awaits a
        reply. Channel errors never propagate: the placeholder is replaced by
        a fixed apology message instead.

        Returns:
            The model message that ended the exchange, or None if ignored
        """
        session = state.active_session
        if not text.strip() or state.current_user is None or session is None:
            return None
        if state.is_processing(session.id):
            return None

        session_id = session.id
        state.pending.add(session_id)
        try:
            self._set_phase(session_id, ExchangePhase.SENDING)
            user_message = ChatMessage(id=new_id(), role="user", text=text)
            session = self.manager.append_message(session, user_message)
            self.manager.commit(state, session)

            self._set_phase(session_id, ExchangePhase.AWAITING_RESPONSE)
            placeholder = ChatMessage(
                id=f"loading-{new_id()}", role="model", text="", is_loading=True
            )
            waiting = session.model_copy(
                update={"messages": [*session.messages, placeholder]}
            )
            self.manager.commit(state, waiting, persist=False)

            try:
                response = await self.channel_for(session_id).send_message(text)
                extraction = extract_report(response.text)
                reply = ChatMessage(
                    id=new_id(),
                    role="model",
                    text=extraction.clean_text,
                    is_report=extraction.is_report,
                    report_data=extraction.report_data,
                    grounding_urls=response.grounding_citations,
                )
                phase = ExchangePhase.FULFILLED
            except Exception as e:
                logger.error("Model exchange failed for session {}: {}", session_id, e)
                reply = ChatMessage(id=new_id(), role="model", text=ERROR_REPLY_TEXT)
                phase = ExchangePhase.FAILED
            self._set_phase(session_id, phase)

            if state.find(session_id) is None:
                logger.info("Session {} was deleted mid-exchange, dropping reply", session_id)
                return reply

            final = self.manager.replace_message(waiting, placeholder.id, reply)
            self.manager.commit(
                state, final, move_to_front=phase is ExchangePhase.FULFILLED
            )
            return reply
        finally:
            state.pending.discard(session_id)
            self._set_phase(session_id, ExchangePhase.IDLE)

"""Model channel and conversation control."""

from .model_channel import ChannelResponse, ModelChannel, OpenAIChatChannel
from .conversation import ConversationController, ExchangePhase, ERROR_REPLY_TEXT

__all__ = [
    "ModelChannel",
    "OpenAIChatChannel",
    "ChannelResponse",
    "ConversationController",
    "ExchangePhase",
    "ERROR_REPLY_TEXT",
]

"""Model channels: send one utterance, get text plus grounding citations.

A channel owns its conversation context: callers pass only the new user
message and the channel keeps the running history itself.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from openai import AsyncOpenAI

from overunder.chat.prompts import EMPTY_RESPONSE_TEXT, SYSTEM_INSTRUCTION
from overunder.errors import ChannelError
from overunder.models.chat import GroundingCitation
from overunder.settings import LLMConfig, get_settings
from overunder.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ChannelResponse:
    text: str
    grounding_citations: list[GroundingCitation] = field(default_factory=list)


class ModelChannel(ABC):
    """One multi-turn conversation with a generative model."""

    @abstractmethod
    async def send_message(self, message: str) -> ChannelResponse:
        """Send the next user utterance.

        Raises:
            Exception: any transport or response error; callers treat every
                exception as a failed exchange
        """


def extract_citations(message) -> list[GroundingCitation]:
    """Collect url_citation annotations from a chat completion message.

    Annotations without both a title and a URL are skipped; repeated URLs
    are kept once.
    """
    citations: list[GroundingCitation] = []
    seen: set[str] = set()
    for annotation in getattr(message, "annotations", None) or []:
        if getattr(annotation, "type", None) != "url_citation":
            continue
        cited = getattr(annotation, "url_citation", None)
        title = getattr(cited, "title", None)
        url = getattr(cited, "url", None)
        if not title or not url or url in seen:
            continue
        seen.add(url)
        citations.append(GroundingCitation(title=title, uri=url))
    return citations


class OpenAIChatChannel(ModelChannel):
    """Chat-completions channel for any OpenAI-compatible endpoint.

    Search-enabled models (e.g. ``gpt-4o-search-preview``) return
    ``url_citation`` annotations, which become grounding citations.

    Usage:
        channel = OpenAIChatChannel()
        response = await channel.send_message("Is AAPL overvalued?")
    """

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        system_instruction: str = SYSTEM_INSTRUCTION,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.config = config or get_settings().llm
        self.system_instruction = system_instruction
        self._client = client
        self._history: list[dict] = []

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.config.api_key:
                raise ChannelError("LLM API key is not configured")
            self._client = AsyncOpenAI(
                api_key=self.config.api_key,
                base_url=self.config.base_url,
            )
        return self._client

    @property
    def history(self) -> list[dict]:
        return list(self._history)

    async def send_message(self, message: str) -> ChannelResponse:
        user_turn = {"role": "user", "content": message}
        request = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": self.system_instruction},
                *self._history,
                user_turn,
            ],
            "max_tokens": self.config.max_tokens,
        }
        if self.config.temperature is not None:
            request["temperature"] = self.config.temperature

        logger.info("Calling {} ({} prior turns)", self.config.model, len(self._history))
        response = await self.client.chat.completions.create(**request)

        if not response.choices:
            raise ChannelError("Model returned no choices")
        reply = response.choices[0].message
        content = reply.content
        if not content:
            logger.warning("Model returned empty content")
            content = EMPTY_RESPONSE_TEXT

        # A failed turn leaves the history unchanged
        self._history.extend([user_turn, {"role": "assistant", "content": content}])

        citations = extract_citations(reply)
        logger.info("Model replied with {} chars, {} citations", len(content), len(citations))
        return ChannelResponse(text=content, grounding_citations=citations)

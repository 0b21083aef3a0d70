"""
Conversation state for a single chat with the travel assistant.

A session keeps the full history, sends it with each new user message,
and grows the assistant's reply in place as deltas arrive. Only one
exchange may be in flight at a time.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from typing import Any

from .client import AssistantClient
from .logging_utils import ContextualLogger
from .models import ChatMessage, MessageRole
from .streaming import StreamOutcome

DEFAULT_GREETING = (
    "Hello! I'm your AI travel assistant. Ask me anything about traveling in "
    "India - destinations, itineraries, local tips, or cultural insights!"
)


class ChatSession:
    """Chat history plus the in-flight gate around ``stream_chat``."""

    def __init__(
        self,
        client: AssistantClient,
        greeting: str | None = DEFAULT_GREETING,
        on_update: Callable[[str], Any] | None = None,
    ) -> None:
        self.client = client
        self.on_update = on_update
        self.messages: list[ChatMessage] = []
        if greeting:
            self.messages.append(ChatMessage(MessageRole.ASSISTANT, greeting))
        self.is_loading = False
        self.last_error: str | None = None
        self.session_id = uuid.uuid4().hex[:8]
        self._logger = ContextualLogger({"session_id": self.session_id})

    async def send(self, text: str) -> StreamOutcome | None:
        """Send a user message and stream the reply into the history.

        Returns None without sending when ``text`` is blank or another
        exchange is still in flight.
        """
        if not text.strip() or self.is_loading:
            self._logger.debug(
                "Ignoring send", blank=not text.strip(), is_loading=self.is_loading
            )
            return None

        user_message = ChatMessage(MessageRole.USER, text)
        self.messages.append(user_message)
        self.is_loading = True
        self.last_error = None
        history = list(self.messages)
        reply_parts: list[str] = []

        def on_delta(chunk: str) -> None:
            reply_parts.append(chunk)
            self._set_assistant_reply("".join(reply_parts))
            if self.on_update is not None:
                self.on_update(chunk)

        def on_done() -> None:
            self.is_loading = False

        def on_error(message: str) -> None:
            self.is_loading = False
            self.last_error = message
            self._logger.warning("Assistant reply failed", error_message=message)

        log = self._logger.bind(history_length=len(history))
        log.info("Sending chat message")
        try:
            return await self.client.stream_chat(history, on_delta, on_done, on_error)
        finally:
            self.is_loading = False

    @property
    def last_reply(self) -> str | None:
        """Content of the trailing assistant message, if any."""
        if self.messages and self.messages[-1].role is MessageRole.ASSISTANT:
            return self.messages[-1].content
        return None

    def _set_assistant_reply(self, content: str) -> None:
        reply = ChatMessage(MessageRole.ASSISTANT, content)
        if self.messages and self.messages[-1].role is MessageRole.ASSISTANT:
            self.messages[-1] = reply
        else:
            self.messages.append(reply)

#!/usr/bin/env python3
"""
Tests for chat session history and in-flight gating.
"""

import asyncio
import json

import httpx
import pytest

from travel_assistant.chat_session import DEFAULT_GREETING, ChatSession
from travel_assistant.client import AssistantClient
from travel_assistant.models import ChatMessage, MessageRole
from travel_assistant.streaming import StreamCompleted, StreamFailed


class ScriptedClient:
    """Stands in for AssistantClient.stream_chat with canned callbacks."""

    def __init__(self, deltas=(), error=None, gate=None):
        self.deltas = deltas
        self.error = error
        self.gate = gate
        self.calls = []

    async def stream_chat(self, messages, on_delta, on_done, on_error):
        self.calls.append(list(messages))
        if self.gate is not None:
            await self.gate.wait()
        for delta in self.deltas:
            on_delta(delta)
        if self.error:
            on_error(self.error)
            return StreamFailed(self.error, len(self.deltas))
        on_done()
        return StreamCompleted(None, len(self.deltas))


class TestChatSession:
    """Test message accumulation and gating."""

    def test_history_starts_with_greeting(self):
        session = ChatSession(ScriptedClient())
        assert session.messages == [ChatMessage(MessageRole.ASSISTANT, DEFAULT_GREETING)]
        assert session.is_loading is False

    @pytest.mark.asyncio
    async def test_reply_accumulates_into_one_message(self):
        updates = []
        client = ScriptedClient(deltas=["Visit ", "between ", "Oct and Mar."])
        session = ChatSession(client, on_update=updates.append)

        outcome = await session.send("Best time to visit Kerala?")

        assert isinstance(outcome, StreamCompleted)
        assert [m.role for m in session.messages] == [
            MessageRole.ASSISTANT, MessageRole.USER, MessageRole.ASSISTANT
        ]
        assert session.last_reply == "Visit between Oct and Mar."
        assert updates == ["Visit ", "between ", "Oct and Mar."]
        assert client.calls[0][-1] == ChatMessage(
            MessageRole.USER, "Best time to visit Kerala?"
        )
        assert session.is_loading is False

    @pytest.mark.asyncio
    async def test_full_history_is_sent(self):
        client = ScriptedClient(deltas=["ok"])
        session = ChatSession(client, greeting=None)

        await session.send("first")
        await session.send("second")

        assert [m.content for m in client.calls[1]] == ["first", "ok", "second"]

    @pytest.mark.asyncio
    async def test_blank_input_is_ignored(self):
        client = ScriptedClient()
        session = ChatSession(client)

        assert await session.send("   ") is None
        assert client.calls == []
        assert len(session.messages) == 1

    @pytest.mark.asyncio
    async def test_send_while_loading_is_ignored(self):
        gate = asyncio.Event()
        client = ScriptedClient(deltas=["Hi"], gate=gate)
        session = ChatSession(client)

        first = asyncio.create_task(session.send("one"))
        await asyncio.sleep(0)
        assert session.is_loading is True
        assert await session.send("two") is None

        gate.set()
        await first
        assert len(client.calls) == 1
        assert session.is_loading is False

    @pytest.mark.asyncio
    async def test_error_is_recorded(self):
        client = ScriptedClient(error="rate limited")
        session = ChatSession(client)

        outcome = await session.send("hello")

        assert isinstance(outcome, StreamFailed)
        assert session.last_error == "rate limited"
        assert session.last_reply is None
        assert session.is_loading is False

    @pytest.mark.asyncio
    async def test_with_http_client(self):
        def handler(request):
            body = json.loads(request.content)
            assert body["messages"][-1] == {"role": "user", "content": "Goa?"}
            stream = (
                ': keep-alive\n'
                'data: {"choices":[{"delta":{"content":"Beaches"}}]}\n'
                'data: {"choices":[{"delta":{"content":"!"}}]}\n'
                'data: [DONE]\n'
            )
            return httpx.Response(
                200, headers={"content-type": "text/event-stream"}, content=stream.encode()
            )

        async with AssistantClient(
            "https://backend.example.test", transport=httpx.MockTransport(handler)
        ) as client:
            session = ChatSession(client)
            await session.send("Goa?")

        assert session.last_reply == "Beaches!"
        assert session.last_error is None

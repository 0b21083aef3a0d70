"""
HTTP client for the travel assistant's backend functions.

The chat function answers with a text event stream that is handed to the
streaming reader; the itinerary function answers with one JSON document.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable, Sequence
from contextlib import aclosing
from typing import Any

import httpx

from .config import Configuration
from .exceptions import ItineraryError, StreamSetupError, StreamTransportError
from .logging_utils import log_operation, operation_context, wrap_errors
from .models import ChatMessage, ItineraryRequest
from .streaming import StreamOutcome, stream_to_callbacks

CHAT_FALLBACK_ERROR = "Failed to start chat"
ITINERARY_FALLBACK_ERROR = "Failed to generate itinerary"
DEFAULT_CHAT_ENDPOINT = "/functions/v1/chat"
DEFAULT_ITINERARY_ENDPOINT = "/functions/v1/generate-itinerary"


def error_message_from_response(response: httpx.Response, fallback: str) -> str:
    """Return the ``error`` field of a JSON error envelope, else ``fallback``."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return fallback


def _message_dict(message: ChatMessage | dict[str, Any]) -> dict[str, Any]:
    if isinstance(message, ChatMessage):
        return message.to_dict()
    return {"role": message["role"], "content": message["content"]}


class AssistantClient:
    """Async client for the chat and itinerary functions."""

    def __init__(
        self,
        base_url: str,
        *,
        chat_endpoint: str = DEFAULT_CHAT_ENDPOINT,
        itinerary_endpoint: str = DEFAULT_ITINERARY_ENDPOINT,
        timeout: httpx.Timeout | float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.chat_endpoint = chat_endpoint
        self.itinerary_endpoint = itinerary_endpoint
        self.client: httpx.AsyncClient = httpx.AsyncClient(
            base_url=base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_configuration(
        cls,
        configuration: Configuration,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> AssistantClient:
        """Build a client from YAML and environment configuration."""
        http_config = configuration.get_http_client_config()
        timeout = httpx.Timeout(
            connect=http_config["connect_timeout"],
            read=http_config["read_timeout"],
            write=http_config["write_timeout"],
            pool=http_config["pool_timeout"],
        )
        return cls(
            configuration.backend_url,
            chat_endpoint=configuration.get_chat_config()["endpoint"],
            itinerary_endpoint=configuration.get_itinerary_config()["endpoint"],
            timeout=timeout,
            transport=transport,
        )

    async def stream_chat(
        self,
        messages: Sequence[ChatMessage | dict[str, Any]],
        on_delta: Callable[[str], Any],
        on_done: Callable[[], Any],
        on_error: Callable[[str], Any],
    ) -> StreamOutcome:
        """Stream an assistant reply for ``messages``.

        Exactly one of ``on_done`` / ``on_error`` is invoked; this method
        does not raise for setup or transport failures.
        """
        payload = {"messages": [_message_dict(m) for m in messages]}
        async with operation_context(
            "stream_chat", context={"message_count": len(payload["messages"])}
        ) as op_logger:
            async with aclosing(self._iter_chat_bytes(payload)) as chunks:
                outcome = await stream_to_callbacks(
                    chunks, on_delta, on_done, on_error
                )
            op_logger.info(
                "Chat stream finished",
                outcome=type(outcome).__name__,
                delta_count=outcome.delta_count,
            )
        return outcome

    async def _iter_chat_bytes(
        self, payload: dict[str, Any]
    ) -> AsyncGenerator[bytes]:
        try:
            async with self.client.stream(
                "POST", self.chat_endpoint, json=payload
            ) as response:
                if not response.is_success:
                    await response.aread()
                    raise StreamSetupError(
                        error_message_from_response(response, CHAT_FALLBACK_ERROR),
                        status_code=response.status_code,
                    )

                async for chunk in response.aiter_bytes():
                    yield chunk
        except httpx.HTTPError as e:
            raise StreamTransportError(f"HTTP error: {e!s}") from e

    @log_operation("generate_itinerary")
    async def generate_itinerary(
        self, request: ItineraryRequest | dict[str, Any]
    ) -> dict[str, Any]:
        """Request a complete itinerary document.

        Raises:
            pydantic.ValidationError: If the trip parameters are incomplete.
            ItineraryError: If the function call fails.
        """
        if not isinstance(request, ItineraryRequest):
            request = ItineraryRequest.model_validate(request)
        return await self._post_itinerary(request.to_payload())

    @wrap_errors("generate_itinerary", ItineraryError)
    async def _post_itinerary(self, payload: dict[str, str]) -> dict[str, Any]:
        response = await self.client.post(self.itinerary_endpoint, json=payload)
        if not response.is_success:
            raise ItineraryError(
                error_message_from_response(response, ITINERARY_FALLBACK_ERROR),
                status_code=response.status_code,
                response_data={"destination": payload["destination"]},
            )
        return response.json()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

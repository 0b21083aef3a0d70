"""
Incremental reader for text-event-stream chat responses.

Bytes arrive in arbitrary pieces; the reader decodes them with a stateful
UTF-8 decoder, buffers partial lines, and forwards each ``delta.content``
fragment as soon as its ``data:`` line is complete and decodable.
"""

from __future__ import annotations

import codecs
import json
from collections.abc import AsyncIterable, Callable
from typing import Any

from ..logging_utils import ErrorClassifier, get_logger
from .models import (
    COMMENT_PREFIX,
    DATA_PREFIX,
    CompletionReason,
    LineKind,
    ParsedLine,
    StreamCallbacks,
    StreamCompleted,
    StreamFailed,
    StreamOutcome,
)

logger = get_logger(__name__)

UNKNOWN_ERROR_MESSAGE = "Unknown error"


def parse_line(line: str) -> ParsedLine:
    """Classify one event-stream line (newline already removed)."""
    if line.endswith("\r"):
        line = line[:-1]
    if line.startswith(COMMENT_PREFIX):
        return ParsedLine(LineKind.COMMENT)
    if not line.strip():
        return ParsedLine(LineKind.BLANK)
    if not line.startswith(DATA_PREFIX):
        return ParsedLine(LineKind.OTHER)
    return ParsedLine(LineKind.DATA, line[len(DATA_PREFIX):].strip())


def extract_delta(payload: Any) -> str | None:
    """Return ``choices[0].delta.content`` if present and non-empty."""
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    if not isinstance(choice, dict):
        return None
    delta = choice.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    if isinstance(content, str) and content:
        return content
    return None


class StreamingResponseReader:
    """Turns a chunked byte stream into ordered text deltas."""

    def __init__(self, on_delta: Callable[[str], Any]):
        self.on_delta = on_delta
        self.sentinel_seen = False
        self.delta_count = 0
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> bool:
        """Append a chunk and process every complete line.

        Returns True once the ``[DONE]`` sentinel has been seen; lines
        buffered after it are never processed.
        """
        if self.sentinel_seen:
            return True
        self._buffer += self._decoder.decode(chunk)
        self._drain_complete_lines()
        return self.sentinel_seen

    def finish(self) -> None:
        """Flush residual text after the transport is exhausted."""
        if self.sentinel_seen:
            return
        self._buffer += self._decoder.decode(b"", final=True)
        residual, self._buffer = self._buffer, ""
        if not residual.strip():
            return

        for raw_line in residual.split("\n"):
            parsed = parse_line(raw_line)
            if parsed.kind is not LineKind.DATA:
                continue
            if parsed.is_sentinel:
                self.sentinel_seen = True
                return
            try:
                payload = json.loads(parsed.payload)
            except json.JSONDecodeError:
                logger.debug("Dropping undecodable trailing line", line=raw_line)
                continue
            self._emit(payload)

    async def read(self, chunks: AsyncIterable[bytes]) -> StreamCompleted:
        """Consume ``chunks`` until the sentinel or transport end."""
        async for chunk in chunks:
            if self.feed(chunk):
                return StreamCompleted(CompletionReason.SENTINEL, self.delta_count)
        self.finish()
        return StreamCompleted(CompletionReason.TRANSPORT_END, self.delta_count)

    def _drain_complete_lines(self) -> None:
        while (newline_index := self._buffer.find("\n")) != -1:
            line = self._buffer[:newline_index]
            self._buffer = self._buffer[newline_index + 1:]

            parsed = parse_line(line)
            if parsed.kind is not LineKind.DATA:
                continue
            if parsed.is_sentinel:
                self.sentinel_seen = True
                return

            try:
                payload = json.loads(parsed.payload)
            except json.JSONDecodeError:
                # Treat the line as incomplete and wait for more data.
                self._buffer = line + "\n" + self._buffer
                logger.debug(
                    "Undecodable data line, waiting for more input",
                    buffered_chars=len(self._buffer),
                )
                return
            self._emit(payload)

    def _emit(self, payload: Any) -> None:
        content = extract_delta(payload)
        if content:
            self.delta_count += 1
            self.on_delta(content)


async def stream_to_callbacks(
    chunks: AsyncIterable[bytes],
    on_delta: Callable[[str], Any],
    on_done: Callable[[], Any],
    on_error: Callable[[str], Any],
) -> StreamOutcome:
    """
    Read ``chunks`` and report the result through the three callbacks.

    Exactly one of ``on_done`` or ``on_error`` is invoked. Setup and
    transport errors raised while iterating ``chunks`` become a single
    ``on_error`` call; deltas already delivered are not retracted.

    Returns:
        The terminal outcome that selected the callback
    """
    callbacks = StreamCallbacks(on_delta=on_delta, on_done=on_done, on_error=on_error)
    reader = StreamingResponseReader(callbacks.on_delta)

    outcome: StreamOutcome
    try:
        outcome = await reader.read(chunks)
    except Exception as e:
        _, error_category = ErrorClassifier.classify_error(e)
        logger.error(
            "Chat stream failed",
            error_type=type(e).__name__,
            error_category=error_category,
            error_message=str(e),
            delta_count=reader.delta_count,
        )
        outcome = StreamFailed(str(e) or UNKNOWN_ERROR_MESSAGE, reader.delta_count)

    outcome.notify(callbacks)
    return outcome

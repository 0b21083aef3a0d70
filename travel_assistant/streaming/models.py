"""
Streaming-specific dataclasses for the chat response reader.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

DATA_PREFIX = "data: "
COMMENT_PREFIX = ":"
DONE_SENTINEL = "[DONE]"


class LineKind(Enum):
    """Classification of a single event-stream line."""
    BLANK = "blank"
    COMMENT = "comment"
    DATA = "data"
    OTHER = "other"


class CompletionReason(Enum):
    """How a stream reached DONE."""
    SENTINEL = "sentinel"
    TRANSPORT_END = "transport_end"


@dataclass(frozen=True)
class ParsedLine:
    """A classified line; ``payload`` is the trimmed text after ``data: ``."""
    kind: LineKind
    payload: str | None = None

    @property
    def is_sentinel(self) -> bool:
        return self.kind is LineKind.DATA and self.payload == DONE_SENTINEL


@dataclass(frozen=True)
class StreamCallbacks:
    """Caller-supplied sinks for a single chat exchange."""
    on_delta: Callable[[str], Any]
    on_done: Callable[[], Any]
    on_error: Callable[[str], Any]


@dataclass(frozen=True)
class StreamCompleted:
    """Terminal outcome: the stream finished normally."""
    reason: CompletionReason
    delta_count: int = 0

    def notify(self, callbacks: StreamCallbacks) -> None:
        callbacks.on_done()


@dataclass(frozen=True)
class StreamFailed:
    """Terminal outcome: setup or transport failure."""
    message: str
    delta_count: int = 0

    def notify(self, callbacks: StreamCallbacks) -> None:
        callbacks.on_error(self.message)


StreamOutcome = StreamCompleted | StreamFailed

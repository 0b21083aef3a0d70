"""
Streaming functionality for chat responses.

This module contains:
- Event-stream line classification
- Incremental delta extraction across chunk boundaries
- Tagged terminal outcomes driving the done/error callbacks
"""

from .models import (
    DONE_SENTINEL,
    CompletionReason,
    LineKind,
    ParsedLine,
    StreamCallbacks,
    StreamCompleted,
    StreamFailed,
    StreamOutcome,
)
from .reader import (
    StreamingResponseReader,
    extract_delta,
    parse_line,
    stream_to_callbacks,
)

__all__ = [
    "DONE_SENTINEL",
    "CompletionReason",
    "LineKind",
    "ParsedLine",
    "StreamCallbacks",
    "StreamCompleted",
    "StreamFailed",
    "StreamOutcome",
    "StreamingResponseReader",
    "extract_delta",
    "parse_line",
    "stream_to_callbacks",
]

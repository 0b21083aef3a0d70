"""
Client library for the travel-planning assistant backend.

This package provides:
- Incremental reading of streamed chat replies
- Itinerary generation requests
- Chat session state with in-flight gating
- Group payment summaries and UPI deep links
"""

from __future__ import annotations

from .chat_session import ChatSession
from .client import AssistantClient
from .config import Configuration
from .exceptions import (
    AssistantError,
    ItineraryError,
    StreamSetupError,
    StreamTransportError,
)
from .models import ChatMessage, ItineraryRequest, MessageRole
from .payments import (
    MemberPaymentSummary,
    build_upi_url,
    member_initials,
    pay_now_url,
    summarize_payments,
)
from .streaming import (
    StreamCompleted,
    StreamFailed,
    StreamingResponseReader,
    stream_to_callbacks,
)

__all__ = [
    "AssistantClient",
    "AssistantError",
    "ChatMessage",
    "ChatSession",
    "Configuration",
    "ItineraryError",
    "ItineraryRequest",
    "MemberPaymentSummary",
    "MessageRole",
    "StreamCompleted",
    "StreamFailed",
    "StreamSetupError",
    "StreamTransportError",
    "StreamingResponseReader",
    "build_upi_url",
    "member_initials",
    "pay_now_url",
    "stream_to_callbacks",
    "summarize_payments",
]

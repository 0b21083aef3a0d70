"""
Error handling for travel assistant backend calls.

This module provides the error hierarchy raised by the HTTP client:
- Setup failures before a chat stream begins
- Transport failures while reading a stream
- Itinerary generation failures
"""

from __future__ import annotations

from typing import Any


class AssistantError(Exception):
    """Base error with response context."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}


class StreamSetupError(AssistantError):
    """Chat endpoint answered with a non-success status."""
    pass


class StreamTransportError(AssistantError):
    """Connection failed while establishing or reading a stream."""
    pass


class ItineraryError(AssistantError):
    """Itinerary generation failed."""
    pass

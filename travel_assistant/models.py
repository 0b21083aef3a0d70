"""
Request and message models for the travel assistant backend.

This module provides:
- Chat message structures sent to the chat function
- The itinerary request body, validated before it leaves the client
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MessageRole(Enum):
    """Roles accepted by the chat function."""
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
    """A single conversation turn."""
    role: MessageRole
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role.value, "content": self.content}


class ItineraryRequest(BaseModel):
    """Trip parameters for the itinerary generation function."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    destination: str = Field(min_length=1)
    start_date: str = Field(alias="startDate", min_length=1)
    end_date: str = Field(alias="endDate", min_length=1)
    travelers: str = Field(min_length=1)
    budget: str = Field(min_length=1)

    def to_payload(self) -> dict[str, str]:
        """Wire body using the camelCase names the function expects."""
        return self.model_dump(by_alias=True)

"""
Mood Schemas
============
Pydantic models shared by the relay and the journal client. These are
the contract between the two halves of Mood Sense.

Key design decisions:
- The relay request is deliberately lenient: scale and description are
  accepted as whatever JSON the client sent and are interpolated into
  the prompt as-is. Nothing is range-checked server-side.
- MoodEntry is strict. It is what the client persists, and every stored
  entry must carry a non-empty description and a scale in [1, 5].
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

MIN_SCALE = 1
MAX_SCALE = 5


# ---------------------------------------------------------------------------
# Relay request / response
# ---------------------------------------------------------------------------

class MoodInsightRequest(BaseModel):
    """Payload the client sends to POST /api/mood-insight."""

    model_config = ConfigDict(extra="ignore")

    scale: Any = Field(
        default=None,
        description="Self-reported mood, expected 1-5. Not validated.",
    )
    description: Any = Field(
        default=None,
        description="Free-text description of the mood. Not validated.",
    )


class MoodInsightResponse(BaseModel):
    """Returned by the relay when an insight was produced."""

    insight: str


class ErrorResponse(BaseModel):
    """Returned by the relay when the completion API call failed."""

    error: str


# ---------------------------------------------------------------------------
# Client-side journal record
# ---------------------------------------------------------------------------

class MoodEntry(BaseModel):
    """One journaled mood record. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Time-derived identifier (epoch milliseconds).")
    scale: int = Field(..., ge=MIN_SCALE, le=MAX_SCALE)
    description: str = Field(..., min_length=1)
    timestamp: datetime
    insight: Optional[str] = None

    @field_validator("description")
    @classmethod
    def _description_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("description must not be blank")
        return value


MoodHistoryAdapter = TypeAdapter(list[MoodEntry])

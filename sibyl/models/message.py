"""Inbound chat message and directory seed contracts."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InboundMessage(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    sender_id: str = Field(min_length=1, max_length=128)
    channel_id: str = Field(min_length=1, max_length=128)
    text: str = Field(max_length=8000)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("sender_id", "channel_id")
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        raw = value.strip()
        if not raw:
            raise ValueError("identifier must not be blank")
        if any(ch.isspace() for ch in raw):
            raise ValueError("identifier must not contain whitespace")
        return raw


class EntitySeed(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1, max_length=128)
    psycho_pass: Optional[int] = Field(default=None, ge=0)

"""Pydantic schemas for TrainingSession API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


def _strip_required(value: str, field_name: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError(f"{field_name} cannot be empty")
    return cleaned


class SessionCreate(BaseModel):
    """Schema for starting a new training session."""

    mode: str = Field("simple", max_length=100, description="Scenario archetype")
    language: str = Field("English", max_length=50, description="Language of generated content")

    @field_validator("mode", "language")
    @classmethod
    def validate_tags(cls, v: str, info: ValidationInfo) -> str:
        return _strip_required(v, info.field_name)


class Scenario(BaseModel):
    """Roleplay premise returned by the scenario generator."""

    model_config = ConfigDict(extra="ignore")

    scenario_description: str
    customer_goal: str
    ideal_resolution: str
    customer_profile: Any = None
    constraints: Any = None
    preselected_products: Any = None
    payment_status: Any = None
    tone: Any = None

    @field_validator("scenario_description", "customer_goal", "ideal_resolution")
    @classmethod
    def validate_required_text(cls, v: str, info: ValidationInfo) -> str:
        return _strip_required(v, info.field_name)

    def details(self) -> dict[str, Any]:
        """Optional contextual fields, for storage alongside the session."""
        return self.model_dump(
            exclude={"scenario_description", "customer_goal", "ideal_resolution"},
            exclude_none=True,
        )


class SessionCreated(BaseModel):
    """Response for a newly created session."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: UUID
    mode: str
    scenario: Scenario
    created_at: datetime


class SessionSummary(BaseModel):
    """Row in the session list."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    mode: str
    scenario: str
    status: str
    score: float | None = None
    created_at: datetime
    completed_at: datetime | None = None


class SessionList(BaseModel):
    sessions: list[SessionSummary]


class SessionRead(SessionSummary):
    """Full session record."""

    language: str
    scenario_context: str
    ideal_resolution: str
    scenario_details: dict[str, Any] | None = None
    analysis: dict[str, Any] | None = None
    suggestions: str | None = None


class MessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sequence: int
    role: str
    content: str
    created_at: datetime


class SessionDetail(BaseModel):
    session: SessionRead
    messages: list[MessageRead]


class TurnCreate(BaseModel):
    """A trainee utterance."""

    text: str = Field(..., max_length=8000)

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _strip_required(v, "text")


class TurnReply(BaseModel):
    """Customer persona reply, with an optional synthesized-speech reference."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    reply: str
    audio_url: str | None = None


class TranscriptionResult(BaseModel):
    text: str

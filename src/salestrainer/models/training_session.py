"""TrainingSession model for roleplay sessions and their evaluation."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from salestrainer.models.message import Message

import uuid
from datetime import datetime

from sqlalchemy import JSON, Float, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salestrainer.core.db import Base
from salestrainer.models.enums import SessionStatus
from salestrainer.utils.datetime import now_utc


class TrainingSession(Base):
    """A single roleplay between a trainee and a generated customer persona."""

    __tablename__ = "training_sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    mode: Mapped[str] = mapped_column(String(100), nullable=False, default="simple")
    language: Mapped[str] = mapped_column(String(50), nullable=False, default="English")

    # Captured verbatim from scenario generation, never updated afterwards
    scenario: Mapped[str] = mapped_column(Text, nullable=False)
    scenario_context: Mapped[str] = mapped_column(Text, nullable=False)
    ideal_resolution: Mapped[str] = mapped_column(Text, nullable=False)
    scenario_details: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=SessionStatus.ACTIVE.value,
        index=True,
    )

    # Evaluation results, written together on completion
    score: Mapped[float | None] = mapped_column(Float, nullable=True)
    analysis: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    suggestions: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc, index=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True, index=True)

    messages: Mapped[list["Message"]] = relationship(
        "Message",
        back_populates="session",
        order_by="Message.sequence",
        lazy="noload",
    )

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE.value

    def __repr__(self) -> str:
        return f"<TrainingSession(id={self.id}, mode={self.mode}, status={self.status})>"

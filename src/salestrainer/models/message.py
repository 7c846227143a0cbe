"""Message model: one line of a training session's conversation log."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from salestrainer.models.training_session import TrainingSession

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salestrainer.core.db import Base
from salestrainer.utils.datetime import now_utc


class Message(Base):
    """Append-only conversation entry, ordered by a per-session sequence number."""

    __tablename__ = "messages"
    __table_args__ = (
        UniqueConstraint("session_id", "sequence", name="uq_messages_session_sequence"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("training_sessions.id"),
        nullable=False,
        index=True,
    )

    session: Mapped["TrainingSession"] = relationship(
        "TrainingSession",
        back_populates="messages",
    )

    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc)

    def __repr__(self) -> str:
        return f"<Message(session_id={self.session_id}, sequence={self.sequence}, role={self.role})>"

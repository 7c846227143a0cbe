"""Key/value settings table (holds the catalog snapshot)."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from salestrainer.core.db import Base


class AppSetting(Base):
    """Single-row-per-key settings store."""

    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)

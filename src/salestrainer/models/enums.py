"""
Enums for domain models.
Enums provide type safety and clarity. Validation for categorical fields.
"""

import enum


class SessionStatus(str, enum.Enum):
    """Training session lifecycle states. Transition is one-way ACTIVE -> COMPLETED."""

    ACTIVE = "active"
    COMPLETED = "completed"


class MessageRole(str, enum.Enum):
    """Speaker of a message in the roleplay."""

    USER = "user"
    ASSISTANT = "assistant"

"""Domain models package."""

from salestrainer.models.catalog_schemas import CatalogRead, CatalogUpload, CatalogUploadResult
from salestrainer.models.enums import MessageRole, SessionStatus
from salestrainer.models.evaluation_schemas import (
    SCORE_CATEGORIES,
    CompletionResult,
    Evaluation,
    Metrics,
)
from salestrainer.models.message import Message
from salestrainer.models.session_schemas import (
    MessageRead,
    Scenario,
    SessionCreate,
    SessionCreated,
    SessionDetail,
    SessionList,
    SessionRead,
    SessionSummary,
    TranscriptionResult,
    TurnCreate,
    TurnReply,
)
from salestrainer.models.setting import AppSetting
from salestrainer.models.training_session import TrainingSession

__all__ = [
    "AppSetting",
    "CatalogRead",
    "CatalogUpload",
    "CatalogUploadResult",
    "CompletionResult",
    "Evaluation",
    "Message",
    "MessageRead",
    "MessageRole",
    "Metrics",
    "SCORE_CATEGORIES",
    "Scenario",
    "SessionCreate",
    "SessionCreated",
    "SessionDetail",
    "SessionList",
    "SessionRead",
    "SessionStatus",
    "SessionSummary",
    "TrainingSession",
    "TranscriptionResult",
    "TurnCreate",
    "TurnReply",
]

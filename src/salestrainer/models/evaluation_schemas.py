"""Pydantic schemas for session evaluation and progress metrics."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Fixed rubric; the stored breakdown always has exactly these keys
SCORE_CATEGORIES: tuple[str, ...] = (
    "greeting",
    "needs_discovery",
    "product_matching",
    "objection_handling",
    "closing",
    "communication_clarity",
    "professionalism",
)


class Evaluation(BaseModel):
    """Structured evaluation of a completed session."""

    scores: dict[str, float] = Field(default_factory=dict)
    summary: str = ""
    suggestions: str = ""
    strengths: str = ""
    risks: str = ""


class CompletionResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    final_score: float | None
    evaluation: Evaluation


class Metrics(BaseModel):
    """Longitudinal progress across completed sessions."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    overall: float | None = None
    recent_improvement: float | None = None
    total_sessions: int = 0

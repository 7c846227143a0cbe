"""Session completion: transcript, structured scoring, normalization, persistence."""

import json
import math
from typing import Any
from uuid import UUID

from salestrainer.core.errors import InvalidStateError
from salestrainer.core.logging import get_logger
from salestrainer.llm.client import JSON_OBJECT, GenerativeClient
from salestrainer.models import SCORE_CATEGORIES, CompletionResult, Evaluation, Message
from salestrainer.services.locks import SessionLocks
from salestrainer.services.prompts import evaluation_messages
from salestrainer.services.session_store import SessionStore
from salestrainer.utils.numbers import mean, round_one_decimal

logger = get_logger(__name__)

EVALUATION_TEMPERATURE = 0.3
NEUTRAL_SCORE = 3.0
MIN_SCORE = 1.0
MAX_SCORE = 5.0

FALLBACK_EVALUATION = {
    "scores": {},
    "summary": "Evaluation could not be parsed. Please retry the session completion.",
    "suggestions": (
        "Ask the customer to clarify goals, confirm constraints, and summarize next steps."
    ),
    "strengths": "Stayed engaged with the customer.",
    "risks": "Missed structured evaluation due to parsing errors.",
}


def render_transcript(messages: list[Message]) -> str:
    """Role-prefixed lines in sequence order."""
    ordered = sorted(messages, key=lambda message: message.sequence)
    return "\n".join(f"{message.role}: {message.content}" for message in ordered)


def parse_evaluation(content: str | None) -> dict[str, Any] | None:
    """Decode the evaluator output; None when it is not a JSON object."""
    if not content:
        return None
    try:
        parsed = json.loads(content)
    except (ValueError, RecursionError):
        # JSONDecodeError, oversized integer literals, pathological nesting
        return None
    return parsed if isinstance(parsed, dict) else None


def _coerce_score(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except (OverflowError, ValueError):
        return None
    return number if math.isfinite(number) else None


def normalize_scores(scores: Any) -> dict[str, float]:
    """Exactly the fixed categories, each clamped to [1, 5] or defaulted to 3.

    Keys outside the rubric are dropped.
    """
    if not isinstance(scores, dict):
        scores = {}

    normalized = {}
    for category in SCORE_CATEGORIES:
        number = _coerce_score(scores.get(category))
        if number is None:
            normalized[category] = NEUTRAL_SCORE
        else:
            normalized[category] = min(MAX_SCORE, max(MIN_SCORE, number))
    return normalized


def calculate_final_score(scores: dict[str, float]) -> float | None:
    average = mean(value for value in scores.values() if isinstance(value, (int, float)))
    if average is None:
        return None
    return round_one_decimal(average)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        return "\n".join(f"- {_text(item)}" for item in value if _text(item))
    return json.dumps(value, ensure_ascii=False)


def build_evaluation(content: str | None) -> tuple[Evaluation, bool]:
    """Turn raw evaluator output into a normalized Evaluation.

    Returns the evaluation and whether the fixed fallback was used.
    """
    parsed = parse_evaluation(content)
    used_fallback = parsed is None
    if used_fallback:
        parsed = FALLBACK_EVALUATION

    evaluation = Evaluation(
        scores=normalize_scores(parsed.get("scores")),
        summary=_text(parsed.get("summary")),
        suggestions=_text(parsed.get("suggestions")),
        strengths=_text(parsed.get("strengths")),
        risks=_text(parsed.get("risks")),
    )
    return evaluation, used_fallback


class EvaluationEngine:
    """Completes a session exactly once and stores its evaluation."""

    def __init__(self, store: SessionStore, client: GenerativeClient, locks: SessionLocks):
        self.store = store
        self.client = client
        self.locks = locks

    async def complete(self, session_id: UUID | str) -> CompletionResult:
        session = await self.store.require(session_id)

        async with self.locks.lock_for(session.id):
            session = await self.store.require(session.id)
            if not session.is_active:
                raise InvalidStateError(
                    "Session is already completed",
                    details={"session_id": str(session.id), "status": session.status},
                )

            transcript = render_transcript(await self.store.messages(session.id))
            response = await self.client.complete(
                evaluation_messages(session, transcript),
                temperature=EVALUATION_TEMPERATURE,
                response_format=JSON_OBJECT,
            )

            evaluation, used_fallback = build_evaluation(response.content)
            if used_fallback:
                logger.warning("evaluation.fallback_used", session_id=str(session.id))

            final_score = calculate_final_score(evaluation.scores)
            analysis = {**evaluation.model_dump(), "finalScore": final_score}

            await self.store.complete(
                session.id,
                score=final_score,
                analysis=analysis,
                suggestions=evaluation.suggestions,
            )

        return CompletionResult(final_score=final_score, evaluation=evaluation)

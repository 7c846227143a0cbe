"""Longitudinal progress metrics over completed sessions."""

from typing import Sequence

from salestrainer.models import Metrics
from salestrainer.services.session_store import SessionStore
from salestrainer.utils.numbers import mean, round_one_decimal

TREND_WINDOW = 5


def compute_metrics(scores: Sequence[float]) -> Metrics:
    """Aggregate scores ordered most recently completed first.

    recent_improvement compares the newest TREND_WINDOW sessions with the
    TREND_WINDOW before them and needs both groups to be non-empty. Emptiness
    is checked on the groups, so a 0.0 average still counts.
    """
    if not scores:
        return Metrics(overall=None, recent_improvement=None, total_sessions=0)

    recent = list(scores[:TREND_WINDOW])
    previous = list(scores[TREND_WINDOW : TREND_WINDOW * 2])

    recent_improvement = None
    if recent and previous:
        recent_improvement = round_one_decimal(mean(recent) - mean(previous))

    return Metrics(
        overall=round_one_decimal(mean(scores)),
        recent_improvement=recent_improvement,
        total_sessions=len(scores),
    )


class MetricsAggregator:
    def __init__(self, store: SessionStore):
        self.store = store

    async def metrics(self) -> Metrics:
        return compute_metrics(await self.store.completed_scores())

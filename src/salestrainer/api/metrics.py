"""Progress metrics endpoint."""

from fastapi import APIRouter, Depends

from salestrainer.api.deps import get_metrics_aggregator
from salestrainer.models import Metrics
from salestrainer.services.metrics import MetricsAggregator

router = APIRouter(prefix="/api/metrics", tags=["metrics"])


@router.get("", response_model=Metrics)
async def get_metrics(aggregator: MetricsAggregator = Depends(get_metrics_aggregator)):
    """Overall average and recent-vs-previous trend across completed sessions."""
    return await aggregator.metrics()

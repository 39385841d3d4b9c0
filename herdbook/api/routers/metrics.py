# herdbook/api/routers/metrics.py

from typing import Annotated

from fastapi import APIRouter, Depends

from herdbook.api.dependencies import get_metrics
from herdbook.observability.metrics import MetricsCollector

router = APIRouter()


@router.get("/metrics")
async def metrics(collector: Annotated[MetricsCollector, Depends(get_metrics)]):
    """In-process mutation counters and latency summaries."""
    return collector.export_metrics()

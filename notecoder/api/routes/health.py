"""Health check and monitoring routes"""
import time
from datetime import datetime
from typing import List

from fastapi import APIRouter, Request
from fastapi.responses import Response
from prometheus_client import generate_latest

from notecoder import __version__
from notecoder.api.schemas import HealthResponse
from notecoder.config.raf_table import RafTable


def create_health_router(
    start_time: float,
    raf_table: RafTable,
    enabled_conditions: List[str],
    classifier_enabled: bool = False,
) -> APIRouter:
    """Create health check router.

    Args:
        start_time: Server start time for uptime calculation
        raf_table: Weight table the engine is using
        enabled_conditions: Condition values this deployment accepts
        classifier_enabled: Whether an external classifier is configured

    Returns:
        FastAPI router with health endpoints
    """
    router = APIRouter()

    @router.get("/api/v1/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """Health check endpoint"""
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(),
            version=__version__,
            uptime=time.time() - start_time,
            system_info={
                "enabled_conditions": list(enabled_conditions),
                "classifier_enabled": classifier_enabled,
            },
            engine_status={
                "raf_table": raf_table.source,
                "raf_codes": len(raf_table.weights),
                "pmpy_dollars": raf_table.pmpy_dollars,
                "status": "running",
            },
        )

    @router.get("/metrics")
    async def get_metrics():
        """Prometheus metrics endpoint"""
        return Response(generate_latest(), media_type="text/plain")

    return router

"""Tests for health check routes"""
import time
from fastapi import FastAPI
from fastapi.testclient import TestClient

from notecoder.api.routes.health import create_health_router
from notecoder.config.raf_table import RafTable


def _client(**kwargs):
    router = create_health_router(
        start_time=time.time(),
        raf_table=RafTable(weights={"F33.1": 0.309}, source="test.yaml"),
        enabled_conditions=["mdd", "ckd"],
        **kwargs,
    )
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


class TestHealthRoutes:
    """Test health check and metrics endpoints"""

    def test_health_check_returns_healthy(self):
        """Should return healthy status"""
        response = _client().get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "uptime" in data
        assert "version" in data

    def test_health_reports_engine_configuration(self):
        """Should describe the RAF table and enabled conditions"""
        data = _client(classifier_enabled=True).get("/api/v1/health").json()
        assert data["system_info"]["enabled_conditions"] == ["mdd", "ckd"]
        assert data["system_info"]["classifier_enabled"] is True
        assert data["engine_status"]["raf_table"] == "test.yaml"
        assert data["engine_status"]["raf_codes"] == 1

    def test_metrics_endpoint(self):
        """Should return Prometheus metrics"""
        response = _client().get("/metrics")
        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]

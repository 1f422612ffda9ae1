"""Tests for the note analysis API"""
import pytest
from fastapi.testclient import TestClient

from notecoder.api.main import create_app
from notecoder.config.settings import ENABLED_CONDITIONS_ENV
from notecoder.core.exceptions import ClassifierError
from notecoder.core.ports.classifier import ClassifierPort

API_KEY = "test-api-key"


class FailingClassifier(ClassifierPort):
    async def classify(self, note_text, condition):
        raise ClassifierError("provider unavailable")


@pytest.fixture(autouse=True)
def api_env(monkeypatch):
    monkeypatch.setenv("API_KEY", API_KEY)
    monkeypatch.delenv(ENABLED_CONDITIONS_ENV, raising=False)


@pytest.fixture
def client():
    return TestClient(create_app())


@pytest.fixture
def headers():
    return {"Authorization": f"Bearer {API_KEY}"}


class TestAuthentication:
    def test_missing_token_rejected(self, client):
        response = client.post("/api/v1/analyze", json={"noteText": "MDD"})
        assert response.status_code in (401, 403)

    def test_wrong_token_rejected(self, client):
        response = client.post(
            "/api/v1/analyze",
            json={"noteText": "MDD"},
            headers={"Authorization": "Bearer wrong"},
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid authentication credentials"

    def test_health_is_public(self, client):
        assert client.get("/api/v1/health").status_code == 200


class TestAnalyzeEndpoint:
    def test_mdd_response_shape(self, client, headers):
        response = client.post(
            "/api/v1/analyze",
            json={"noteText": "Major depressive disorder, moderate, recurrent", "conditionType": "mdd"},
            headers=headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["conditionType"] == "mdd"
        assert data["valid"] is True
        assert data["icd10"] == "F33.1"
        assert data["rafStatus"] == "complete"
        assert data["rafDollarImpact"] == 0
        assert data["presentComponents"] == ["major_keyword", "severity", "episode_type"]
        assert data["missingComponents"] == []
        assert data["hasSI"] is False
        assert "chfType" not in data
        assert "sudSubstance" not in data

    def test_condition_defaults_to_mdd(self, client, headers):
        response = client.post("/api/v1/analyze", json={"noteText": "CKD stage 4"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["conditionType"] == "mdd"

    def test_auto_detection(self, client, headers):
        response = client.post(
            "/api/v1/analyze",
            json={"noteText": "CHF, EF 35%, chronic", "conditionType": "auto"},
            headers=headers,
        )
        data = response.json()
        assert data["conditionType"] == "chf"
        assert data["chfType"] == "systolic"
        assert "hasSI" not in data

    def test_incomplete_note_reports_gap(self, client, headers):
        data = client.post(
            "/api/v1/analyze",
            json={"noteText": "CKD, follows with nephrology", "conditionType": "ckd"},
            headers=headers,
        ).json()
        assert data["valid"] is False
        assert data["missingComponents"] == ["stage"]
        assert data["rafImpact"] == "medium"
        assert data["icd10"] == "N18.9"

    def test_unknown_condition(self, client, headers):
        response = client.post(
            "/api/v1/analyze",
            json={"noteText": "note", "conditionType": "asthma"},
            headers=headers,
        )
        assert response.status_code == 422

    @pytest.mark.parametrize("note", ["", "   "])
    def test_blank_note(self, client, headers, note):
        response = client.post("/api/v1/analyze", json={"noteText": note}, headers=headers)
        assert response.status_code == 422

    def test_disabled_condition(self, monkeypatch, headers):
        monkeypatch.setenv(ENABLED_CONDITIONS_ENV, "mdd,ckd")
        client = TestClient(create_app())
        response = client.post(
            "/api/v1/analyze",
            json={"noteText": "CHF", "conditionType": "chf"},
            headers=headers,
        )
        assert response.status_code == 422
        assert "conditionType must be one of: mdd, ckd, auto" == response.json()["message"]

    def test_failing_classifier_falls_back(self, headers):
        client = TestClient(create_app(classifier=FailingClassifier()))
        response = client.post(
            "/api/v1/analyze",
            json={"noteText": "CKD stage 4", "conditionType": "ckd"},
            headers=headers,
        )
        assert response.status_code == 200
        assert response.json()["icd10"] == "N18.4"

    def test_analysis_counted(self, client, headers):
        client.post("/api/v1/analyze", json={"noteText": "COPD", "conditionType": "copd"}, headers=headers)
        metrics = client.get("/metrics").text
        assert "notecoder_analyses_total" in metrics


class TestConditionsEndpoint:
    def test_lists_enabled_conditions(self, client):
        data = client.get("/api/v1/conditions").json()
        conditions = {c["conditionType"]: c for c in data["conditions"]}
        assert list(conditions) == ["mdd", "chf", "copd", "ckd", "diabetes", "opioid_sud"]
        assert conditions["ckd"]["components"] == ["stage"]
        assert conditions["mdd"]["autoDetected"] is True
        assert conditions["opioid_sud"]["autoDetected"] is False

"""Tests for the question answering endpoints."""
from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from web.app import create_app
from web.config import WebConfig


@pytest.fixture()
def client(tmp_path, monkeypatch):
    """TestClient with the engine writing into a temporary data dir."""
    monkeypatch.setattr(WebConfig, "DATA_DIR", str(tmp_path / "data"))
    with TestClient(create_app()) as c:
        yield c


class TestAsk:
    def test_temperature_question(self, client: TestClient) -> None:
        response = client.post("/api/v1/ask", json={
            "question": "Can I use it at 25F?", "material_id": "gaf-tpo-60",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["intent"] == "temperature-check"
        assert data["materials"][0]["id"] == "gaf-tpo-60"
        assert data["constraint_violations"][0]["severity"] == "error"

    def test_compatibility_question(self, client: TestClient) -> None:
        response = client.post("/api/v1/ask", json={"question": "Is EPDM compatible with asphalt?"})
        assert response.status_code == 200
        data = response.json()
        assert data["answer"] == "These materials are NOT compatible."
        assert data["compatibility_issues"][0]["status"] == "incompatible"

    def test_context_conditions(self, client: TestClient) -> None:
        response = client.post("/api/v1/ask", json={
            "question": "What temperature for TPO?",
            "material_ids": ["gaf-tpo-60"],
            "conditions": {"temperature": 100},
        })
        assert response.status_code == 200
        assert response.json()["constraint_violations"][0]["severity"] == "warning"

    def test_blank_question(self, client: TestClient) -> None:
        response = client.post("/api/v1/ask", json={"question": "   "})
        assert response.status_code == 400

    def test_missing_question(self, client: TestClient) -> None:
        response = client.post("/api/v1/ask", json={})
        assert response.status_code == 422

    def test_invalid_humidity(self, client: TestClient) -> None:
        response = client.post("/api/v1/ask", json={
            "question": "Will it blister?", "conditions": {"humidity": 150},
        })
        assert response.status_code == 422


class TestParse:
    def test_parse(self, client: TestClient) -> None:
        response = client.post("/api/v1/parse", json={"question": "Can I use EPDM at 25F?"})
        assert response.status_code == 200
        data = response.json()
        assert data["intent"] == "temperature-check"
        assert data["entities"]["chemistries"] == ["epdm"]
        assert data["entities"]["temperatures"] == [{"value": 25, "unit": "F"}]
        assert data["confidence"] == 0.9


class TestEngineOffload:
    def test_engine_calls_run_in_worker_thread(self, client: TestClient, monkeypatch) -> None:
        calls = []
        original = asyncio.to_thread

        async def recording_to_thread(func, *args, **kwargs):
            calls.append(func.__name__)
            return await original(func, *args, **kwargs)

        monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)
        client.post("/api/v1/ask", json={"question": "Is EPDM compatible with asphalt?"})
        client.post("/api/v1/parse", json={"question": "Will TPO shrink?"})
        client.post("/api/v1/compatibility", json={
            "material_id_1": "car-epdm-60", "material_id_2": "gaf-tpo-60",
        })
        client.get("/api/v1/materials")
        client.get("/api/v1/materials/car-epdm-60")
        client.get("/api/v1/materials/car-epdm-60/failures")
        assert calls == ["ask", "parse", "check_compatibility", "list_materials",
                         "get_material", "predict_failures"]


class TestResponseModels:
    @pytest.mark.parametrize("path,method,model", [
        ("/api/v1/health", "get", "HealthResponse"),
        ("/api/v1/ask", "post", "AskResponse"),
        ("/api/v1/parse", "post", "ParseResponse"),
        ("/api/v1/materials", "get", "MaterialListResponse"),
        ("/api/v1/materials/{material_id}", "get", "MaterialDetailResponse"),
        ("/api/v1/materials/{material_id}/failures", "get", "FailurePredictionResponse"),
        ("/api/v1/compatibility", "post", "CompatibilityResponse"),
    ])
    def test_openapi_declares_model(self, client: TestClient, path, method, model) -> None:
        schema = client.get("/openapi.json").json()
        response = schema["paths"][path][method]["responses"]["200"]
        assert response["content"]["application/json"]["schema"]["$ref"] == f"#/components/schemas/{model}"

    def test_ask_response_shape(self, client: TestClient) -> None:
        data = client.post("/api/v1/ask", json={"question": "Hello there"}).json()
        assert set(data) == {
            "question", "intent", "answer", "explanation", "materials", "failure_modes",
            "compatibility_issues", "constraint_violations", "recommendations", "warnings",
            "confidence", "sources",
        }

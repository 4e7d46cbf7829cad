"""Tests for the assembled application."""

from fastapi.testclient import TestClient

from recording_identity.main import app
from recording_identity.reconciliation import ReconciliationReportBuilder
from recording_identity.weeks import WeekInferencer


def test_lifespan_attaches_engines() -> None:
    """Startup should build the engines the routes depend on."""
    with TestClient(app):
        assert isinstance(app.state.week_inferencer, WeekInferencer)
        assert isinstance(app.state.report_builder, ReconciliationReportBuilder)


def test_health_check() -> None:
    with TestClient(app) as client:
        response = client.get("/health/")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == "0.1.0"
    assert data["environment"] == "development"


def test_routes_mounted() -> None:
    paths = {getattr(route, "path", None) for route in app.routes}

    assert {"/health/ready", "/weeks/infer", "/reconciliation/report"} <= paths


def test_infer_through_app() -> None:
    with TestClient(app) as client:
        response = client.post(
            "/weeks/infer",
            json={
                "recordings": [
                    {
                        "primary_id": "rec-1",
                        "title": "Jenny <> Aditi Week 3",
                        "source_tag": "cloud-api",
                    }
                ]
            },
        )

    assert response.status_code == 200
    assert response.json()["results"][0]["week_number"] == 3

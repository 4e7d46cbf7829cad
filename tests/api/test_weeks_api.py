"""Tests for week inference API endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from recording_identity.api.weeks import router
from recording_identity.weeks import WeekInferencer


@pytest.fixture
def test_client():
    """Create test client with a real inferencer."""
    app = FastAPI()
    app.include_router(router)
    app.state.week_inferencer = WeekInferencer()
    return TestClient(app)


def _recording(key: str, start_time: str | None = None, title: str = "Jenny <> Aditi"):
    return {
        "primary_id": key,
        "title": title,
        "timestamp": start_time,
        "source_tag": "cloud-api",
    }


class TestInferEndpoint:
    """Tests for POST /weeks/infer endpoint."""

    def test_week_from_program_start(self, test_client):
        response = test_client.post(
            "/weeks/infer",
            json={
                "recordings": [_recording("rec-1", "2024-01-30T15:00:00Z")],
                "program_start_date": "2024-01-01",
            },
        )

        assert response.status_code == 200
        result = response.json()["results"][0]
        assert result["recording_key"] == "rec-1"
        assert result["week_number"] == 5
        assert result["method"] == "timestamp_analysis"
        assert result["confidence"] == 100

    def test_anchors_interpolate_between_siblings(self, test_client):
        """Submitted recordings act as siblings of each other."""
        response = test_client.post(
            "/weeks/infer",
            json={
                "recordings": [
                    _recording("rec-1", "2024-01-01T15:00:00Z"),
                    _recording("rec-2", "2024-01-08T15:00:00Z"),
                    _recording("rec-3", "2024-01-15T15:00:00Z"),
                ],
                "coach_name": "Jenny Duan",
                "student_name": "Aditi Bhaskar",
                "anchor_weeks": {"rec-1": 2, "rec-3": 4},
            },
        )

        assert response.status_code == 200
        middle = response.json()["results"][1]
        assert middle["week_number"] == 3
        assert middle["method"] == "interpolation"

    def test_no_evidence_falls_back_to_week_one(self, test_client):
        response = test_client.post(
            "/weeks/infer",
            json={"recordings": [_recording("rec-1")], "use_siblings": False},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["results"][0]["week_number"] == 1
        assert data["results"][0]["method"] == "default_fallback"
        assert data["stats"]["total"] == 1
        assert data["stats"]["by_method"] == {"default_fallback": 1}
        assert data["stats"]["low_confidence"] == 1

    def test_results_keep_request_order(self, test_client):
        response = test_client.post(
            "/weeks/infer",
            json={
                "recordings": [
                    _recording("late", "2024-02-20T15:00:00Z"),
                    _recording("early", "2024-01-02T15:00:00Z"),
                ],
                "program_start_date": "2024-01-01",
            },
        )

        keys = [r["recording_key"] for r in response.json()["results"]]
        assert keys == ["late", "early"]

    def test_invalid_recording_returns_422(self, test_client):
        """Recordings must carry a source tag."""
        response = test_client.post(
            "/weeks/infer",
            json={"recordings": [{"primary_id": "rec-1"}]},
        )

        assert response.status_code == 422

"""API 集成测试"""
import uuid

import pytest
from fastapi.testclient import TestClient

from app.main import app

AUTH = {"Authorization": "Bearer test-key"}


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user_id():
    return f"user-{uuid.uuid4().hex[:8]}"


def ingest(client, user_id, records):
    return client.post("/api/v1/analysis/metrics", json={"user_id": user_id, "records": records}, headers=AUTH)


CUSTOM_WINDOW = {
    "time_range": "custom",
    "start_date": "2024-01-01T00:00:00Z",
    "end_date": "2024-01-10T00:00:00Z",
}


class TestAuth:
    def test_missing_token(self, client):
        assert client.get("/health").status_code == 401

    def test_wrong_token(self, client):
        response = client.get("/health", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401

    def test_health_reports_cache(self, client):
        response = client.get("/health", headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["cache"]["enabled"] is True
        assert body["cache"]["sweeper_running"] is True


class TestBatchAnalysis:
    def test_batch(self, client, scenario_records):
        response = client.post("/api/v1/analysis/batch", json={"records": scenario_records}, headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["result"]["risk"]["medium_risk"] == 1
        assert body["result"]["risk"]["risk_level"] == "medium"

    def test_batch_repeat_is_cached(self, client, scenario_records):
        payload = {"records": scenario_records, "options": {"time_range": "14d"}}
        client.post("/api/v1/analysis/batch", json=payload, headers=AUTH)

        response = client.post("/api/v1/analysis/batch", json=payload, headers=AUTH)

        assert response.json()["cached"] is True

    def test_empty_batch_is_no_data(self, client):
        response = client.post("/api/v1/analysis/batch", json={"records": []}, headers=AUTH)

        assert response.status_code == 404

    def test_malformed_record(self, client):
        records = [{"id": "1", "provider": "instagram", "timestamp": "2024-01-01T00:00:00Z"}]
        response = client.post("/api/v1/analysis/batch", json={"records": records}, headers=AUTH)

        assert response.status_code == 400
        assert "index 0" in response.json()["detail"]


class TestStoredAnalysis:
    def test_ingest_upserts(self, client, user_id, scenario_records):
        first = ingest(client, user_id, scenario_records)
        second = ingest(client, user_id, scenario_records[:1])

        assert first.json() == {"inserted": 3, "updated": 0}
        assert second.json() == {"inserted": 0, "updated": 1}

    def test_run_and_manage(self, client, user_id, scenario_records):
        ingest(client, user_id, scenario_records)

        response = client.post("/api/v1/analysis/run", json={"user_id": user_id, **CUSTOM_WINDOW}, headers=AUTH)
        assert response.status_code == 200
        stored = response.json()
        assert stored["user_id"] == user_id
        assert stored["post_ids"] == ["1", "2", "3"]
        assert stored["metrics"]["engagement"]["total_posts"] == 3
        assert stored["metrics"]["risk"]["medium_risk"] == 1
        assert stored["cached"] is False

        listing = client.get("/api/v1/analysis", params={"user_id": user_id}, headers=AUTH).json()
        assert [item["id"] for item in listing] == [stored["id"]]
        assert listing[0]["risk_level"] == "medium"

        fetched = client.get(f"/api/v1/analysis/{stored['id']}", headers=AUTH)
        assert fetched.status_code == 200
        assert fetched.json()["metrics"] == stored["metrics"]

        report = client.get(f"/api/v1/analysis/{stored['id']}/report", headers=AUTH).json()
        assert report["report"]["sentiment"]["positive_pct"] == 66.7

        assert client.delete(f"/api/v1/analysis/{stored['id']}", headers=AUTH).status_code == 200
        assert client.get(f"/api/v1/analysis/{stored['id']}", headers=AUTH).status_code == 404

    def test_run_filters_by_provider(self, client, user_id, scenario_records):
        records = [dict(scenario_records[0], provider="twitter")] + scenario_records[1:]
        ingest(client, user_id, records)

        response = client.post(
            "/api/v1/analysis/run",
            json={"user_id": user_id, "provider": "twitter", **CUSTOM_WINDOW},
            headers=AUTH,
        )

        assert response.status_code == 200
        assert response.json()["post_ids"] == ["1"]

    def test_run_without_data(self, client, user_id):
        response = client.post("/api/v1/analysis/run", json={"user_id": user_id, **CUSTOM_WINDOW}, headers=AUTH)

        assert response.status_code == 404

    def test_custom_range_requires_dates(self, client, user_id):
        response = client.post(
            "/api/v1/analysis/run",
            json={"user_id": user_id, "time_range": "custom", "start_date": "2024-01-01T00:00:00Z"},
            headers=AUTH,
        )

        assert response.status_code == 400

    def test_unknown_analysis(self, client):
        missing = uuid.uuid4()

        assert client.get(f"/api/v1/analysis/{missing}", headers=AUTH).status_code == 404
        assert client.delete(f"/api/v1/analysis/{missing}", headers=AUTH).status_code == 404

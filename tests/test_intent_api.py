"""Tests for the intent data API routes."""

import pytest
from fastapi.testclient import TestClient

from dashboard.api.main import app
from dashboard.api.routers.intent import get_store, get_store_factory
from scripts.lib.config import Settings, get_settings
from fake_supabase import FakeSupabase

ROWS = [
    {"id": 1, "date": "2024-01-01", "company_name": "Acme", "topic": "cloud",
     "category": "Tech", "score": 80, "week_label": "Week A"},
    {"id": 2, "date": "2024-01-08", "company_name": "Acme", "topic": "cloud",
     "category": "Tech", "score": 60, "week_label": "Week B"},
    {"id": 3, "date": "2024-01-09", "company_name": "Globex", "topic": "security",
     "category": "Tech", "score": 90, "week_label": "Week B"},
]


@pytest.fixture
def api(settings):
    """TestClient wired to an in-memory store; override .store / .settings per test."""
    state = {"store": FakeSupabase(), "settings": settings}
    app.dependency_overrides[get_store] = lambda: state["store"]
    app.dependency_overrides[get_store_factory] = lambda: lambda: state["store"]
    app.dependency_overrides[get_settings] = lambda: state["settings"]
    client = TestClient(app)
    client.state = state
    yield client
    app.dependency_overrides.clear()


def _upload(api, text, filename="intent.csv", **params):
    return api.post(
        "/api/intent/upload",
        files={"file": (filename, text.encode("utf-8"), "text/csv")},
        params=params,
    )


class TestUpload:
    def test_saves_every_record(self, api, sample_csv):
        resp = _upload(api, sample_csv, week_label="Week 1")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["processed"] == 4
        assert body["inserted_count"] == 4
        assert body["total_batches"] == 1
        assert body["week_label"] == "Week 1"
        assert body["error"] is None
        assert body["records"] == []
        assert {r["week_label"] for r in api.state["store"].rows} == {"Week 1"}

    def test_defaults_to_current_week(self, api, sample_csv):
        body = _upload(api, sample_csv).json()
        assert body["week_label"].startswith("Week of ")

    def test_include_records(self, api, sample_csv):
        body = _upload(api, sample_csv, include_records="true").json()
        assert [r["company_name"] for r in body["records"]] == ["Acme", "Acme", "Globex", ""]
        assert body["records"][-1]["score"] is None

    def test_partial_save(self, api, sample_csv, settings):
        api.state["settings"] = settings.model_copy(update={"batch_size": 2})
        api.state["store"] = FakeSupabase(fail_batches={2})
        resp = _upload(api, sample_csv)
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "partial"
        assert body["inserted_count"] == 2
        assert body["failed_batches"] == 1
        assert body["message"] == "Processed 4 records; 2 could not be saved"
        assert body["error"]["code"] == "INSERT_PARTIAL"

    def test_total_failure_returns_parsed_records(self, api, sample_csv):
        api.state["store"] = FakeSupabase(fail_batches={1})
        resp = _upload(api, sample_csv)
        assert resp.status_code == 502
        body = resp.json()
        assert body["status"] == "failed"
        assert body["inserted_count"] == 0
        assert body["error"]["code"] == "INSERT_FAILED"
        assert len(body["records"]) == 4

    def test_missing_columns(self, api):
        resp = _upload(api, "Date,Company Name,Topic\n2024-01-01,Acme,cloud\n")
        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert detail["code"] == "FORMAT_INVALID"
        assert detail["details"]["missing_columns"] == ["Category", "Score"]
        assert api.state["store"].insert_calls == 0

    def test_rejects_non_csv(self, api, sample_csv):
        resp = _upload(api, sample_csv, filename="intent.xlsx")
        assert resp.status_code == 400

    def test_store_not_configured_keeps_parsed_records(self, sample_csv):
        app.dependency_overrides[get_settings] = lambda: Settings(supabase_url="", supabase_key="")
        try:
            resp = _upload(TestClient(app), sample_csv)
        finally:
            app.dependency_overrides.clear()
        assert resp.status_code == 502
        body = resp.json()
        assert body["status"] == "failed"
        assert body["inserted_count"] == 0
        assert body["error"]["code"] == "INSERT_FAILED"
        assert "SUPABASE_URL" in body["error"]["message"]
        assert len(body["records"]) == 4

    def test_bad_header_is_rejected_without_a_store(self):
        app.dependency_overrides[get_settings] = lambda: Settings(supabase_url="", supabase_key="")
        try:
            resp = _upload(TestClient(app), "Date,Company\n2024-01-01,Acme\n")
        finally:
            app.dependency_overrides.clear()
        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "FORMAT_INVALID"

    def test_other_routes_report_missing_store(self):
        app.dependency_overrides[get_settings] = lambda: Settings(supabase_url="", supabase_key="")
        try:
            resp = TestClient(app).get("/api/intent/records")
        finally:
            app.dependency_overrides.clear()
        assert resp.status_code == 503


def test_preview(api):
    rows = "\n".join(f"2024-01-0{i},C{i},t,Tech,{60 + i}" for i in range(1, 6))
    resp = api.post(
        "/api/intent/preview",
        files={"file": ("intent.csv", f"Date,Company Name,Topic,Category,Score\n{rows}", "text/csv")},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 3
    assert [r["company_name"] for r in body["results"]] == ["C1", "C2", "C3"]
    assert api.state["store"].insert_calls == 0


class TestQueries:
    def test_records(self, api):
        api.state["store"] = FakeSupabase(ROWS)
        body = api.get("/api/intent/records", params={"week_label": "Week B"}).json()
        assert body["count"] == 2
        assert body["used_fallback"] is False
        assert [r["company_name"] for r in body["results"]] == ["Globex", "Acme"]

    def test_records_fallback_is_flagged(self, api):
        api.state["store"] = FakeSupabase(ROWS, fail_filtered=True)
        body = api.get("/api/intent/records").json()
        assert body["count"] == 3
        assert body["used_fallback"] is True

    def test_records_failure_is_an_error(self, api):
        api.state["store"] = FakeSupabase(ROWS, fail_selects=True)
        resp = api.get("/api/intent/records")
        assert resp.status_code == 503
        assert resp.json()["detail"]["code"] == "RETRIEVAL_FAILED"

    def test_weeks(self, api):
        api.state["store"] = FakeSupabase(ROWS)
        assert api.get("/api/intent/weeks").json() == {"results": ["Week B", "Week A"], "count": 2}

    def test_current_week(self, api):
        assert api.get("/api/intent/current-week").json()["week_label"].startswith("Week of ")

    def test_analytics(self, api):
        api.state["store"] = FakeSupabase(ROWS)
        body = api.get("/api/intent/analytics", params={"week_label": "Week B"}).json()
        assert body["total_records"] == 2
        assert body["stats"]["avg"] == 75
        assert [c["company"] for c in body["top_companies"]] == ["Globex", "Acme"]

    def test_analytics_limit_is_bounded(self, api):
        assert api.get("/api/intent/analytics", params={"limit": 0}).status_code == 422

    def test_opportunities(self, api):
        api.state["store"] = FakeSupabase(ROWS)
        body = api.get("/api/intent/opportunities").json()
        # "Tech" matches "HEALTH INFORMATION TECHNOLOGY"
        assert [o["company"] for o in body["results"]] == ["Globex", "Acme"]

    def test_trends_default_to_newest_weeks(self, api):
        api.state["store"] = FakeSupabase(ROWS)
        body = api.get("/api/intent/trends").json()
        assert body["current_week"] == "Week B"
        assert body["previous_week"] == "Week A"
        assert body["has_previous"] is True
        assert body["changes"]["unique_companies"] == 1

    def test_trends_without_data(self, api):
        assert api.get("/api/intent/trends").status_code == 404


class TestExport:
    def test_download(self, api):
        api.state["store"] = FakeSupabase(ROWS)
        resp = api.get("/api/intent/export", params={"week_label": "Week A"})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert "attachment; filename=\"intent_data_" in resp.headers["content-disposition"]
        lines = resp.text.splitlines()
        assert lines[0].startswith("Date,Company Name,Topic,Category,Score")
        assert lines[1].startswith("2024-01-01,Acme,cloud,Tech,80")

    def test_nothing_to_download(self, api):
        assert api.get("/api/intent/export").status_code == 404


def test_health(api):
    body = api.get("/api/health").json()
    assert body["status"] == "healthy"
    assert set(body["integrations"]) == {"supabase", "hubspot", "hubspot_paused"}

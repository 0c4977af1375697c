"""Tests for batched intent record persistence."""

import pytest

from models.intent_models import IntentRecord
from scripts.intent.ingest import save_intent_records, to_storage_row
from scripts.lib.config import Settings
from scripts.lib.errors import PartialInsertError, TotalInsertError
from fake_supabase import FakeSupabase


def _records(n):
    return [
        IntentRecord(date="2024-01-01", company_name=f"Co {i}", topic="cloud",
                     category="Tech", score=50 + i % 50)
        for i in range(n)
    ]


class TestToStorageRow:
    def test_renames_and_nulls_blank_optionals(self):
        row = to_storage_row(IntentRecord(date="2024-01-01", company_name="Acme",
                                          topic="cloud", category="Tech", score=80))
        assert row == {
            "date": "2024-01-01",
            "company_name": "Acme",
            "topic": "cloud",
            "category": "Tech",
            "score": 80,
            "website": None,
            "secondary_industry_hierarchical_category": None,
            "alexa_rank": None,
            "employees": None,
            "week_label": None,
        }

    def test_coerces_numeric_enrichment(self):
        record = IntentRecord(alexa_rank="12,345", employees="250 employees", website="acme.com")
        row = to_storage_row(record, week_label="Week 1", user_id="user-1")
        assert row["alexa_rank"] == 12345
        assert row["employees"] == 250
        assert row["website"] == "acme.com"
        assert row["week_label"] == "Week 1"
        assert row["user_id"] == "user-1"

    def test_non_numeric_enrichment_becomes_null(self):
        row = to_storage_row(IntentRecord(employees="unknown"))
        assert row["employees"] is None

    def test_unparsed_score_is_stored_as_null(self):
        assert to_storage_row(IntentRecord(score=None))["score"] is None


class TestSaveIntentRecords:
    def test_all_batches_succeed(self, settings, fake_store):
        result = save_intent_records(_records(120), week_label="Week 1",
                                     client=fake_store, settings=settings)
        assert result.status == "ok"
        assert result.error is None
        assert result.inserted_count == 120
        assert result.total_batches == 3
        assert fake_store.insert_calls == 3
        assert {r["week_label"] for r in fake_store.rows} == {"Week 1"}
        assert set(fake_store.tables) == {"intent_data"}

    def test_batches_are_inserted_in_order(self, settings, fake_store):
        save_intent_records(_records(120), client=fake_store, settings=settings)
        assert [r["company_name"] for r in fake_store.rows] == [f"Co {i}" for i in range(120)]

    def test_middle_batch_failure_is_partial(self, settings):
        store = FakeSupabase(fail_batches={2})
        result = save_intent_records(_records(120), client=store, settings=settings)

        assert store.insert_calls == 3  # later batches still attempted
        # batches 1 and 3 saved: 50 + 20
        assert result.inserted_count == 70
        assert result.failed_batches == 1
        assert result.status == "partial"
        assert isinstance(result.error, PartialInsertError)
        assert "70 rows were saved" in result.message

    def test_every_batch_failing_is_total(self, settings):
        store = FakeSupabase(fail_batches={1, 2, 3})
        result = save_intent_records(_records(120), client=store, settings=settings)

        assert result.inserted_count == 0
        assert result.status == "failed"
        assert isinstance(result.error, TotalInsertError)
        assert "insert batch 1 rejected" in result.message
        assert store.rows == []

    def test_unconfigured_store_is_total_failure(self):
        result = save_intent_records(_records(120), settings=Settings())
        assert result.status == "failed"
        assert result.inserted_count == 0
        assert result.total_batches == 3
        assert result.failed_batches == 3
        assert isinstance(result.error, TotalInsertError)
        assert "SUPABASE_URL" in result.message

    def test_batch_size_comes_from_settings(self, settings, fake_store):
        small = settings.model_copy(update={"batch_size": 10})
        result = save_intent_records(_records(25), client=fake_store, settings=small)
        assert result.total_batches == 3
        assert fake_store.insert_calls == 3

    def test_no_records_skips_the_store(self, settings):
        result = save_intent_records([], client=None, settings=settings)
        assert result.status == "ok"
        assert result.inserted_count == 0
        assert result.total_batches == 0

    def test_invalid_scores_are_persisted(self, settings, fake_store):
        records = [IntentRecord(company_name="Acme", score=None)]
        result = save_intent_records(records, client=fake_store, settings=settings)
        assert result.inserted_count == 1
        assert fake_store.rows[0]["score"] is None


@pytest.mark.parametrize("fail,inserted,status", [
    (set(), 45, "ok"),
    ({1}, 0, "failed"),
])
def test_single_batch_outcomes(settings, fail, inserted, status):
    store = FakeSupabase(fail_batches=fail)
    result = save_intent_records(_records(45), client=store, settings=settings)
    assert result.inserted_count == inserted
    assert result.status == status

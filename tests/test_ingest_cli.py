"""Tests for the intent CSV ingest script."""

import pytest

import scripts.ingest_intent_csv as cli
from scripts.lib import supabase_client
from scripts.lib.config import Settings
from scripts.lib.errors import ConfigError
from fake_supabase import FakeSupabase


@pytest.fixture
def csv_file(tmp_path, sample_csv):
    path = tmp_path / "intent_export.csv"
    path.write_text(sample_csv, encoding="utf-8")
    return path


@pytest.fixture
def store(monkeypatch, settings):
    fake = FakeSupabase()
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    monkeypatch.setattr(supabase_client, "_client", fake)
    return fake


def test_dry_run_saves_nothing(csv_file, store):
    assert cli.main([str(csv_file), "--dry-run"]) == 0
    assert store.insert_calls == 0


def test_saves_with_week_label(csv_file, store):
    assert cli.main([str(csv_file), "--week", "Week 1"]) == 0
    assert len(store.rows) == 4
    assert {r["week_label"] for r in store.rows} == {"Week 1"}


def test_total_failure_exits_nonzero(csv_file, store):
    store.fail_batches = {1}
    assert cli.main([str(csv_file)]) == 1


def test_partial_save_still_succeeds(csv_file, store, settings, monkeypatch):
    monkeypatch.setattr(cli, "get_settings", lambda: settings.model_copy(update={"batch_size": 2}))
    store.fail_batches = {2}
    assert cli.main([str(csv_file)]) == 0
    assert len(store.rows) == 2


def test_missing_file(tmp_path, store):
    assert cli.main([str(tmp_path / "missing.csv")]) == 1


def test_wrong_extension(tmp_path, store):
    path = tmp_path / "intent.txt"
    path.write_text("Date,Company Name,Topic,Category,Score\n", encoding="utf-8")
    assert cli.main([str(path)]) == 1


def test_bad_header(tmp_path, store):
    path = tmp_path / "intent.csv"
    path.write_text("Date,Company\n2024-01-01,Acme\n", encoding="utf-8")
    assert cli.main([str(path)]) == 1
    assert store.insert_calls == 0


def test_unconfigured_store_exits_nonzero(csv_file, monkeypatch):
    monkeypatch.setattr(cli, "get_settings", lambda: Settings(log_to_file=False))
    assert cli.main([str(csv_file), "--week", "Week 1"]) == 1


def test_store_errors_are_reported_not_raised(csv_file, monkeypatch, settings):
    def unreachable(*args, **kwargs):
        raise ConfigError("Could not create Supabase client: Invalid URL", setting="SUPABASE_URL")

    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    monkeypatch.setattr(cli, "save_intent_records", unreachable)
    assert cli.main([str(csv_file)]) == 1


def test_non_utf8_file(tmp_path, store):
    path = tmp_path / "intent.csv"
    path.write_bytes(b"Date,Company Name,Topic,Category,Score\n2024-01-01,Caf\xe9,cloud,Tech,80\n")
    assert cli.main([str(path)]) == 1
    assert store.insert_calls == 0

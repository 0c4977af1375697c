"""
Pytest configuration and shared fixtures.
"""
import os

os.environ.setdefault("LOG_TO_FILE", "false")

import pytest

from scripts.lib.config import Settings, reset_settings
from scripts.lib.supabase_client import reset_client
from fake_supabase import FakeSupabase

SAMPLE_CSV = (
    "Date,Company Name,Topic,Category,Score\n"
    "2024-01-01,Acme,cloud,Tech,80\n"
    "2024-01-01,Acme,security,Tech,60\n"
    "2024-01-02,Globex,cloud,Tech,90\n"
    "bad,,,,notanumber\n"
)


@pytest.fixture(autouse=True)
def _reset_singletons():
    reset_settings()
    reset_client()
    yield
    reset_settings()
    reset_client()


@pytest.fixture
def settings():
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_key="test-key",
        batch_size=50,
        log_to_file=False,
    )


@pytest.fixture
def fake_store():
    return FakeSupabase()


@pytest.fixture
def sample_csv():
    return SAMPLE_CSV

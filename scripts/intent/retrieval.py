"""
Intent Signal Hub — Intent Retrieval
======================================

Reads persisted intent rows back as IntentRecords.

fetch_intent_records() filters by exact date and/or week label. When the
filtered query fails it retries once with a plain select and applies the
filters in Python. If that fails too, the caller gets a RetrievalResult
carrying the RetrievalError, never a silent empty list.

Usage:
    from scripts.intent.retrieval import fetch_intent_records
    result = fetch_intent_records(week_label="Week of Oct 18 - Oct 24, 2026")
    if not result.ok:
        ...
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.intent_models import IntentRecord
from scripts.lib.config import Settings, get_settings
from scripts.lib.errors import RetrievalError
from scripts.lib.logger import setup_logger

logger = setup_logger("intent_retrieval")


@dataclass
class RetrievalResult:
    """Records from the store, or the error that prevented fetching them."""
    records: List[IntentRecord] = field(default_factory=list)
    error: Optional[RetrievalError] = None
    used_fallback: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


def _as_text(val: Any) -> str:
    return "" if val is None else str(val)


def row_to_record(row: Dict) -> IntentRecord:
    """Convert an intent_data row to an IntentRecord; absent fields become ""."""
    score = row.get("score")
    return IntentRecord(
        id=_as_text(row.get("id")) or None,
        date=_as_text(row.get("date")),
        company_name=_as_text(row.get("company_name")),
        topic=_as_text(row.get("topic")),
        category=_as_text(row.get("category")),
        score=int(score) if score is not None else None,
        website=_as_text(row.get("website")),
        secondary_industry_hierarchical_category=_as_text(
            row.get("secondary_industry_hierarchical_category")
        ),
        alexa_rank=_as_text(row.get("alexa_rank")),
        employees=_as_text(row.get("employees")),
        week_label=_as_text(row.get("week_label")),
    )


def _matches_filters(row: Dict, date: Optional[str], week_label: Optional[str]) -> bool:
    if date and row.get("date") != date:
        return False
    if week_label and row.get("week_label") != week_label:
        return False
    return True


def fetch_intent_records(
    date: Optional[str] = None,
    week_label: Optional[str] = None,
    client=None,
    settings: Optional[Settings] = None,
) -> RetrievalResult:
    """
    Fetch intent records, newest date first.

    Args:
        date: Only rows whose date equals this value.
        week_label: Only rows tagged with this week label.
        client: Supabase client (default: shared client from settings).
        settings: Table name (default: process settings).

    Returns:
        RetrievalResult; check .ok before trusting an empty .records.
    """
    settings = settings or get_settings()
    table = settings.intent_table

    if client is None:
        try:
            from scripts.lib.supabase_client import get_client
            client = get_client(settings)
        except Exception as e:
            logger.error("Intent store unavailable: %s", e)
            return RetrievalResult(
                error=RetrievalError("Intent store unavailable", source=table, cause=e),
            )

    try:
        query = client.table(table).select("*")
        if date:
            query = query.eq("date", date)
        if week_label:
            query = query.eq("week_label", week_label)
        result = query.order("date", desc=True).execute()
        rows = result.data or []
        logger.info(
            "Fetched %d intent rows (date=%s, week=%s)", len(rows), date, week_label,
        )
        return RetrievalResult(records=[row_to_record(r) for r in rows])
    except Exception as e:
        logger.warning("Filtered intent fetch failed, retrying without filters: %s", e)
        first_error = e

    try:
        result = client.table(table).select("*").execute()
        rows = [r for r in (result.data or []) if _matches_filters(r, date, week_label)]
        logger.info("Fallback fetch returned %d intent rows", len(rows))
        return RetrievalResult(
            records=[row_to_record(r) for r in rows],
            used_fallback=True,
        )
    except Exception as e:
        logger.error("Intent fetch failed twice: %s / %s", first_error, e)
        return RetrievalResult(
            error=RetrievalError(
                f"Could not load intent data from {table}", source=table, cause=e,
            ),
            used_fallback=True,
        )


def fetch_available_weeks(client=None, settings: Optional[Settings] = None) -> List[str]:
    """
    Distinct week labels in the store, newest label first (reverse sort).

    Raises:
        RetrievalError: the store query failed.
    """
    settings = settings or get_settings()
    try:
        if client is None:
            from scripts.lib.supabase_client import get_client
            client = get_client(settings)
        result = client.table(settings.intent_table).select("week_label").execute()
    except Exception as e:
        logger.error("Fetching week labels failed: %s", e)
        raise RetrievalError(
            "Could not load week labels", source=settings.intent_table, cause=e,
        ) from e

    labels = {row.get("week_label") for row in (result.data or [])}
    return sorted((label for label in labels if label), reverse=True)

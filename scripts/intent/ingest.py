"""
Intent Signal Hub — Batch Ingestor
====================================

Persists IntentRecords to the intent_data table in fixed-size batches.

Batches are inserted one after another in record order. A failed batch is
logged and counted but does not stop the remaining batches, and nothing is
rolled back, so an upload can end fully saved, partially saved, or not saved.

Usage:
    from scripts.intent.ingest import save_intent_records
    result = save_intent_records(records, week_label="Week of Oct 18 - Oct 24, 2026")
    if result.status == "partial":
        ...
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from models.intent_models import IntentRecord
from scripts.lib.config import Settings, get_settings
from scripts.lib.errors import HubError, IngestError, PartialInsertError, TotalInsertError
from scripts.lib.logger import setup_logger
from scripts.lib.utils import batched, parse_count

logger = setup_logger("intent_ingest")


@dataclass
class InsertResult:
    """Outcome of one save_intent_records call."""
    inserted_count: int
    total_batches: int
    failed_batches: int = 0
    error: Optional[IngestError] = None

    @property
    def status(self) -> str:
        if self.error is None:
            return "ok"
        if self.inserted_count > 0:
            return "partial"
        return "failed"

    @property
    def message(self) -> str:
        if self.error is None:
            return f"Saved {self.inserted_count} records"
        return self.error.message


def to_storage_row(
    record: IntentRecord,
    week_label: Optional[str] = None,
    user_id: Optional[str] = None,
) -> Dict:
    """Map an IntentRecord to an intent_data row (snake_case, nulls for blanks)."""
    row = {
        "date": record.date,
        "company_name": record.company_name,
        "topic": record.topic,
        "category": record.category,
        "score": record.score,
        "website": record.website or None,
        "secondary_industry_hierarchical_category": (
            record.secondary_industry_hierarchical_category or None
        ),
        "alexa_rank": parse_count(record.alexa_rank) if record.alexa_rank else None,
        "employees": parse_count(record.employees) if record.employees else None,
        "week_label": week_label or None,
    }
    # Left unset otherwise so row-level security can fill it in
    if user_id:
        row["user_id"] = user_id
    return row


def store_unavailable(record_count: int, settings: Settings, cause: Exception) -> InsertResult:
    """Failed result for records that could not reach the store at all."""
    total = -(-record_count // settings.batch_size)
    logger.error("Intent store unavailable, %d records not saved: %s", record_count, cause)
    return InsertResult(
        inserted_count=0,
        total_batches=total,
        failed_batches=total,
        error=TotalInsertError(total, total, cause=cause),
    )


def save_intent_records(
    records: List[IntentRecord],
    week_label: Optional[str] = None,
    client=None,
    settings: Optional[Settings] = None,
    user_id: Optional[str] = None,
) -> InsertResult:
    """
    Insert records into the store in sequential batches.

    Args:
        records: Parsed intent records.
        week_label: Reporting-week tag applied to every row.
        client: Supabase client (default: shared client from settings).
        settings: Table name and batch size (default: process settings).
        user_id: Owner stamped on every row, if given.

    Returns:
        InsertResult. error is None on full success, PartialInsertError when
        some batches were saved, TotalInsertError when none were (including
        when no store client could be created).
    """
    settings = settings or get_settings()
    rows = [to_storage_row(r, week_label, user_id) for r in records]
    batches = list(batched(rows, settings.batch_size))

    if not batches:
        logger.info("No intent records to save")
        return InsertResult(inserted_count=0, total_batches=0)

    if client is None:
        from scripts.lib.supabase_client import get_client
        try:
            client = get_client(settings)
        except HubError as e:
            return store_unavailable(len(rows), settings, e)

    logger.info(
        "Saving %d intent records to %s in %d batches (week: %s)",
        len(rows), settings.intent_table, len(batches), week_label or "not specified",
    )

    inserted = 0
    errors: List[Exception] = []
    for i, batch in enumerate(batches, start=1):
        try:
            client.table(settings.intent_table).insert(batch).execute()
        except Exception as e:
            errors.append(e)
            logger.error("Batch %d/%d failed (%d rows): %s", i, len(batches), len(batch), e)
            continue
        inserted += len(batch)
        logger.debug("Batch %d/%d saved %d rows", i, len(batches), len(batch))

    if not errors:
        logger.info("All %d intent records saved", inserted)
        return InsertResult(inserted_count=inserted, total_batches=len(batches))

    if inserted > 0:
        error: IngestError = PartialInsertError(inserted, len(errors), len(batches))
        logger.warning(
            "Partial save: %d rows inserted, %d/%d batches failed",
            inserted, len(errors), len(batches),
        )
    else:
        error = TotalInsertError(len(errors), len(batches), cause=errors[0])
        logger.error("No intent records saved: %s", errors[0])

    return InsertResult(
        inserted_count=inserted,
        total_batches=len(batches),
        failed_batches=len(errors),
        error=error,
    )

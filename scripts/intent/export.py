"""
Intent Signal Hub — Intent CSV Export
=======================================

Serialises IntentRecords back to CSV for download. Only the nine core
columns are written, so enrichment fields beyond them are dropped.
"""
from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable, Optional

from models.intent_models import IntentRecord

EXPORT_COLUMNS = [
    ("Date", "date"),
    ("Company Name", "company_name"),
    ("Topic", "topic"),
    ("Category", "category"),
    ("Score", "score"),
    ("Website", "website"),
    ("Secondary Industry Hierarchical Category", "secondary_industry_hierarchical_category"),
    ("Alexa Rank", "alexa_rank"),
    ("Employees", "employees"),
]


def export_intent_csv(records: Iterable[IntentRecord]) -> str:
    """
    Write records as CSV text with the fixed export header.

    parse_intent_csv() on the output gives back the same
    (date, company_name, topic, category, score) for every record.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([header for header, _ in EXPORT_COLUMNS])
    for record in records:
        row = []
        for _, field in EXPORT_COLUMNS:
            value = getattr(record, field)
            # An unparsed score is written as NaN so it re-imports as unparsed
            row.append("NaN" if value is None else str(value))
        writer.writerow(row)
    return buffer.getvalue()


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"intent_data_{today.isoformat()}.csv"

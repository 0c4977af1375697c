"""
Intent Signal Hub — Intent CSV Parser
=======================================

Validates and transforms intent-data CSV exports into IntentRecord objects.

One declarative COLUMN_MAP drives every transformation, so the short
9-column export and the full enrichment export go through the same code.
Parsing is quote-aware (csv module): a quoted "Acme, Inc." stays one field.

Usage:
    from scripts.intent.csv_parser import parse_intent_csv
    records = parse_intent_csv(text)
"""
from __future__ import annotations

import csv
import io
from typing import Dict, List, Optional

from models.intent_models import IntentRecord
from scripts.lib.errors import FormatError
from scripts.lib.logger import setup_logger
from scripts.lib.utils import parse_int_prefix

logger = setup_logger("intent_csv_parser")

REQUIRED_COLUMNS = ["Date", "Company Name", "Topic", "Category", "Score"]

# CSV header -> IntentRecord field. Score is handled separately.
COLUMN_MAP: Dict[str, str] = {
    "Intent ID": "intent_id",
    "Date": "date",
    "Company Name": "company_name",
    "Topic": "topic",
    "Category": "category",
    "Website": "website",
    "Secondary Industry Hierarchical Category": "secondary_industry_hierarchical_category",
    "Alexa Rank": "alexa_rank",
    "Employees": "employees",
    "Company ID": "company_id",
    "Founded Year": "founded_year",
    "Company HQ Phone": "company_hq_phone",
    "Revenue (in 000s USD)": "revenue",
    "Primary Industry": "primary_industry",
    "Primary Sub-Industry": "primary_sub_industry",
    "All Industries": "all_industries",
    "All Sub-Industries": "all_sub_industries",
    "Industry Hierarchical Category": "industry_hierarchical_category",
    "LinkedIn Company Profile URL": "linkedin_url",
    "Facebook Company Profile URL": "facebook_url",
    "Twitter Company Profile URL": "twitter_url",
    "Certified Active Company": "certified_active_company",
    "Certification Date": "certification_date",
    "Total Funding Amount (in 000s USD)": "total_funding_amount",
    "Recent Funding Amount (in 000s USD)": "recent_funding_amount",
    "Recent Funding Round": "recent_funding_round",
    "Recent Funding Date": "recent_funding_date",
    "Recent Investors": "recent_investors",
    "All Investors": "all_investors",
    "Company Street Address": "company_street_address",
    "Company City": "company_city",
    "Company State": "company_state",
    "Company Zip Code": "company_zip_code",
    "Company Country": "company_country",
    "Full Address": "full_address",
    "Number of Locations": "number_of_locations",
    "Query Name": "query_name",
}

PREVIEW_ROWS = 3


def is_valid_csv_filename(filename: Optional[str]) -> bool:
    """Uploads are accepted by extension only."""
    return bool(filename) and filename.lower().endswith(".csv")


def _split_line(line: str) -> List[str]:
    return next(csv.reader([line]), [])


def validate_intent_csv(text: str) -> List[str]:
    """
    Check that the file has data rows and every required column.

    Returns:
        The trimmed header list.

    Raises:
        FormatError: fewer than two lines, or a required column is missing.
    """
    lines = text.splitlines()
    if len(lines) < 2:
        raise FormatError("CSV file is empty or invalid")

    headers = [h.strip() for h in _split_line(lines[0])]
    if headers:
        headers[0] = headers[0].lstrip("\ufeff").strip()

    missing = [col for col in REQUIRED_COLUMNS if col not in headers]
    if missing:
        raise FormatError(
            "CSV file must contain these columns: " + ", ".join(REQUIRED_COLUMNS),
            missing_columns=missing,
        )
    return headers


def values_to_record(headers: List[str], values: List[str]) -> Optional[IntentRecord]:
    """Zip one row's values with the headers and map them to an IntentRecord."""
    # Blank or whitespace-only line; ",,,," is still a (mostly empty) row
    if not values or (len(values) == 1 and not values[0].strip()):
        return None

    row = {
        header: values[i].strip() if i < len(values) else ""
        for i, header in enumerate(headers)
    }

    fields = {
        field: row[header]
        for header, field in COLUMN_MAP.items()
        if header in row
    }
    # A non-numeric score is kept as None and filtered downstream
    fields["score"] = parse_int_prefix(row.get("Score") or "0")
    return IntentRecord(**fields)


def transform_row(headers: List[str], line: str) -> Optional[IntentRecord]:
    """
    Transform a single data line into an IntentRecord.

    Blank lines give None. Columns not in COLUMN_MAP are ignored.
    """
    if not line.strip():
        return None
    return values_to_record(headers, _split_line(line))


def _iter_records(text: str, headers: List[str]):
    reader = csv.reader(io.StringIO(text, newline=""))
    next(reader, None)  # header
    for values in reader:
        record = values_to_record(headers, values)
        if record is not None:
            yield record


def parse_intent_csv(text: str) -> List[IntentRecord]:
    """
    Validate and transform a whole intent CSV.

    Raises:
        FormatError: see validate_intent_csv. No rows are transformed.
    """
    headers = validate_intent_csv(text)
    records = list(_iter_records(text, headers))

    invalid = sum(1 for r in records if not r.has_valid_score)
    if invalid:
        logger.warning("%d of %d rows have a non-numeric score", invalid, len(records))
    logger.info("Parsed %d intent records (%d columns)", len(records), len(headers))
    return records


def preview_intent_csv(text: str, rows: int = PREVIEW_ROWS) -> List[IntentRecord]:
    """First few records of a file, after the same header validation."""
    headers = validate_intent_csv(text)
    preview = []
    for record in _iter_records(text, headers):
        if len(preview) >= rows:
            break
        preview.append(record)
    return preview

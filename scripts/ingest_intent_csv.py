"""
Intent CSV Ingest Script
========================
Parses an intent-data CSV export, logs a scoring summary, and saves the
records to Supabase in batches.

Usage:
    python scripts/ingest_intent_csv.py data/intent_export.csv
    python scripts/ingest_intent_csv.py data/intent_export.csv --week "Week of Oct 18 - Oct 24, 2026"
    python scripts/ingest_intent_csv.py data/intent_export.csv --dry-run

Exit codes: 0 saved (fully or partially), 1 when the file is rejected or
nothing could be saved.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# ---------------------------------------------------------------------------
# Path setup
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from scripts.intent.aggregation import company_scores, score_histogram, score_stats
from scripts.intent.csv_parser import is_valid_csv_filename, parse_intent_csv
from scripts.intent.ingest import save_intent_records
from scripts.lib.config import get_settings
from scripts.lib.errors import FormatError, HubError
from scripts.lib.logger import setup_logger
from scripts.lib.utils import current_week_label

logger = setup_logger("ingest_intent_csv")


def _log_summary(records) -> None:
    stats = score_stats(records)
    logger.info(
        "Signals: %d scored of %d | avg %d | high %d | low %d | 90+: %d%%",
        stats["count"], len(records), stats["avg"], stats["high"], stats["low"],
        stats["high_score_percentage"],
    )
    for bucket in score_histogram(records):
        logger.info("  %-7s %d", bucket["range"], bucket["count"])
    for row in company_scores(records, limit=5):
        logger.info("  %-40s avg %3d  (%d signals)", row["company"] or "(blank)",
                    row["avg_score"], row["count"])


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Load an intent-data CSV into Supabase")
    parser.add_argument("file", type=Path, help="CSV export to ingest")
    parser.add_argument("--week", help="Week label for every row (default: current week)")
    parser.add_argument("--dry-run", action="store_true",
                        help="Parse and summarise without saving")
    args = parser.parse_args(argv)

    if not is_valid_csv_filename(args.file.name):
        logger.error("Not a .csv file: %s", args.file)
        return 1
    if not args.file.exists():
        logger.error("File not found: %s", args.file)
        return 1

    try:
        text = args.file.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        logger.error("Rejected %s: not UTF-8 encoded (%s)", args.file.name, e)
        return 1
    try:
        records = parse_intent_csv(text)
    except FormatError as e:
        logger.error("Rejected %s: %s", args.file.name, e.message)
        return 1

    _log_summary(records)

    week = args.week or current_week_label()
    if args.dry_run:
        logger.info("DRY RUN: %d records would be saved for '%s'", len(records), week)
        return 0

    try:
        result = save_intent_records(records, week_label=week, settings=get_settings())
    except HubError as e:
        logger.error("Nothing saved: %s", e.message)
        return 1
    if result.status == "failed":
        logger.error("Nothing saved: %s", result.message)
        return 1
    if result.status == "partial":
        logger.warning("Processed %d records; %d could not be saved",
                       len(records), len(records) - result.inserted_count)
    else:
        logger.info("Saved %d records for '%s'", result.inserted_count, week)
    return 0


if __name__ == "__main__":
    sys.exit(main())

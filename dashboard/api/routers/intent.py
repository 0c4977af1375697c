"""
Intent Signal Hub — Intent Data Router
========================================
Upload, query, aggregate, and export intent-signal data.

Endpoints:
  POST /api/intent/preview        - Validate a CSV and return its first rows
  POST /api/intent/upload         - Parse a CSV and save it in batches
  GET  /api/intent/records        - Stored records (date / week filters)
  GET  /api/intent/weeks          - Week labels present in the store
  GET  /api/intent/current-week   - Default week label for a new upload
  GET  /api/intent/analytics      - All aggregates for a record set
  GET  /api/intent/opportunities  - Relevance-weighted company ranking
  GET  /api/intent/trends         - Week-over-week comparison
  GET  /api/intent/export         - CSV download
"""
from __future__ import annotations

from typing import Any, Callable, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse, Response

from models.intent_models import IntentRecord, RecordsResponse, UploadResponse
from scripts.intent.aggregation import (
    build_intent_analytics,
    opportunity_ranking,
    week_over_week,
)
from scripts.intent.csv_parser import (
    is_valid_csv_filename,
    parse_intent_csv,
    preview_intent_csv,
)
from scripts.intent.export import export_filename, export_intent_csv
from scripts.intent.ingest import save_intent_records, store_unavailable
from scripts.intent.retrieval import fetch_available_weeks, fetch_intent_records
from scripts.lib.config import Settings, get_settings
from scripts.lib.errors import FormatError, HubError, RetrievalError
from scripts.lib.logger import setup_logger
from scripts.lib.supabase_client import get_client
from scripts.lib.utils import current_week_label

logger = setup_logger("intent_router")

router = APIRouter(prefix="/api/intent", tags=["intent"])


# ─── Dependencies ───────────────────────────────────────────

def get_store(settings: Settings = Depends(get_settings)):
    """Supabase client for the intent table; 503 when not configured."""
    try:
        return get_client(settings)
    except HubError as e:
        logger.error("Intent store unavailable: %s", e)
        raise HTTPException(status_code=503, detail="Intent data store is not available")


def get_store_factory(settings: Settings = Depends(get_settings)) -> Callable[[], Any]:
    """Deferred store lookup, for routes that validate their input first."""
    return lambda: get_client(settings)


async def _read_csv_upload(file: UploadFile) -> str:
    if not is_valid_csv_filename(file.filename):
        raise HTTPException(status_code=400, detail="Please upload a .csv file")
    content = await file.read()
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded")


def _load_records(
    date: Optional[str],
    week_label: Optional[str],
    client,
    settings: Settings,
) -> List[IntentRecord]:
    result = fetch_intent_records(date, week_label, client=client, settings=settings)
    if not result.ok:
        raise HTTPException(status_code=503, detail=result.error.to_dict())
    return result.records


# ─── Upload ─────────────────────────────────────────────────

@router.post("/preview")
async def preview_upload(file: UploadFile = File(...)):
    """Check the header row and show the first few parsed records."""
    text = await _read_csv_upload(file)
    try:
        records = preview_intent_csv(text)
    except FormatError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    return {"results": records, "count": len(records)}


@router.post("/upload", response_model=UploadResponse)
async def upload_intent_data(
    file: UploadFile = File(...),
    week_label: Optional[str] = Query(None, description="Reporting week (default: current week)"),
    include_records: bool = Query(False, description="Echo parsed records in the response"),
    store: Callable[[], Any] = Depends(get_store_factory),
    settings: Settings = Depends(get_settings),
):
    """
    Parse an intent CSV and save it.

    200 with status "ok" when every batch saved, 200 with status "partial"
    when some batches failed, 502 with status "failed" (and the parsed
    records) when nothing was saved, including when the store is down.
    A bad file is a 400 whether or not the store is reachable.
    """
    text = await _read_csv_upload(file)
    try:
        records = parse_intent_csv(text)
    except FormatError as e:
        logger.warning("Rejected upload %s: %s", file.filename, e)
        raise HTTPException(status_code=400, detail=e.to_dict())

    week = week_label or current_week_label()
    try:
        client = store()
    except HubError as e:
        result = store_unavailable(len(records), settings, e)
    else:
        result = save_intent_records(records, week_label=week, client=client, settings=settings)

    if result.status == "partial":
        message = (
            f"Processed {len(records)} records; "
            f"{len(records) - result.inserted_count} could not be saved"
        )
    elif result.status == "failed":
        message = f"Processed {len(records)} records but none could be saved"
    else:
        message = f"Processed and saved {len(records)} records"

    body = UploadResponse(
        status=result.status,
        message=message,
        processed=len(records),
        inserted_count=result.inserted_count,
        failed_batches=result.failed_batches,
        total_batches=result.total_batches,
        week_label=week,
        error=result.error.to_dict() if result.error else None,
        records=records if include_records or result.status == "failed" else [],
    )
    status_code = 502 if result.status == "failed" else 200
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


# ─── Queries ────────────────────────────────────────────────

@router.get("/records", response_model=RecordsResponse)
async def list_intent_records(
    date: Optional[str] = Query(None, description="Exact date filter"),
    week_label: Optional[str] = Query(None, description="Exact week label filter"),
    client=Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Stored intent records, newest date first."""
    result = fetch_intent_records(date, week_label, client=client, settings=settings)
    if not result.ok:
        raise HTTPException(status_code=503, detail=result.error.to_dict())
    return RecordsResponse(
        results=result.records,
        count=len(result.records),
        used_fallback=result.used_fallback,
        date=date,
        week_label=week_label,
    )


@router.get("/weeks")
async def list_weeks(
    client=Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Week labels present in the store."""
    try:
        weeks = fetch_available_weeks(client=client, settings=settings)
    except RetrievalError as e:
        raise HTTPException(status_code=503, detail=e.to_dict())
    return {"results": weeks, "count": len(weeks)}


@router.get("/current-week")
async def current_week():
    """Label applied to uploads that don't name a week."""
    return {"week_label": current_week_label()}


@router.get("/analytics")
async def intent_analytics(
    date: Optional[str] = Query(None),
    week_label: Optional[str] = Query(None),
    limit: int = Query(10, ge=1, le=100, description="Rows per ranked list"),
    client=Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Score stats, company ranking, histogram, distributions, opportunities."""
    records = _load_records(date, week_label, client, settings)
    return build_intent_analytics(records, limit=limit)


@router.get("/opportunities")
async def intent_opportunities(
    date: Optional[str] = Query(None),
    week_label: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=500),
    client=Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Companies ranked by taxonomy-weighted relevance."""
    records = _load_records(date, week_label, client, settings)
    opportunities = opportunity_ranking(records, limit=limit)
    return {"results": opportunities, "count": len(opportunities)}


@router.get("/trends")
async def intent_trends(
    current_week: Optional[str] = Query(None, description="Default: newest week label"),
    previous_week: Optional[str] = Query(None, description="Default: the label before it"),
    client=Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Compare two reporting weeks."""
    if not current_week or not previous_week:
        try:
            weeks = fetch_available_weeks(client=client, settings=settings)
        except RetrievalError as e:
            raise HTTPException(status_code=503, detail=e.to_dict())
        if not current_week:
            current_week = weeks[0] if weeks else None
        if not previous_week:
            later = [w for w in weeks if w != current_week]
            previous_week = later[0] if later else None

    if not current_week:
        raise HTTPException(status_code=404, detail="No week labels found")

    current = _load_records(None, current_week, client, settings)
    previous = _load_records(None, previous_week, client, settings) if previous_week else []

    return {
        "current_week": current_week,
        "previous_week": previous_week,
        **week_over_week(current, previous),
    }


# ─── Export ─────────────────────────────────────────────────

@router.get("/export")
async def export_intent_data(
    date: Optional[str] = Query(None),
    week_label: Optional[str] = Query(None),
    client=Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Download stored records as CSV."""
    records = _load_records(date, week_label, client, settings)
    if not records:
        raise HTTPException(status_code=404, detail="No data to download")

    filename = export_filename()
    return Response(
        content=export_intent_csv(records),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

"""
Intent Signal Hub — API Server
================================

Intent-data ingestion and analytics over Supabase, with a read-only
HubSpot CRM passthrough.

Route groups:
  /api/health        - Health check
  /api/intent/*      - Intent CSV upload, queries, analytics, export
  /api/hubspot/*     - Live HubSpot CRM reads
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from integrations.hubspot import HubSpotIntegration
from scripts.lib.config import get_settings
from scripts.lib.errors import APIPausedError

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# ─── Lifespan ─────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app):
    """Application startup and shutdown."""
    logger.info("Starting Intent Signal Hub...")
    settings = get_settings()

    app.state.hubspot = HubSpotIntegration(settings)
    if app.state.hubspot.is_paused:
        status = "paused"
    elif app.state.hubspot.is_configured:
        status = "configured"
    else:
        status = "not configured"
    logger.info("HubSpot live integration: %s", status)

    from scripts.lib.supabase_client import is_available
    if is_available(settings):
        logger.info("Supabase connected")

    logger.info("Intent Signal Hub ready")
    yield
    logger.info("Shutting down Intent Signal Hub...")


# ─── App Setup ────────────────────────────────────────────────

app = FastAPI(
    title="Intent Signal Hub",
    version=VERSION,
    description="Intent-data ingestion, scoring and opportunity ranking for sales teams",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Include Routers ──────────────────────────────────────────

from dashboard.api.routers.intent import router as intent_router

app.include_router(intent_router)


# ─── Health ───────────────────────────────────────────────────

@app.get("/api/health", tags=["system"])
async def health():
    """Health check with service status."""
    from scripts.lib.supabase_client import is_available

    hubspot = getattr(app.state, "hubspot", None)
    return {
        "status": "healthy",
        "service": "Intent Signal Hub",
        "version": VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "integrations": {
            "supabase": is_available(),
            "hubspot": bool(hubspot and hubspot.is_configured),
            "hubspot_paused": bool(hubspot and hubspot.is_paused),
        },
    }


# ─── HubSpot Live CRM Endpoints ──────────────────────────────

def _hubspot() -> HubSpotIntegration:
    hubspot = getattr(app.state, "hubspot", None)
    if not hubspot or not hubspot.is_configured:
        raise HTTPException(status_code=503, detail="HubSpot not configured")
    return hubspot


@app.get("/api/hubspot/status", tags=["hubspot-live"])
async def hubspot_status():
    """Get HubSpot integration status."""
    hubspot = getattr(app.state, "hubspot", None)
    if not hubspot:
        raise HTTPException(status_code=503, detail="HubSpot integration not loaded")
    return hubspot.get_status()


@app.get("/api/hubspot/{object_type}", tags=["hubspot-live"])
async def hubspot_objects(
    object_type: str,
    limit: int = Query(50, ge=1, le=1000),
):
    """List contacts, companies or deals from HubSpot (live)."""
    hubspot = _hubspot()
    fetchers = {
        "contacts": hubspot.get_contacts,
        "companies": hubspot.get_companies,
        "deals": hubspot.get_deals,
    }
    if object_type not in fetchers:
        raise HTTPException(status_code=404, detail=f"Unknown HubSpot object: {object_type}")
    try:
        results = await fetchers[object_type](limit=limit)
    except APIPausedError as e:
        raise HTTPException(status_code=503, detail=e.to_dict())
    return {"results": results, "count": len(results)}

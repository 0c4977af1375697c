"""
Intent Signal Hub — Intent Data Pydantic Models
=================================================

The normalised Intent Record shared by the CSV parser, the batch ingestor,
the retrieval layer, and the aggregation engine, plus API response models.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


# ─── Intent Record ──────────────────────────────────────────

class IntentRecord(BaseModel):
    """One intent signal: a company researching a topic with a given strength."""
    id: Optional[str] = None
    date: str = ""
    company_name: str = ""
    topic: str = ""
    category: str = ""
    score: Optional[int] = Field(None, description="None when the source value was not numeric")
    website: str = ""
    secondary_industry_hierarchical_category: str = ""
    alexa_rank: str = ""
    employees: str = ""
    week_label: str = ""

    # Full-export enrichment columns
    intent_id: str = ""
    company_id: str = ""
    founded_year: str = ""
    company_hq_phone: str = ""
    revenue: str = ""
    primary_industry: str = ""
    primary_sub_industry: str = ""
    all_industries: str = ""
    all_sub_industries: str = ""
    industry_hierarchical_category: str = ""
    linkedin_url: str = ""
    facebook_url: str = ""
    twitter_url: str = ""
    certified_active_company: str = ""
    certification_date: str = ""
    total_funding_amount: str = ""
    recent_funding_amount: str = ""
    recent_funding_round: str = ""
    recent_funding_date: str = ""
    recent_investors: str = ""
    all_investors: str = ""
    company_street_address: str = ""
    company_city: str = ""
    company_state: str = ""
    company_zip_code: str = ""
    company_country: str = ""
    full_address: str = ""
    number_of_locations: str = ""
    query_name: str = ""

    @property
    def has_valid_score(self) -> bool:
        return self.score is not None

    def core_tuple(self) -> tuple:
        """The fields every export keeps: (date, company, topic, category, score)."""
        return (self.date, self.company_name, self.topic, self.category, self.score)


# ─── API Models ─────────────────────────────────────────────

class UploadResponse(BaseModel):
    """Outcome of a CSV upload."""
    status: str = Field(description="ok | partial | failed")
    message: str
    processed: int
    inserted_count: int = 0
    failed_batches: int = 0
    total_batches: int = 0
    week_label: Optional[str] = None
    error: Optional[dict] = None
    records: list[IntentRecord] = Field(default_factory=list)


class RecordsResponse(BaseModel):
    """Intent records fetched from the store."""
    results: list[IntentRecord]
    count: int
    used_fallback: bool = False
    date: Optional[str] = None
    week_label: Optional[str] = None

"""
Intent Signal Hub — Intent Aggregation
========================================

Pure functions that fold IntentRecords into the figures the dashboard shows.
Nothing here touches the store or mutates its input; the same records in the
same order always give the same output.

Records without a valid score are left out of every aggregate.

Functions:
  company_scores()         - Per-company count, average and max score
  score_histogram()        - Fixed score-range buckets
  frequency_distribution() - Category or topic share of all signals
  topic_analysis()         - Top topics with their average score
  score_stats()            - Average, high, low, share of 90+ scores
  opportunity_ranking()    - Relevance-weighted company ranking with advantage tags
  week_over_week()         - Compare two reporting weeks
  build_intent_analytics() - All of the above for one record set
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from models.intent_models import IntentRecord
from scripts.lib.utils import js_round

SCORE_RANGES = [
    ("0-59", 0, 59),
    ("60-69", 60, 69),
    ("70-79", 70, 79),
    ("80-89", 80, 89),
    ("90-100", 90, 100),
]

HIGH_SCORE_THRESHOLD = 90
DISTRIBUTION_FIELDS = ("category", "topic")


@dataclass(frozen=True)
class RelevanceTaxonomy:
    """
    Keyword lists an opportunity's categories and topics are matched against.

    match_blank: an empty category or topic is a substring of every term, so
    it matches. Set False to give blank fields no weight.
    """
    categories: Sequence[str]
    topics: Sequence[str]
    category_weight: float = 2.0
    topic_weight: float = 1.5
    match_blank: bool = True


DEFAULT_TAXONOMY = RelevanceTaxonomy(
    categories=(
        "HOSPITAL & HEALTH CARE",
        "HOSPITAL HEALTH CARE",
        "INSURANCE",
        "HEALTH CARE PLANS",
        "MEDICAL DEVICES",
        "PHARMACEUTICALS",
        "BIOTECHNOLOGY",
        "HEALTH INFORMATION TECHNOLOGY",
    ),
    topics=(
        "healthcare technology",
        "population health",
        "care management",
        "managed care",
        "healthcare analytics",
        "patient engagement",
        "healthcare automation",
        "AI in healthcare",
        "digital health",
        "healthcare outcomes",
        "care coordination",
        "health data",
        "telehealth",
        "remote patient monitoring",
        "clinical workflows",
        "healthcare integration",
        "value-based care",
        "health information systems",
    ),
)

RELEVANCE_LEVELS = [
    (150, "Excellent"),
    (100, "High"),
    (70, "Good"),
]

# (field, keywords, tag): the tag applies when any of the opportunity's
# categories or topics contains one of the keywords.
ADVANTAGE_RULES = [
    ("categories", ("hospital", "health"), "Healthcare expertise & TruCare platform"),
    ("categories", ("insurance",), "Managed care solutions & cost reduction"),
    ("topics", ("ai", "automation"), "AI Orchestration & workflow automation"),
    ("topics", ("analytics", "data"), "Digital platform & data integration"),
    ("topics", ("population", "outcomes"), "Outcomes Orchestrator for population health"),
]
DEFAULT_ADVANTAGE = "Digital transformation & expert services"


def valid_records(records: Iterable[IntentRecord]) -> List[IntentRecord]:
    """Records whose score parsed as a number."""
    return [r for r in records if r.score is not None]


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


def _group_by_company(records: Iterable[IntentRecord]) -> Dict[str, List[IntentRecord]]:
    groups: Dict[str, List[IntentRecord]] = {}
    for record in records:
        groups.setdefault(record.company_name, []).append(record)
    return groups


# ─── Company scoring ────────────────────────────────────────

def company_scores(records: Iterable[IntentRecord], limit: Optional[int] = None) -> List[Dict]:
    """
    Group signals by company name, highest average score first.

    Ties keep first-seen order. Blank company names form their own group.
    """
    rows = []
    for company, group in _group_by_company(valid_records(records)).items():
        scores = [r.score for r in group]
        total = sum(scores)
        rows.append({
            "company": company,
            "count": len(group),
            "total_score": total,
            "avg_score": js_round(total / len(group)),
            "max_score": max(scores),
            "topics": _unique(r.topic for r in group),
            "categories": _unique(r.category for r in group),
        })

    rows.sort(key=lambda row: row["avg_score"], reverse=True)
    return rows[:limit] if limit is not None else rows


# ─── Distributions ──────────────────────────────────────────

def score_histogram(records: Iterable[IntentRecord]) -> List[Dict]:
    """
    Count scores per range. Scores below 0 or above 100 fall into the
    first or last bucket, so the counts always add up to the valid records.
    """
    counts = [0] * len(SCORE_RANGES)
    for record in valid_records(records):
        for i, (_, low, high) in enumerate(SCORE_RANGES):
            if record.score <= high or i == len(SCORE_RANGES) - 1:
                counts[i] += 1
                break

    return [
        {"range": name, "min": low, "max": high, "count": counts[i]}
        for i, (name, low, high) in enumerate(SCORE_RANGES)
    ]


def frequency_distribution(records: Iterable[IntentRecord], field: str = "category") -> List[Dict]:
    """Signals per category (or topic) with their percentage of the total."""
    if field not in DISTRIBUTION_FIELDS:
        raise ValueError(f"field must be one of {DISTRIBUTION_FIELDS}, got {field!r}")

    counts: Dict[str, int] = {}
    for record in valid_records(records):
        key = getattr(record, field)
        counts[key] = counts.get(key, 0) + 1

    total = sum(counts.values())
    rows = [
        {"name": name, "count": count, "percentage": round(count * 100 / total, 1)}
        for name, count in counts.items()
    ]
    rows.sort(key=lambda row: row["count"], reverse=True)
    return rows


def topic_analysis(records: Iterable[IntentRecord], limit: int = 10) -> List[Dict]:
    """Most frequent topics with their rounded average score."""
    stats: Dict[str, List[int]] = {}
    for record in valid_records(records):
        stats.setdefault(record.topic, []).append(record.score)

    rows = [
        {"topic": topic, "count": len(scores), "avg_score": js_round(sum(scores) / len(scores))}
        for topic, scores in stats.items()
    ]
    rows.sort(key=lambda row: row["count"], reverse=True)
    return rows[:limit]


def score_stats(records: Iterable[IntentRecord]) -> Dict:
    """Headline score figures for a record set."""
    scores = [r.score for r in valid_records(records)]
    if not scores:
        return {
            "avg": 0, "high": 0, "low": 0, "count": 0,
            "high_score_count": 0, "high_score_percentage": 0,
        }

    high_count = sum(1 for s in scores if s >= HIGH_SCORE_THRESHOLD)
    return {
        "avg": js_round(sum(scores) / len(scores)),
        "high": max(scores),
        "low": min(scores),
        "count": len(scores),
        "high_score_count": high_count,
        "high_score_percentage": js_round(high_count * 100 / len(scores)),
    }


# ─── Opportunity ranking ────────────────────────────────────

def _matches(value: str, terms: Sequence[str], match_blank: bool = True) -> bool:
    """Case-insensitive substring match in either direction."""
    needle = value.lower()
    if not needle:
        return match_blank
    return any(
        term.lower() in needle or needle in term.lower()
        for term in terms
    )


def relevance_multiplier(record: IntentRecord, taxonomy: RelevanceTaxonomy = DEFAULT_TAXONOMY) -> float:
    multiplier = 1.0
    if _matches(record.category, taxonomy.categories, taxonomy.match_blank):
        multiplier += taxonomy.category_weight
    if _matches(record.topic, taxonomy.topics, taxonomy.match_blank):
        multiplier += taxonomy.topic_weight
    return multiplier


def relevance_level(score: float) -> str:
    for threshold, label in RELEVANCE_LEVELS:
        if score >= threshold:
            return label
    return "Moderate"


def opportunity_advantages(categories: Sequence[str], topics: Sequence[str]) -> List[str]:
    """Sales angles for an opportunity, from keywords in its categories and topics."""
    values = {"categories": categories, "topics": topics}
    tags = [
        tag
        for field, keywords, tag in ADVANTAGE_RULES
        if any(k in v.lower() for v in values[field] for k in keywords)
    ]
    return tags or [DEFAULT_ADVANTAGE]


def opportunity_ranking(
    records: Iterable[IntentRecord],
    taxonomy: RelevanceTaxonomy = DEFAULT_TAXONOMY,
    limit: Optional[int] = None,
) -> List[Dict]:
    """
    Rank companies by taxonomy-weighted score.

    relevance_score = sum(score * multiplier) / count, where the multiplier
    is 1, plus category_weight for a category match, plus topic_weight for a
    topic match. Only companies whose relevance beats their own average score
    (at least one matching signal) are kept.
    """
    ranked = []
    for company, group in _group_by_company(valid_records(records)).items():
        total = sum(r.score for r in group)
        weighted = sum(r.score * relevance_multiplier(r, taxonomy) for r in group)
        avg = total / len(group)
        relevance = weighted / len(group)
        if relevance <= avg:
            continue
        topics = _unique(r.topic for r in group)
        categories = _unique(r.category for r in group)
        ranked.append((relevance, {
            "company": company,
            "signals": len(group),
            "total_score": total,
            "avg_score": round(avg, 2),
            "max_score": max(r.score for r in group),
            "relevance_score": round(relevance, 2),
            "relevance_level": relevance_level(relevance),
            "topics": topics,
            "categories": categories,
            "advantages": opportunity_advantages(categories, topics),
        }))

    ranked.sort(key=lambda pair: pair[0], reverse=True)
    opportunities = [opp for _, opp in ranked]
    return opportunities[:limit] if limit is not None else opportunities


# ─── Week-over-week ─────────────────────────────────────────

def _week_summary(records: List[IntentRecord]) -> Dict:
    scored = valid_records(records)
    avg = sum(r.score for r in scored) / len(scored) if scored else 0.0
    return {
        "signals": len(scored),
        "avg_score": avg,
        "unique_companies": len({r.company_name for r in scored}),
        "unique_topics": len({r.topic for r in scored}),
    }


def week_over_week(
    current: Iterable[IntentRecord],
    previous: Iterable[IntentRecord],
    top: int = 10,
) -> Dict:
    """Compare the current week's signals with the previous week's."""
    current = list(current)
    previous = list(previous)
    now = _week_summary(current)
    before = _week_summary(previous)

    changes = {
        "avg_score": round(now["avg_score"] - before["avg_score"], 1),
        "unique_companies": now["unique_companies"] - before["unique_companies"],
        "unique_topics": now["unique_topics"] - before["unique_topics"],
    }
    now["avg_score"] = round(now["avg_score"], 1)
    before["avg_score"] = round(before["avg_score"], 1)

    return {
        "current": now,
        "previous": before,
        "has_previous": before["signals"] > 0,
        "changes": changes,
        "top_companies": company_scores(current, limit=top),
    }


# ─── Combined view ──────────────────────────────────────────

def build_intent_analytics(
    records: Iterable[IntentRecord],
    limit: int = 10,
    taxonomy: RelevanceTaxonomy = DEFAULT_TAXONOMY,
) -> Dict:
    """Every dashboard aggregate for one record set."""
    records = list(records)
    return {
        "total_records": len(records),
        "invalid_scores": len(records) - len(valid_records(records)),
        "stats": score_stats(records),
        "top_companies": company_scores(records, limit=limit),
        "score_histogram": score_histogram(records),
        "category_distribution": frequency_distribution(records, "category"),
        "topic_distribution": frequency_distribution(records, "topic"),
        "topics": topic_analysis(records, limit=limit),
        "opportunities": opportunity_ranking(records, taxonomy, limit=limit),
    }

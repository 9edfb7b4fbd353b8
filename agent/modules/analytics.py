"""
Per-user analytics over stored content.

Pure functions: everything is derived from the owner's records (newest first)
and a reference time. No side effects, no I/O.

Percentages in the model distribution are rounded independently per model,
so the total can land slightly off 100.
"""
import math
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from agent.models import ModelRegistry
from db import ContentRecord

TOP_TOPICS = 10
TOP_TAGS = 20
RECENT_ITEMS = 10
TIMELINE_DAYS = 30

_WEEK = timedelta(days=7)
_MONTH = timedelta(days=30)


def _round_half_up(value: float, digits: int = 0) -> float:
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def _as_utc(ts: datetime) -> datetime:
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def empty_summary() -> dict:
    return {
        "totalContent": 0,
        "totalFavorites": 0,
        "contentByModel": [],
        "topTopics": [],
        "generationTimeline": [],
        "recentActivity": [],
        "usageStats": {
            "thisWeek": 0,
            "thisMonth": 0,
            "allTime": 0,
            "averagePerWeek": 0,
        },
        "tagCloud": [],
    }


def content_by_model(records: Sequence[ContentRecord], registry: ModelRegistry) -> list[dict]:
    counts = Counter(r.ai_model for r in records)
    total = len(records)
    # Counter preserves first-seen order and sorted() is stable, so ties stay in encounter order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [
        {
            "modelId": model_id,
            "modelName": registry.display_name(model_id),
            "count": count,
            "percentage": int(_round_half_up(count / total * 100)),
        }
        for model_id, count in ranked
    ]


def top_topics(records: Sequence[ContentRecord], limit: int = TOP_TOPICS) -> list[dict]:
    groups: dict[str, dict] = {}
    for r in records:
        key = r.topic.lower()
        created = _as_utc(r.created_at)
        group = groups.get(key)
        if group is None:
            groups[key] = {"topic": key, "count": 1, "lastGenerated": created}
            continue
        group["count"] += 1
        if created > group["lastGenerated"]:
            group["lastGenerated"] = created

    ranked = sorted(groups.values(), key=lambda g: g["count"], reverse=True)[:limit]
    return [
        {"topic": g["topic"], "count": g["count"], "lastGenerated": g["lastGenerated"].isoformat()}
        for g in ranked
    ]


def generation_timeline(
    records: Sequence[ContentRecord],
    now: datetime,
    days: int = TIMELINE_DAYS,
) -> list[dict]:
    """One bucket per UTC day, oldest first, ending today. Empty days are zero."""
    now = _as_utc(now)
    today = now.astimezone(timezone.utc).date()
    buckets = {
        (today - timedelta(days=offset)).isoformat(): 0
        for offset in range(days - 1, -1, -1)
    }
    window_start = now - timedelta(days=days)
    for r in records:
        created = _as_utc(r.created_at)
        if created < window_start:
            continue
        day = created.astimezone(timezone.utc).date().isoformat()
        if day in buckets:
            buckets[day] += 1
    return [{"date": day, "count": count} for day, count in buckets.items()]


def recent_activity(
    records: Sequence[ContentRecord],
    registry: ModelRegistry,
    limit: int = RECENT_ITEMS,
) -> list[dict]:
    return [
        {
            "contentId": r.id,
            "topic": r.topic,
            "createdAt": _as_utc(r.created_at).isoformat(),
            "aiModel": registry.display_name(r.ai_model),
            "isFavorite": r.is_favorite,
        }
        for r in records[:limit]
    ]


def usage_stats(records: Sequence[ContentRecord], now: datetime) -> dict:
    now = _as_utc(now)
    week_ago = now - _WEEK
    month_ago = now - _MONTH
    created = [_as_utc(r.created_at) for r in records]

    all_time = len(created)
    first = min(created) if created else now
    weeks = max(1, math.ceil((now - first) / _WEEK))
    return {
        "thisWeek": sum(1 for ts in created if ts >= week_ago),
        "thisMonth": sum(1 for ts in created if ts >= month_ago),
        "allTime": all_time,
        "averagePerWeek": _round_half_up(all_time / weeks, 1),
    }


def tag_cloud(records: Sequence[ContentRecord], limit: int = TOP_TAGS) -> list[dict]:
    counts: Counter = Counter()
    for r in records:
        for tag in r.tags:
            normalized = str(tag).lower()
            if normalized.startswith("#"):
                normalized = normalized[1:]
            counts[normalized] += 1
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)[:limit]
    return [{"tag": tag, "count": count} for tag, count in ranked]


def summarize(
    records: Sequence[ContentRecord],
    registry: ModelRegistry,
    now: Optional[datetime] = None,
) -> dict:
    """Build the full analytics summary. `records` must be ordered newest first."""
    if not records:
        return empty_summary()

    now = now or datetime.now(timezone.utc)
    return {
        "totalContent": len(records),
        "totalFavorites": sum(1 for r in records if r.is_favorite),
        "contentByModel": content_by_model(records, registry),
        "topTopics": top_topics(records),
        "generationTimeline": generation_timeline(records, now),
        "recentActivity": recent_activity(records, registry),
        "usageStats": usage_stats(records, now),
        "tagCloud": tag_cloud(records),
    }

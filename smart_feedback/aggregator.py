"""Dashboard statistics over analyzed feedback records.

Everything here is a pure function over an already-fetched list of
records: nothing is written back and the input is never mutated.
"""
import logging
from collections import Counter
from datetime import datetime, timedelta, UTC
from typing import Dict, Iterable, List, Optional, Sequence

from smart_feedback.config import config
from smart_feedback.schemas import (
    CategoryCount,
    FeedbackRecord,
    SentimentLabel,
    Statistics,
    TrendPoint,
)

logger = logging.getLogger(__name__)

RATING_VALUES = (1, 2, 3, 4, 5)


def _as_utc(timestamp: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored as UTC
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=UTC)
    return timestamp.astimezone(UTC)


def sentiment_distribution(records: Iterable[FeedbackRecord]) -> Dict[str, int]:
    """Count records per sentiment label, every label present."""
    counts = {label.value: 0 for label in SentimentLabel}
    for record in records:
        counts[record.sentiment.label.value] += 1
    return counts


def category_distribution(records: Iterable[FeedbackRecord]) -> List[CategoryCount]:
    """Count records per category that actually occurs.

    Sorted by descending count; equal counts are ordered by category name.
    """
    counts = Counter(record.category.value for record in records)
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [CategoryCount(category=category, count=count) for category, count in ordered]


def rating_distribution(records: Iterable[FeedbackRecord]) -> Dict[int, int]:
    """Count records per rating value, keys 1..5 always present."""
    counts = {rating: 0 for rating in RATING_VALUES}
    for record in records:
        counts[record.rating] += 1
    return counts


def average_rating(records: Sequence[FeedbackRecord]) -> float:
    """Mean rating rounded to 2 decimals, 0.0 when there is no data."""
    if not records:
        return 0.0
    return round(sum(record.rating for record in records) / len(records), 2)


def sentiment_trend(
    records: Iterable[FeedbackRecord],
    window_days: int = config.TREND_WINDOW_DAYS,
    now: Optional[datetime] = None
) -> List[TrendPoint]:
    """Per-day sentiment counts for the trailing window.

    Args:
        records: Records to bucket
        window_days: Size of the trailing window in days
        now: End of the window (default: current UTC time)

    Returns:
        One TrendPoint per UTC date that has records, oldest first

    Raises:
        ValueError: If window_days is not positive
    """
    if window_days < 1:
        raise ValueError(f"window_days must be positive, got {window_days}")

    end = _as_utc(now) if now is not None else datetime.now(UTC)
    cutoff = end - timedelta(days=window_days)

    buckets: Dict[str, Dict[str, int]] = {}
    for record in records:
        created_at = _as_utc(record.created_at)
        if created_at < cutoff:
            continue
        day = created_at.date().isoformat()
        counts = buckets.setdefault(day, {label.value: 0 for label in SentimentLabel})
        counts[record.sentiment.label.value] += 1

    return [
        TrendPoint(date=day, **counts)
        for day, counts in sorted(buckets.items())
    ]


def aggregate(
    records: Iterable[FeedbackRecord],
    window_days: int = config.TREND_WINDOW_DAYS,
    now: Optional[datetime] = None
) -> Statistics:
    """Compute the full dashboard statistics.

    Args:
        records: Snapshot of stored feedback records
        window_days: Trailing window for the trend series
        now: End of the trend window (default: current UTC time)

    Returns:
        Statistics; zero-filled when there are no records

    Raises:
        ValueError: If window_days is not positive, whatever the records
    """
    if window_days < 1:
        raise ValueError(f"window_days must be positive, got {window_days}")

    snapshot = list(records)

    if not snapshot:
        logger.info("No feedback records to aggregate")

    stats = Statistics(
        total_count=len(snapshot),
        average_rating=average_rating(snapshot),
        sentiment_distribution=sentiment_distribution(snapshot),
        category_distribution=category_distribution(snapshot),
        rating_distribution=rating_distribution(snapshot),
        trend=sentiment_trend(snapshot, window_days=window_days, now=now)
    )

    logger.debug(f"Aggregated {stats.total_count} records over a {window_days}-day window")
    return stats

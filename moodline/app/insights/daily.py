from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator, Sequence
from datetime import date, timedelta, tzinfo

from ..domain.models import DayAggregate, Entry
from ..metrics import AGGREGATED_DAYS, AGGREGATIONS


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from ``start`` to ``end`` inclusive."""

    for offset in range((end - start).days + 1):
        yield start + timedelta(days=offset)


def local_date(entry: Entry, tz: tzinfo | None = None) -> date:
    """Calendar date of an entry in ``tz`` (the host's local zone when None)."""

    return entry.created_at.astimezone(tz).date()


def aggregate(
    entries: Iterable[Entry],
    start: date,
    end: date,
    *,
    tz: tzinfo | None = None,
) -> list[DayAggregate]:
    """Reduce entries to one record per calendar day of ``[start, end]``.

    Days without entries are still present with zero sleep, no mood and zero
    counts. A reversed range returns an empty list.
    """

    if end < start:
        return []

    grouped: dict[date, list[Entry]] = defaultdict(list)
    for entry in entries:
        day = local_date(entry, tz)
        if start <= day <= end:
            grouped[day].append(entry)

    days = [_reduce_day(day, grouped.get(day, ())) for day in iter_days(start, end)]
    AGGREGATIONS.inc()
    AGGREGATED_DAYS.observe(len(days))
    return days


def _reduce_day(day: date, entries: Sequence[Entry]) -> DayAggregate:
    if not entries:
        return DayAggregate(date=day)

    sleep_avg = sum(entry.sleep_hours for entry in entries) / len(entries)
    ratings = [entry.mood_rating for entry in entries if entry.mood_rating is not None]
    mood_avg = sum(ratings) / len(ratings) if ratings else None

    return DayAggregate(
        date=day,
        sleep_avg=sleep_avg,
        mood_avg=mood_avg,
        count_x=sum(1 for entry in entries if entry.toggle_x),
        count_y=sum(1 for entry in entries if entry.toggle_y),
        count_z=sum(1 for entry in entries if entry.toggle_z),
        count_w=sum(1 for entry in entries if entry.toggle_w),
        entry_count=len(entries),
    )


def average_sleep(days: Sequence[DayAggregate]) -> float | None:
    """Mean nightly sleep over days that recorded any, or None."""

    slept = [day.sleep_avg for day in days if day.sleep_avg > 0]
    if not slept:
        return None
    return sum(slept) / len(slept)


__all__ = ["aggregate", "average_sleep", "iter_days", "local_date"]

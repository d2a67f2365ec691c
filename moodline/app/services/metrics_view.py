from __future__ import annotations

import logging
import threading
from datetime import date, tzinfo

from ..domain.models import DayAggregate
from ..insights.chart import ChartMode, RenderPrimitives, Viewport, layout
from ..insights.daily import aggregate
from .store import EntriesSnapshot, EntryStore

logger = logging.getLogger(__name__)

_AggregateKey = tuple[int, date, date]
_LayoutKey = tuple[_AggregateKey, ChartMode, Viewport]


class MetricsView:
    """Derived day aggregates and chart layout that follow an EntryStore.

    Both stages are recomputed from scratch, and only when their inputs
    changed: the aggregate on a new store version or range, the layout on a
    new aggregate, mode or viewport.
    """

    def __init__(self, store: EntryStore, *, tz: tzinfo | None = None) -> None:
        self._store = store
        self._tz = tz
        self._lock = threading.Lock()
        self._entries: EntriesSnapshot = store.entries
        self._version = store.version
        self._days: list[DayAggregate] = []
        self._days_key: _AggregateKey | None = None
        self._layout: RenderPrimitives | None = None
        self._layout_key: _LayoutKey | None = None
        self.recompute_count = 0
        self.layout_count = 0
        self._unsubscribe = store.subscribe(self._on_entries)

    def _on_entries(self, snapshot: EntriesSnapshot) -> None:
        with self._lock:
            self._entries = snapshot
            self._version = self._store.version

    def _aggregate(self, start: date, end: date) -> tuple[_AggregateKey, list[DayAggregate]]:
        # Caller holds self._lock.
        key = (self._version, start, end)
        if key != self._days_key:
            self._days = aggregate(self._entries, start, end, tz=self._tz)
            self._days_key = key
            self.recompute_count += 1
            logger.debug("aggregate recomputed", extra={"extra_fields": {"days": len(self._days)}})
        return key, self._days

    def days(self, start: date, end: date) -> list[DayAggregate]:
        with self._lock:
            _, days = self._aggregate(start, end)
            return list(days)

    def chart(self, start: date, end: date, mode: ChartMode, viewport: Viewport) -> RenderPrimitives:
        with self._lock:
            days_key, days = self._aggregate(start, end)
            key = (days_key, mode, viewport)
            if self._layout is None or key != self._layout_key:
                self._layout = layout(days, mode, viewport)
                self._layout_key = key
                self.layout_count += 1
            return self._layout

    def close(self) -> None:
        self._unsubscribe()


__all__ = ["MetricsView"]

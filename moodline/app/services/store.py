from __future__ import annotations

import itertools
import logging
import random
import threading
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import date, datetime, time, timedelta, tzinfo
from operator import attrgetter

from ..domain.models import Entry, EntryDraft, TodoItem
from ..domain.moods import DUMMY_MOOD_POOL, rating_for_emojis
from ..insights.daily import iter_days
from ..metrics import STORE_MUTATIONS

logger = logging.getLogger(__name__)

EntriesSnapshot = tuple[Entry, ...]
TodosSnapshot = tuple[TodoItem, ...]
Unsubscribe = Callable[[], None]

DUMMY_SLEEP_RANGE = (3.5, 9.5)
# Generated timestamps fall within the first 20 hours of the day.
DUMMY_DAY_SPAN_SECONDS = 20 * 60 * 60


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _sorted_entries(entries: Iterable[Entry]) -> EntriesSnapshot:
    # sorted() is stable, so equal timestamps keep insertion order.
    return tuple(sorted(entries, key=attrgetter("created_at")))


class EntryStore:
    """Time-ordered journal entries and todos with change notifications.

    Every mutation runs under one re-entrant lock, swaps in a new immutable
    snapshot and then notifies subscribers with that snapshot. Readers only
    ever see complete snapshots.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] | None = None,
        rng: random.Random | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        self._clock = clock or _local_now
        self._rng = rng or random.Random()
        self._tz = tz
        self._lock = threading.RLock()
        self._entry_ids = itertools.count(1)
        self._todo_ids = itertools.count(1)
        self._entries: EntriesSnapshot = ()
        self._todos: TodosSnapshot = ()
        self._version = 0
        self._entry_listeners: list[Callable[[EntriesSnapshot], None]] = []
        self._todo_listeners: list[Callable[[TodosSnapshot], None]] = []

    # -- snapshots --------------------------------------------------------
    @property
    def entries(self) -> EntriesSnapshot:
        return self._entries

    @property
    def todos(self) -> TodosSnapshot:
        return self._todos

    @property
    def version(self) -> int:
        return self._version

    def find(self, entry_id: int) -> Entry | None:
        return next((entry for entry in self._entries if entry.id == entry_id), None)

    # -- subscriptions ----------------------------------------------------
    def subscribe(self, on_change: Callable[[EntriesSnapshot], None]) -> Unsubscribe:
        with self._lock:
            self._entry_listeners.append(on_change)
        return self._unsubscriber(self._entry_listeners, on_change)

    def subscribe_todos(self, on_change: Callable[[TodosSnapshot], None]) -> Unsubscribe:
        with self._lock:
            self._todo_listeners.append(on_change)
        return self._unsubscriber(self._todo_listeners, on_change)

    def _unsubscriber(self, listeners: list, on_change: Callable) -> Unsubscribe:
        def unsubscribe() -> None:
            with self._lock:
                if on_change in listeners:
                    listeners.remove(on_change)

        return unsubscribe

    # -- entries ----------------------------------------------------------
    def add_entry(self, draft: EntryDraft) -> int:
        with self._lock:
            entry = Entry.from_draft(next(self._entry_ids), self._clock(), draft)
            self._commit_entries(_sorted_entries((*self._entries, entry)), "add_entry", entry.id)
            return entry.id

    def delete_entry(self, entry_id: int) -> Entry | None:
        with self._lock:
            removed = self.find(entry_id)
            if removed is None:
                return None
            remaining = tuple(entry for entry in self._entries if entry.id != entry_id)
            self._commit_entries(remaining, "delete_entry", entry_id)
            return removed

    def restore_entry(self, entry: Entry) -> None:
        """Re-insert a previously deleted entry with its original id and timestamp.

        The caller keeps the deleted value for as long as undo is offered.
        """

        with self._lock:
            self._commit_entries(_sorted_entries((*self._entries, entry)), "restore_entry", entry.id)

    def generate_dummy(self, start: date, end: date) -> int:
        """Add 0..2 random test entries per day in ``[start, end]``.

        A reversed range adds nothing. The whole batch lands in one snapshot.
        """

        if end < start:
            return 0
        with self._lock:
            batch = [
                Entry.from_draft(next(self._entry_ids), created_at, draft)
                for day in iter_days(start, end)
                for created_at, draft in self._dummy_day(day)
            ]
            if not batch:
                return 0
            self._commit_entries(_sorted_entries((*self._entries, *batch)), "generate_dummy", len(batch))
            return len(batch)

    def clear_test_data(self) -> int:
        with self._lock:
            remaining = tuple(entry for entry in self._entries if not entry.is_test)
            removed = len(self._entries) - len(remaining)
            if removed:
                self._commit_entries(remaining, "clear_test_data", removed)
            return removed

    def _dummy_day(self, day: date) -> list[tuple[datetime, EntryDraft]]:
        rng = self._rng
        midnight = self._start_of_day(day)
        generated = []
        for _ in range(rng.randint(0, 2)):
            created_at = midnight + timedelta(seconds=rng.randrange(DUMMY_DAY_SPAN_SECONDS))
            moods = tuple(rng.sample(DUMMY_MOOD_POOL, rng.randint(0, 2)))
            draft = EntryDraft(
                title=f"Auto {day.month}/{day.day}",
                mood_emojis=moods,
                mood_rating=rating_for_emojis(moods),
                toggle_x=rng.random() < 0.5,
                toggle_y=rng.random() < 0.5,
                toggle_z=rng.random() < 0.5,
                toggle_w=rng.random() < 0.5,
                sleep_hours=rng.uniform(*DUMMY_SLEEP_RANGE),
                is_test=True,
            )
            generated.append((created_at, draft))
        return generated

    def _start_of_day(self, day: date) -> datetime:
        if self._tz is not None:
            return datetime.combine(day, time.min, tzinfo=self._tz)
        return datetime.combine(day, time.min).astimezone()

    # -- todos ------------------------------------------------------------
    def todos_on(self, day: date) -> TodosSnapshot:
        return tuple(todo for todo in self._todos if todo.date == day)

    def find_todo(self, todo_id: int) -> TodoItem | None:
        return next((todo for todo in self._todos if todo.id == todo_id), None)

    def add_todo(self, day: date, text: str) -> int:
        with self._lock:
            todo = TodoItem(id=next(self._todo_ids), date=day, text=text)
            self._commit_todos((*self._todos, todo), "add_todo", todo.id)
            return todo.id

    def toggle_todo(self, todo_id: int) -> bool:
        with self._lock:
            if self.find_todo(todo_id) is None:
                return False
            updated = tuple(
                replace(todo, done=not todo.done) if todo.id == todo_id else todo
                for todo in self._todos
            )
            self._commit_todos(updated, "toggle_todo", todo_id)
            return True

    # -- commit + notify --------------------------------------------------
    def _commit_entries(self, entries: EntriesSnapshot, op: str, subject: int) -> None:
        self._entries = entries
        self._bump(op, subject)
        self._notify(self._entry_listeners, entries, op)

    def _commit_todos(self, todos: TodosSnapshot, op: str, subject: int) -> None:
        self._todos = todos
        self._bump(op, subject)
        self._notify(self._todo_listeners, todos, op)

    def _bump(self, op: str, subject: int) -> None:
        self._version += 1
        STORE_MUTATIONS.labels(op=op).inc()
        logger.info(
            "store mutation",
            extra={"op": op, "extra_fields": {"subject": subject, "version": self._version}},
        )

    def _notify(self, listeners: list, snapshot: tuple, op: str) -> None:
        for listener in list(listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Store subscriber failed after %s", op)


__all__ = ["EntriesSnapshot", "EntryStore", "TodosSnapshot", "Unsubscribe"]

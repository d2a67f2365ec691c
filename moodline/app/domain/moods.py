"""Mood emoji tables and the bounded per-entry selection."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence

MOOD_SLOT_LIMIT = 3
QUICK_SLOT_COUNT = 5

# Rating follows the first (primary) emoji of an entry.
EMOJI_RATINGS: dict[str, int] = {
    "😀": 5,
    "🤩": 5,
    "🥰": 5,
    "🙂": 4,
    "😎": 4,
    "😐": 3,
    "🙁": 2,
    "😤": 2,
    "😢": 1,
    "😴": 1,
    "🤯": 1,
    "😵": 1,
}

DUMMY_MOOD_POOL: tuple[str, ...] = ("🙂", "😀", "😐", "🙁", "😢", "😴", "🥰", "🤩", "😤", "🤯")

DEFAULT_QUICK_EMOJIS: tuple[str, ...] = ("😀", "🙂", "😐", "🙁", "😢")

EMOJI_CHOICES: tuple[str, ...] = (
    # positive
    "🙂", "😀", "😄", "😊", "🤗", "😌", "😎", "🥰", "😍", "🥹", "🤩", "😇",
    # neutral, reflective
    "😐", "😶", "😑", "🤔", "😏", "🥲", "🫨", "😳",
    # low
    "😔", "😞", "🥺", "😣", "😩", "🙁", "😢", "😭",
    # anxious
    "😬", "😟", "😰", "😱", "😨", "😥",
    # overwhelmed, irritable
    "😫", "😵", "🤯", "😒", "😤", "😠", "😡", "🤬",
    # uncertain
    "😕", "😖", "😓", "😧", "🥴", "😲",
    # energy, affection
    "🔥", "💪", "💋", "😘", "💘", "💖", "💞", "💕", "😉", "😈", "🤤", "🥵",
)  # fmt: skip


def rating_for_emojis(emojis: Sequence[str]) -> int | None:
    """Return the 1..5 rating of the first emoji, or None when it has none."""

    if not emojis:
        return None
    return EMOJI_RATINGS.get(emojis[0])


def bounded_emojis(emojis: Iterable[str], limit: int = MOOD_SLOT_LIMIT) -> tuple[str, ...]:
    """Keep the last ``limit`` emojis, evicting the oldest first."""

    return tuple(deque(emojis, maxlen=limit))


class MoodSelection:
    """Ordered set of at most three mood emojis with FIFO eviction.

    Selecting an emoji already held removes it. Selecting a new emoji while
    full evicts the oldest selection; the survivors keep their order.
    """

    def __init__(self, initial: Iterable[str] = (), limit: int = MOOD_SLOT_LIMIT) -> None:
        self._limit = limit
        self._items: deque[str] = deque(maxlen=limit)
        for emoji in initial:
            if emoji not in self._items:
                self._items.append(emoji)

    def toggle(self, emoji: str) -> tuple[str, ...]:
        if emoji in self._items:
            self._items.remove(emoji)
        else:
            self._items.append(emoji)
        return self.as_tuple()

    def clear(self) -> None:
        self._items.clear()

    def as_tuple(self) -> tuple[str, ...]:
        return tuple(self._items)

    @property
    def rating(self) -> int | None:
        return rating_for_emojis(self.as_tuple())

    def __contains__(self, emoji: object) -> bool:
        return emoji in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"MoodSelection({list(self._items)!r})"


__all__ = [
    "DEFAULT_QUICK_EMOJIS",
    "DUMMY_MOOD_POOL",
    "EMOJI_CHOICES",
    "EMOJI_RATINGS",
    "MOOD_SLOT_LIMIT",
    "QUICK_SLOT_COUNT",
    "MoodSelection",
    "bounded_emojis",
    "rating_for_emojis",
]

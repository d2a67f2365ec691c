"""Journal entries, todos and mood tables."""

from .models import DayAggregate, Entry, EntryDraft, TodoItem
from .moods import MoodSelection, rating_for_emojis

__all__ = [
    "DayAggregate",
    "Entry",
    "EntryDraft",
    "MoodSelection",
    "TodoItem",
    "rating_for_emojis",
]

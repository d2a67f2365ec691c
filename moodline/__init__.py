"""Moodline: journal entries, daily aggregates and trend chart geometry."""

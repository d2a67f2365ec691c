from __future__ import annotations

import pytest
from pydantic import ValidationError

from moodline.app.domain.moods import DEFAULT_QUICK_EMOJIS
from moodline.app.services.preferences import AIProvider, AppPreferences, PreferencesStore, ThemeMode


def test_defaults() -> None:
    prefs = PreferencesStore().current
    assert prefs.quick_emojis == DEFAULT_QUICK_EMOJIS
    assert prefs.theme is ThemeMode.SYSTEM
    assert prefs.provider is AIProvider.NONE
    assert prefs.require_biometric is False


def test_quick_emojis_are_padded_and_truncated() -> None:
    short = AppPreferences(quick_emojis=("🤩", ""))
    assert short.quick_emojis == ("🤩",) + DEFAULT_QUICK_EMOJIS[1:]

    long = AppPreferences(quick_emojis=tuple("abcdefg"))
    assert long.quick_emojis == ("a", "b", "c", "d", "e")


def test_set_quick_emoji_replaces_one_slot() -> None:
    store = PreferencesStore()
    store.set_quick_emoji(2, "😴")

    assert store.quick_emojis()[2] == "😴"
    assert store.quick_emojis()[:2] == DEFAULT_QUICK_EMOJIS[:2]

    with pytest.raises(IndexError):
        store.set_quick_emoji(5, "😴")


def test_update_validates_fields() -> None:
    store = PreferencesStore()
    before = store.current

    updated = store.update(theme="dark", provider="openai", openai_key="sk-test")

    assert updated.theme is ThemeMode.DARK
    assert updated.provider is AIProvider.OPENAI
    assert before.theme is ThemeMode.SYSTEM
    assert "sk-test" not in repr(updated)

    with pytest.raises(ValueError):
        store.update(colour="red")
    with pytest.raises(ValidationError):
        store.update(theme="sepia")
    assert store.current == updated


def test_snapshots_are_frozen() -> None:
    prefs = AppPreferences()
    with pytest.raises(ValidationError):
        prefs.theme = ThemeMode.LIGHT  # type: ignore[misc]

from .metrics_view import MetricsView
from .preferences import AppPreferences, PreferencesStore
from .store import EntryStore

__all__ = ["AppPreferences", "EntryStore", "MetricsView", "PreferencesStore"]

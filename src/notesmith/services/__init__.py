"""Service layer helpers (settings persistence)."""

from .settings import NoteSettings, SettingsStore

__all__ = ["NoteSettings", "SettingsStore"]

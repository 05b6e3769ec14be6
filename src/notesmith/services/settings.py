"""Settings dataclasses and persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from ..editor.document_model import DEFAULT_ORIGIN
from ..editor.note_inserter import NoteTemplate

__all__ = ["NoteSettings", "SettingsStore"]

LOGGER = logging.getLogger(__name__)
_DEFAULT_SETTINGS_PATH = Path.home() / ".notesmith" / "settings.json"
_SETTINGS_VERSION = 1
_ENV_OVERRIDES: Mapping[str, str] = {
    "NOTESMITH_NOTE_STYLE": "note_style",
    "NOTESMITH_ORIGIN": "origin",
    "NOTESMITH_SEPARATOR": "separator",
    "NOTESMITH_KEYWORD": "keyword",
    "NOTESMITH_BODY_TEXT": "body_text",
    "NOTESMITH_DEBUG_LOGGING": "debug_logging",
    "NOTESMITH_LOG_DIR": "log_dir",
}
_BOOL_FIELDS = frozenset({"debug_logging"})
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}


@dataclass(slots=True)
class NoteSettings:
    """User-configurable note defaults persisted between sessions."""

    note_style: str = "f"
    origin: str = DEFAULT_ORIGIN
    separator: str = " + "
    keyword: str = "keyword"
    body_text: str = "Text."
    debug_logging: bool = False
    log_dir: str | None = None

    def template(self) -> NoteTemplate:
        """Return the run template described by these settings."""

        return NoteTemplate(separator=self.separator, keyword=self.keyword, body=self.body_text)


_FIELD_NAMES = frozenset(field.name for field in fields(NoteSettings))


class SettingsStore:
    """Persistence adapter for :class:`NoteSettings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or _DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> NoteSettings:
        """Load settings from disk, then layer CLI and environment overrides on top."""

        payload = self._read_payload()
        known = {key: value for key, value in payload.items() if key in _FIELD_NAMES}
        try:
            settings = NoteSettings(**known)
        except TypeError as exc:
            LOGGER.warning("Settings payload contained unexpected data: %s", exc)
            settings = NoteSettings()
        settings = _with_overrides(settings, overrides or {}, source="CLI")
        return _with_overrides(settings, _environment_overrides(), source="environment")

    def save(self, settings: NoteSettings) -> Path:
        """Write settings atomically through a temporary sibling file."""

        body = json.dumps({**asdict(settings), "version": _SETTINGS_VERSION}, indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        return self._path

    def _read_payload(self) -> Dict[str, Any]:
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not contain an object", self._path)
            return {}
        return payload


def _with_overrides(settings: NoteSettings, overrides: Mapping[str, Any], *, source: str) -> NoteSettings:
    changes = {key: value for key, value in overrides.items() if key in _FIELD_NAMES and value is not None}
    if not changes:
        return settings
    LOGGER.debug("Applying %s settings overrides: %s", source, sorted(changes))
    return replace(settings, **changes)


def _environment_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for env_name, field_name in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is None:
            continue
        if field_name in _BOOL_FIELDS:
            overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        else:
            overrides[field_name] = value
    return overrides

"""Command-line host inserting a note into a fresh document."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, TextIO, get_type_hints

from .editor.document_model import AttributedDocument
from .editor.markup import render_html
from .editor.note_inserter import NoteInserter, NoteSpecification
from .services.settings import NoteSettings, SettingsStore
from .utils import logging as logging_utils

_LOGGER = logging.getLogger(__name__)
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", "disabled"}


def configure_logging(settings: NoteSettings, *, debug: bool = False) -> Path | None:
    """Enable file logging when debugging is requested on the command line or in settings."""

    if not (debug or settings.debug_logging):
        return None
    return logging_utils.setup_logging(settings, debug=debug)


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> NoteSettings:
    """Load persisted settings, applying CLI overrides on top."""

    active_store = store or SettingsStore(path)
    return active_store.load(overrides=overrides)


def main(argv: Sequence[str] | None = None, *, stream: TextIO | None = None) -> int:
    """Entry point invoked by the `notesmith` console script."""

    args = _parse_cli_args(argv)
    output = stream or sys.stdout

    settings_path = args.settings_path or os.environ.get("NOTESMITH_SETTINGS_PATH")
    resolved_path = Path(settings_path).expanduser() if settings_path else None
    try:
        cli_overrides = _coerce_cli_overrides(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    settings = load_settings(resolved_path, overrides=cli_overrides or None)
    configure_logging(settings, debug=args.debug or _env_flag("NOTESMITH_DEBUG", default=False))

    spec = NoteSpecification(
        style=args.style or settings.note_style,
        caller=args.caller,
        note_id=args.note_id,
        chapter=args.chapter,
        verse=args.verse,
    )
    document = AttributedDocument(args.text or "")
    end = NoteInserter.from_settings(settings).insert(document, spec)
    _LOGGER.debug("Note inserted; document length is now %s", end)

    if args.html:
        print(render_html(document), file=output)
    else:
        print(document.text, end="", file=output)
    return 0


def _parse_cli_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="notesmith",
        add_help=True,
        description="Append a footnote paragraph to a document and print the result.",
    )
    parser.add_argument("--caller", default="+", help="Visible note marker glyph.")
    parser.add_argument("--note-id", default="1", help="Identifier appended to the caller format name.")
    parser.add_argument("--chapter", type=int, required=True)
    parser.add_argument("--verse", type=int, required=True)
    parser.add_argument("--style", help="Paragraph style of the note (defaults to the configured note_style).")
    parser.add_argument("--text", help="Initial document text.")
    parser.add_argument("--html", action="store_true", help="Print editor markup instead of plain text.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.notesmith/settings.json path.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override persisted settings (repeatable).",
    )
    return parser.parse_args(argv)


def _coerce_cli_overrides(items: Sequence[str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    type_hints = get_type_hints(NoteSettings)
    for entry in items:
        if "=" not in entry:
            raise ValueError(f"Override '{entry}' must use KEY=VALUE syntax.")
        key, raw_value = entry.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError("Override is missing a field name.")
        if key not in type_hints:
            raise ValueError(f"Unknown setting '{key}'.")
        if type_hints[key] is bool:
            overrides[key] = _parse_bool(raw_value.strip())
        else:
            overrides[key] = raw_value
    return overrides


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"Cannot interpret '{value}' as a boolean.")


def _env_flag(name: str, *, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


if __name__ == "__main__":  # pragma: no cover - manual launch
    raise SystemExit(main())

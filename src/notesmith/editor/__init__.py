"""Editor package containing the attributed document model and note insertion."""

from importlib import import_module
from typing import Any

from . import document_model, markup, note_inserter

__all__ = ["document_model", "markup", "note_inserter"]


def __getattr__(name: str) -> Any:
	if name == "qt_document":
		module = import_module(f"{__name__}.{name}")
		globals()[name] = module
		return module
	raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

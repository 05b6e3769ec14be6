"""Compose footnote / cross-reference entries out of formatted runs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .document_model import (
    DEFAULT_ORIGIN,
    PARAGRAPH_BREAK,
    EditableDocument,
    Run,
    RunKind,
    insert_paragraph_break,
)

__all__ = ["NoteInserter", "NoteSpecification", "NoteTemplate", "insert_note"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class NoteSpecification:
    """Everything needed to insert one note."""

    style: str
    caller: str
    note_id: Any
    chapter: Any
    verse: Any

    @property
    def reference(self) -> str:
        return f"{self.chapter}.{self.verse}"


@dataclass(slots=True, frozen=True)
class NoteTemplate:
    """Placeholder text and format names used for the runs following the caller."""

    caller_prefix: str = "notebody"
    separator: str = " + "
    reference_format: str = "fr"
    keyword: str = "keyword"
    keyword_format: str = "fk"
    body: str = "Text."
    body_format: str = "ft"

    def caller_format(self, note_id: Any) -> str:
        return f"{self.caller_prefix}{note_id}"


class NoteInserter:
    """Append a note paragraph to a document, one run at a time."""

    def __init__(self, template: NoteTemplate | None = None, *, origin: str = DEFAULT_ORIGIN) -> None:
        self.template = template or NoteTemplate()
        self.origin = origin

    @classmethod
    def from_settings(cls, settings: Any) -> "NoteInserter":
        return cls(settings.template(), origin=settings.origin)

    def runs(self, spec: NoteSpecification) -> tuple[Run, ...]:
        """Return the character runs that fill the note paragraph, in order."""

        template = self.template
        return (
            Run(spec.caller, RunKind.CHARACTER, template.caller_format(spec.note_id)),
            Run(template.separator, RunKind.CHARACTER, ""),
            Run(spec.reference, RunKind.CHARACTER, template.reference_format),
            Run(" ", RunKind.CHARACTER, template.keyword_format),
            Run(template.keyword, RunKind.CHARACTER, template.keyword_format),
            Run(" ", RunKind.CHARACTER, template.body_format),
            Run(template.body, RunKind.CHARACTER, template.body_format),
        )

    def insert(self, document: EditableDocument, spec: NoteSpecification) -> int:
        """Insert the note at the end of ``document`` and return the end-of-insertion offset.

        Offsets advance by the length of each run actually inserted; the document
        is not re-queried between runs, so it must not be mutated concurrently.
        """

        start = document.length()
        pos = insert_paragraph_break(document, start, spec.style, self.origin)
        inserted = len(PARAGRAPH_BREAK)
        for run in self.runs(spec):
            document.insert(pos, run.text, run.kind, run.format_name, self.origin)
            pos += len(run.text)
            inserted += len(run.text)
        # The end does not depend on which side of the content the break sits.
        end = start + inserted
        LOGGER.debug("Inserted note %s at %s-%s (style=%s)", spec.note_id, start, end, spec.style)
        return end


def insert_note(
    document: EditableDocument,
    style: str,
    caller: str,
    note_id: Any,
    chapter: Any,
    verse: Any,
    *,
    origin: str = DEFAULT_ORIGIN,
) -> int:
    """Insert a note paragraph at the end of ``document`` using the default template."""

    spec = NoteSpecification(style=style, caller=caller, note_id=note_id, chapter=chapter, verse=verse)
    return NoteInserter(origin=origin).insert(document, spec)

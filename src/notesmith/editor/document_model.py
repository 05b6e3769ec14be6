"""Attributed-text document model consumed by the note inserter."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

__all__ = [
    "DEFAULT_ORIGIN",
    "DEFAULT_PARAGRAPH_STYLE",
    "PARAGRAPH_BREAK",
    "AttributedDocument",
    "DocumentRangeError",
    "EditableDocument",
    "InsertRecord",
    "Run",
    "RunKind",
    "StyledSpan",
    "insert_paragraph_break",
]

LOGGER = logging.getLogger(__name__)

DEFAULT_ORIGIN = "user"
DEFAULT_PARAGRAPH_STYLE = "p"
PARAGRAPH_BREAK = "\n"


class RunKind(str, Enum):
    """Whether a run carries a paragraph-level or a character-level format."""

    PARAGRAPH = "paragraph"
    CHARACTER = "character"


class DocumentRangeError(IndexError):
    """Raised when an insertion targets an offset outside the document."""

    def __init__(self, message: str, *, offset: int, length: int, reason: str = "offset_out_of_range") -> None:
        super().__init__(message)
        self.offset = offset
        self.length = length
        self.reason = reason

    def details(self) -> dict[str, Any]:
        return {"reason": self.reason, "offset": self.offset, "length": self.length}


@dataclass(slots=True, frozen=True)
class Run:
    """A span of text sharing one formatting tag, inserted in a single call."""

    text: str
    kind: RunKind = RunKind.CHARACTER
    format_name: str = ""


@dataclass(slots=True, frozen=True)
class StyledSpan:
    """Absolute position of a stored segment, as reported by :meth:`AttributedDocument.spans`."""

    start: int
    end: int
    text: str
    kind: RunKind
    format_name: str


@dataclass(slots=True, frozen=True)
class InsertRecord:
    """Change notification delivered to document listeners."""

    offset: int
    text: str
    kind: RunKind
    format_name: str
    origin: str


class EditableDocument(Protocol):
    """Minimal editor surface required to insert formatted runs."""

    def length(self) -> int:
        ...

    def insert(
        self,
        offset: int,
        text: str,
        kind: RunKind,
        format_name: str,
        origin: str = DEFAULT_ORIGIN,
    ) -> None:
        ...


class ChangeListener(Protocol):
    """Callback invoked after every successful insertion."""

    def __call__(self, record: InsertRecord) -> None:
        ...


def insert_paragraph_break(
    document: EditableDocument,
    offset: int,
    style: str,
    origin: str = DEFAULT_ORIGIN,
) -> int:
    """Insert a paragraph break carrying ``style`` and return where its content starts.

    The break terminates the paragraph it formats, so the paragraph's character
    runs are inserted ahead of it, beginning at ``offset`` itself. Callers must
    use the returned offset rather than assume where the break lands relative
    to the content.
    """

    document.insert(offset, PARAGRAPH_BREAK, RunKind.PARAGRAPH, style, origin)
    return offset


@dataclass(slots=True)
class _Segment:
    text: str
    kind: RunKind
    format_name: str


class AttributedDocument:
    """In-memory rich-text buffer storing text as an ordered list of styled segments.

    Paragraph breaks are stored as paragraph-kind segments whose format applies
    to the line they terminate. Initial text is split into lines that each end
    with a break, so appended content always starts a new paragraph. Adjacent
    character segments sharing a format are coalesced, so ``spans()`` reports
    the runs as an editor would render them.
    """

    def __init__(
        self,
        text: str = "",
        *,
        format_name: str = "",
        paragraph_style: str = DEFAULT_PARAGRAPH_STYLE,
    ) -> None:
        self._segments: list[_Segment] = []
        self._listeners: list[ChangeListener] = []
        self._last_change_origin: str | None = None
        self.version_id = 1
        if text:
            self._load_paragraphs(text, format_name, paragraph_style)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def length(self) -> int:
        return sum(len(segment.text) for segment in self._segments)

    def __len__(self) -> int:
        return self.length()

    @property
    def text(self) -> str:
        return "".join(segment.text for segment in self._segments)

    @property
    def last_change_origin(self) -> str | None:
        """Return the provenance tag of the most recent insertion."""

        return self._last_change_origin

    def spans(self) -> tuple[StyledSpan, ...]:
        result: list[StyledSpan] = []
        start = 0
        for segment in self._segments:
            end = start + len(segment.text)
            result.append(StyledSpan(start, end, segment.text, segment.kind, segment.format_name))
            start = end
        return tuple(result)

    def format_at(self, offset: int) -> tuple[RunKind, str]:
        """Return the kind and format name of the character at ``offset``."""

        length = self.length()
        if offset < 0 or offset >= length:
            raise DocumentRangeError(
                f"No character at offset {offset} (length {length})",
                offset=offset,
                length=length,
            )
        index, _ = self._locate(offset)
        segment = self._segments[index]
        return segment.kind, segment.format_name

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def insert(
        self,
        offset: int,
        text: str,
        kind: RunKind = RunKind.CHARACTER,
        format_name: str = "",
        origin: str = DEFAULT_ORIGIN,
    ) -> None:
        """Insert ``text`` at ``offset`` tagged with ``kind`` and ``format_name``."""

        kind = RunKind(kind)
        length = self.length()
        if offset < 0 or offset > length:
            LOGGER.debug("Rejected insert at %s (length=%s, origin=%s)", offset, length, origin)
            raise DocumentRangeError(
                f"Insert offset {offset} outside document of length {length}",
                offset=offset,
                length=length,
            )
        if not text:
            return

        index, inner = self._locate(offset)
        if inner:
            head = self._segments[index]
            tail = _Segment(head.text[inner:], head.kind, head.format_name)
            head.text = head.text[:inner]
            self._segments.insert(index + 1, tail)
            index += 1
        self._segments.insert(index, _Segment(text, kind, format_name))
        self._coalesce(index)

        self.version_id += 1
        self._last_change_origin = origin
        record = InsertRecord(offset, text, kind, format_name, origin)
        for listener in list(self._listeners):
            listener(record)

    def add_change_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def remove_change_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _load_paragraphs(self, text: str, format_name: str, paragraph_style: str) -> None:
        """Seed the buffer so every line of ``text`` ends with a paragraph break."""

        lines = text.split(PARAGRAPH_BREAK)
        if not lines[-1]:
            lines.pop()
        for line in lines:
            if line:
                self._segments.append(_Segment(line, RunKind.CHARACTER, format_name))
            self._segments.append(_Segment(PARAGRAPH_BREAK, RunKind.PARAGRAPH, paragraph_style))

    def _locate(self, offset: int) -> tuple[int, int]:
        """Return the segment index holding ``offset`` and the offset inside it."""

        start = 0
        for index, segment in enumerate(self._segments):
            end = start + len(segment.text)
            if offset < end:
                return index, offset - start
            start = end
        return len(self._segments), 0

    def _coalesce(self, index: int) -> None:
        segment = self._segments[index]
        if segment.kind is not RunKind.CHARACTER:
            return
        if index + 1 < len(self._segments) and self._mergeable(segment, self._segments[index + 1]):
            segment.text += self._segments.pop(index + 1).text
        if index > 0 and self._mergeable(self._segments[index - 1], segment):
            self._segments[index - 1].text += self._segments.pop(index).text

    @staticmethod
    def _mergeable(left: _Segment, right: _Segment) -> bool:
        return (
            left.kind is RunKind.CHARACTER
            and right.kind is RunKind.CHARACTER
            and left.format_name == right.format_name
        )

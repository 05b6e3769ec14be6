"""Adapter exposing a PySide6 ``QTextDocument`` as an editable run target."""

from __future__ import annotations

import logging
from typing import Any

from PySide6.QtGui import QTextBlockFormat, QTextCharFormat, QTextCursor, QTextDocument, QTextFormat

from .document_model import DEFAULT_ORIGIN, PARAGRAPH_BREAK, DocumentRangeError, RunKind

__all__ = ["FORMAT_NAME_PROPERTY", "QtTextDocumentAdapter"]

LOGGER = logging.getLogger(__name__)

FORMAT_NAME_PROPERTY = QTextFormat.Property.UserProperty.value + 1


class QtTextDocumentAdapter:
    """Insert named runs into a ``QTextDocument``.

    Format names are stored as a user property on the char/block formats. A
    paragraph break splits the block at the offset and styles the block it
    terminates; the block after the split keeps the original block format.
    """

    def __init__(self, document: Any | None = None) -> None:
        self._document = document if document is not None else QTextDocument()
        self.last_change_origin: str | None = None

    @property
    def document(self) -> Any:
        return self._document

    @property
    def text(self) -> str:
        return self._document.toPlainText()

    def length(self) -> int:
        # characterCount() includes the separator of the final block.
        return self._document.characterCount() - 1

    def insert(
        self,
        offset: int,
        text: str,
        kind: RunKind = RunKind.CHARACTER,
        format_name: str = "",
        origin: str = DEFAULT_ORIGIN,
    ) -> None:
        kind = RunKind(kind)
        length = self.length()
        if offset < 0 or offset > length:
            raise DocumentRangeError(
                f"Insert offset {offset} outside document of length {length}",
                offset=offset,
                length=length,
            )
        if not text:
            return

        cursor = QTextCursor(self._document)
        cursor.setPosition(offset)
        if kind is RunKind.PARAGRAPH:
            for index, part in enumerate(text.split(PARAGRAPH_BREAK)):
                if index:
                    self._split_block(cursor, format_name)
                if part:
                    cursor.insertText(part, self._char_format(""))
        else:
            cursor.insertText(text, self._char_format(format_name))
        self.last_change_origin = origin
        LOGGER.debug("Qt insert at %s: %r (%s/%s, origin=%s)", offset, text, kind.value, format_name, origin)

    def char_format_name(self, offset: int) -> str:
        """Return the character format name of the character at ``offset``."""

        cursor = QTextCursor(self._document)
        cursor.setPosition(offset + 1)
        return cursor.charFormat().stringProperty(FORMAT_NAME_PROPERTY)

    def block_format_name(self, offset: int) -> str:
        """Return the paragraph format name of the block containing ``offset``."""

        block = self._document.findBlock(offset)
        return block.blockFormat().stringProperty(FORMAT_NAME_PROPERTY)

    @staticmethod
    def _char_format(format_name: str) -> QTextCharFormat:
        char_format = QTextCharFormat()
        char_format.setProperty(FORMAT_NAME_PROPERTY, format_name)
        return char_format

    @staticmethod
    def _split_block(cursor: QTextCursor, style: str) -> None:
        carried = cursor.blockFormat()
        cursor.insertBlock(carried)
        terminated = QTextBlockFormat(carried)
        terminated.setProperty(FORMAT_NAME_PROPERTY, style)
        QTextCursor(cursor.block().previous()).setBlockFormat(terminated)

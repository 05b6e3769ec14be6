"""Tests for the QTextDocument adapter."""

from __future__ import annotations

import pytest

from notesmith.editor.document_model import DocumentRangeError, RunKind
from notesmith.editor.note_inserter import insert_note


@pytest.fixture(scope="module", autouse=True)
def _qt_app():
    qt_widgets = pytest.importorskip("PySide6.QtWidgets")
    app = qt_widgets.QApplication.instance()
    if app is None:  # pragma: no cover - depends on PySide6 availability
        app = qt_widgets.QApplication([])
    yield app


@pytest.fixture
def adapter():
    from notesmith.editor.qt_document import QtTextDocumentAdapter

    return QtTextDocumentAdapter()


def test_note_in_empty_qt_document(adapter):
    end = insert_note(adapter, "f", "1", 1, 3, 16)

    assert end == 23
    assert adapter.length() == 23
    assert adapter.text == "1 + 3.16 keyword Text.\n"
    assert adapter.last_change_origin == "user"


def test_formats_are_stored_as_named_properties(adapter):
    insert_note(adapter, "f", "1", 7, 3, 16)

    assert adapter.block_format_name(0) == "f"
    assert adapter.char_format_name(0) == "notebody7"
    assert adapter.char_format_name(4) == "fr"
    assert adapter.char_format_name(10) == "fk"
    assert adapter.char_format_name(18) == "ft"


def test_paragraph_break_keeps_original_format_on_following_block(adapter):
    adapter.insert(0, "abcdef", RunKind.CHARACTER, "")
    adapter.insert(6, "\n", RunKind.PARAGRAPH, "p")
    adapter.insert(3, "\n", RunKind.PARAGRAPH, "s")

    assert adapter.text == "abc\ndef\n"
    assert adapter.block_format_name(0) == "s"
    assert adapter.block_format_name(4) == "p"


def test_out_of_range_offset_raises(adapter):
    with pytest.raises(DocumentRangeError):
        adapter.insert(1, "x", RunKind.CHARACTER, "")

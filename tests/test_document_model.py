"""Tests for the in-memory attributed document."""

from __future__ import annotations

import pytest

from notesmith.editor.document_model import (
    AttributedDocument,
    DocumentRangeError,
    InsertRecord,
    RunKind,
    insert_paragraph_break,
)


def test_insert_grows_length_by_text_length():
    document = AttributedDocument("hello")

    document.insert(5, " world", RunKind.CHARACTER, "it")

    assert document.length() == 12
    assert len(document) == 12
    assert document.text == "hello world\n"


def test_insert_splits_existing_segment():
    document = AttributedDocument("abcdef")

    document.insert(3, "XY", RunKind.CHARACTER, "bd")

    spans = [(span.start, span.end, span.text, span.format_name) for span in document.spans()]
    assert spans == [(0, 3, "abc", ""), (3, 5, "XY", "bd"), (5, 8, "def", ""), (8, 9, "\n", "p")]


def test_adjacent_character_runs_with_same_format_coalesce():
    document = AttributedDocument()

    document.insert(0, " ", RunKind.CHARACTER, "fk")
    document.insert(1, "keyword", RunKind.CHARACTER, "fk")

    assert [(span.text, span.format_name) for span in document.spans()] == [(" keyword", "fk")]


def test_paragraph_breaks_are_never_coalesced():
    document = AttributedDocument()

    document.insert(0, "\n", RunKind.PARAGRAPH, "p")
    document.insert(1, "\n", RunKind.PARAGRAPH, "p")

    assert len(document.spans()) == 2


def test_string_kind_is_accepted():
    document = AttributedDocument()

    document.insert(0, "\n", "paragraph", "q1")

    assert document.format_at(0) == (RunKind.PARAGRAPH, "q1")


@pytest.mark.parametrize("offset", [-1, 7])
def test_out_of_range_insert_raises(offset):
    document = AttributedDocument("hello")

    with pytest.raises(DocumentRangeError) as excinfo:
        document.insert(offset, "x", RunKind.CHARACTER, "")

    assert excinfo.value.details() == {"reason": "offset_out_of_range", "offset": offset, "length": 6}
    assert document.text == "hello\n"


def test_empty_insert_is_a_no_op():
    document = AttributedDocument("hello")
    version = document.version_id

    document.insert(2, "", RunKind.CHARACTER, "fk")

    assert document.text == "hello\n"
    assert document.version_id == version
    assert document.last_change_origin is None


def test_format_at_rejects_offset_past_end():
    document = AttributedDocument("ab")

    assert document.format_at(2) == (RunKind.PARAGRAPH, "p")
    with pytest.raises(DocumentRangeError):
        document.format_at(3)


def test_listeners_receive_insert_records():
    document = AttributedDocument()
    received: list[InsertRecord] = []
    document.add_change_listener(received.append)

    document.insert(0, "abc", RunKind.CHARACTER, "fr", origin="api")
    document.remove_change_listener(received.append)
    document.insert(3, "d", RunKind.CHARACTER, "fr")

    assert received == [InsertRecord(0, "abc", RunKind.CHARACTER, "fr", "api")]
    assert document.last_change_origin == "user"
    assert document.version_id == 3


def test_insert_paragraph_break_returns_content_offset():
    document = AttributedDocument("body")

    anchor = insert_paragraph_break(document, 5, "f")
    document.insert(anchor, "note", RunKind.CHARACTER, "ft")

    assert anchor == 5
    assert document.text == "body\nnote\n"
    assert document.format_at(4) == (RunKind.PARAGRAPH, "p")
    assert document.format_at(9) == (RunKind.PARAGRAPH, "f")


def test_initial_text_is_seeded_as_terminated_paragraphs():
    document = AttributedDocument("one\ntwo", format_name="v", paragraph_style="q1")

    spans = [(span.text, span.kind, span.format_name) for span in document.spans()]
    assert spans == [
        ("one", RunKind.CHARACTER, "v"),
        ("\n", RunKind.PARAGRAPH, "q1"),
        ("two", RunKind.CHARACTER, "v"),
        ("\n", RunKind.PARAGRAPH, "q1"),
    ]


def test_initial_text_with_trailing_break_is_not_terminated_twice():
    document = AttributedDocument("Existing text\n\n")

    assert document.text == "Existing text\n\n"
    assert [span.kind for span in document.spans()] == [RunKind.CHARACTER, RunKind.PARAGRAPH, RunKind.PARAGRAPH]


def test_empty_initial_text_stores_nothing():
    document = AttributedDocument("")

    assert document.length() == 0
    assert document.spans() == ()

"""Render attributed documents using the web editor's paragraph/span class names."""

from __future__ import annotations

from html import escape

from .document_model import DEFAULT_PARAGRAPH_STYLE, AttributedDocument, RunKind

__all__ = ["BLOCK_CLASS_PREFIX", "INLINE_CLASS_PREFIX", "DEFAULT_PARAGRAPH_STYLE", "render_html"]

BLOCK_CLASS_PREFIX = "b-"
INLINE_CLASS_PREFIX = "i-"


def render_html(document: AttributedDocument) -> str:
    """Return ``document`` as a sequence of ``<p>`` elements holding ``<span>`` runs.

    Each paragraph break closes the paragraph it terminates and supplies its
    class. Text after the last break is closed with the default ``p`` style.
    """

    paragraphs: list[str] = []
    inline: list[str] = []
    for span in document.spans():
        if span.kind is RunKind.PARAGRAPH:
            for char in span.text:
                if char == "\n":
                    paragraphs.append(_paragraph(span.format_name, inline))
                    inline = []
                else:
                    inline.append(escape(char, quote=False))
            continue
        body = escape(span.text, quote=False)
        if span.format_name:
            inline.append(f'<span class="{INLINE_CLASS_PREFIX}{escape(span.format_name)}">{body}</span>')
        else:
            inline.append(body)
    if inline:
        paragraphs.append(_paragraph("", inline))
    return "".join(paragraphs)


def _paragraph(style: str, inline: list[str]) -> str:
    css_class = f"{BLOCK_CLASS_PREFIX}{escape(style or DEFAULT_PARAGRAPH_STYLE)}"
    return f'<p class="{css_class}">{"".join(inline)}</p>'

"""Tests for click target resolution."""

import pytest

from pagecraft.editor.document import EditorDocument
from pagecraft.editor.selection import (
    SelectionRule,
    has_direct_text,
    resolve_selection,
)


def _mount(html: str) -> EditorDocument:
    doc = EditorDocument()
    doc.mount(html)
    return doc


class TestResolveSelection:
    """Tests for resolve_selection."""

    def test_text_tag_selected_as_is(self):
        """A heading with text is its own selection."""
        doc = _mount("<h1>Title</h1>")
        h1 = doc.select_one("h1")

        resolution = resolve_selection(h1)

        assert resolution.element is h1
        assert resolution.rule is SelectionRule.TEXT_TARGET

    def test_text_descendant(self):
        """A text-less div resolves to its paragraph."""
        doc = _mount("<div><p>Hello</p></div>")

        resolution = resolve_selection(doc.select_one("div"))

        assert resolution.element is doc.select_one("p")
        assert resolution.rule is SelectionRule.TEXT_DESCENDANT

    def test_div_with_loose_text_selected(self):
        """Loose text next to a span selects the div."""
        doc = _mount("<div>Loose text<span>X</span></div>")
        div = doc.select_one("div")

        resolution = resolve_selection(div)

        assert resolution.element is div
        assert resolution.rule is SelectionRule.DIRECT_TEXT

    def test_div_text_beats_paragraph_child(self):
        """A div's own text wins over a paragraph inside it."""
        doc = _mount("<div>Price<p>$10</p></div>")
        div = doc.select_one("div")

        resolution = resolve_selection(div)

        assert resolution.element is div
        assert resolution.rule is SelectionRule.DIRECT_TEXT

    def test_text_tag_with_nested_text(self):
        """Text inside nested spans still counts for the link."""
        doc = _mount("<a><span> </span><span>Go</span></a>")

        resolution = resolve_selection(doc.select_one("a"))

        assert resolution.element is doc.select_one("a")
        assert resolution.rule is SelectionRule.TEXT_TARGET

    def test_skips_empty_descendants(self):
        """The first descendant that actually has text wins."""
        doc = _mount("<section><p> </p><h2>Pricing</h2></section>")

        resolution = resolve_selection(doc.select_one("section"))

        assert resolution.element is doc.select_one("h2")

    def test_fallback_to_target(self):
        """Nothing textual means the target itself."""
        doc = _mount('<div><img src="hero.png"></div>')
        div = doc.select_one("div")

        resolution = resolve_selection(div)

        assert resolution.element is div
        assert resolution.rule is SelectionRule.FALLBACK

    @pytest.mark.parametrize(
        "html,expected",
        [
            ("<div>Text</div>", True),
            ("<div>  <p>Text</p>  </div>", False),
            ("<div><!-- note --><p>Text</p></div>", False),
        ],
    )
    def test_has_direct_text(self, html, expected):
        """Only non-whitespace direct text nodes count."""
        doc = _mount(html)

        assert has_direct_text(doc.select_one("div")) is expected

"""Tests for the editor document, inline style helpers and event dispatch."""

from pagecraft.editor.document import (
    EditorDocument,
    css_property_name,
    get_inline_style,
    is_inline_important,
    parse_inline_style,
    remove_inline_style,
    set_inline_style,
)
from pagecraft.editor.events import EditorEvent, EventType


class TestInlineStyles:
    """Tests for inline style parsing and writing."""

    def test_css_property_name(self):
        """camelCase and kebab-case both normalize."""
        assert css_property_name("fontSize") == "font-size"
        assert css_property_name("background-color") == "background-color"
        assert css_property_name("color") == "color"

    def test_parse_inline_style(self):
        """Test parsing with !important."""
        declarations = parse_inline_style("color: red; font-size: 12px !important;;bogus")

        assert declarations == {
            "color": ("red", False),
            "font-size": ("12px", True),
        }

    def test_set_and_get(self):
        """Test set/get round trip on an element."""
        doc = EditorDocument()
        doc.mount("<p>Hi</p>")
        p = doc.select_one("p")

        set_inline_style(p, "color", "red", important=True)

        assert get_inline_style(p, "color") == "red"
        assert is_inline_important(p, "color") is True
        assert p["style"] == "color: red !important;"

    def test_empty_value_removes(self):
        """Setting an empty value removes the declaration and the attribute."""
        doc = EditorDocument()
        doc.mount('<p style="color: red">Hi</p>')
        p = doc.select_one("p")

        set_inline_style(p, "color", "")

        assert not p.has_attr("style")

    def test_remove_keeps_other_declarations(self):
        """Test removing one declaration."""
        doc = EditorDocument()
        doc.mount('<p style="color: red; outline: none">Hi</p>')
        p = doc.select_one("p")

        remove_inline_style(p, "outline")

        assert p["style"] == "color: red;"


class TestEditorDocument:
    """Tests for mounting and serialization."""

    def test_mount_and_serialize(self):
        """Mounted markup serializes back unchanged."""
        doc = EditorDocument()
        html = '<h1 class="title">Hello</h1><p>World</p>'

        doc.mount(html)

        assert doc.serialize() == html
        assert [el.name for el in doc.elements()] == ["h1", "p"]

    def test_remount_replaces_content(self):
        """Test that mount replaces previous content."""
        doc = EditorDocument()
        doc.mount("<p>One</p>")
        doc.mount("<p>Two</p>")

        assert doc.serialize() == "<p>Two</p>"

    def test_unmount(self):
        """Test unmount empties the container."""
        doc = EditorDocument()
        doc.mount("<p>One</p>")

        doc.unmount()

        assert doc.serialize() == ""
        assert doc.elements() == []

    def test_contains(self):
        """Test containment check by identity."""
        doc = EditorDocument()
        doc.mount("<div><p>One</p></div>")
        other = EditorDocument()
        other.mount("<div><p>One</p></div>")

        assert doc.contains(doc.select_one("p"))
        assert not doc.contains(other.select_one("p"))

    def test_serialize_with_scrub_leaves_live_tree(self):
        """Scrubbing works on a copy."""
        doc = EditorDocument()
        doc.mount('<p style="cursor: pointer;">Hi</p>')

        def scrub(live, copied):
            remove_inline_style(copied, "cursor")

        assert doc.serialize(scrub=scrub) == "<p>Hi</p>"
        assert doc.select_one("p")["style"] == "cursor: pointer;"

    def test_head_nodes_are_not_serialized(self):
        """Injected head nodes stay out of the content."""
        doc = EditorDocument()
        doc.mount("<p>Hi</p>")
        node = doc.new_tag("style", id="rule-1")
        node.string = "p { color: red; }"

        doc.insert_head_node(node)

        assert doc.head_node("rule-1") is node
        assert len(doc.head_nodes()) == 1
        assert "style" not in doc.serialize()


class TestDispatch:
    """Tests for listener registration and bubbling."""

    def test_click_bubbles_to_ancestors(self):
        """Test bubbling order."""
        doc = EditorDocument()
        doc.mount("<div><p><span>Hi</span></p></div>")
        calls = []
        for tag in ("div", "p", "span"):
            element = doc.select_one(tag)
            doc.add_listener(element, EventType.CLICK, lambda e, tag=tag: calls.append(tag))

        doc.fire(EventType.CLICK, doc.select_one("span"))

        assert calls == ["span", "p", "div"]

    def test_stop_propagation(self):
        """Test that stop_propagation halts bubbling."""
        doc = EditorDocument()
        doc.mount("<div><p>Hi</p></div>")
        calls = []

        def on_p(event: EditorEvent):
            calls.append("p")
            event.stop_propagation()

        doc.add_listener(doc.select_one("p"), EventType.CLICK, on_p)
        doc.add_listener(doc.select_one("div"), EventType.CLICK, lambda e: calls.append("div"))

        event = doc.fire(EventType.CLICK, doc.select_one("p"))

        assert calls == ["p"]
        assert event.propagation_stopped is True
        assert event.current_target is None

    def test_pointer_enter_does_not_bubble(self):
        """Enter fires on the target only."""
        doc = EditorDocument()
        doc.mount("<div><p>Hi</p></div>")
        calls = []
        doc.add_listener(doc.select_one("div"), EventType.POINTER_ENTER, lambda e: calls.append("div"))

        doc.fire(EventType.POINTER_ENTER, doc.select_one("p"))

        assert calls == []

    def test_identical_markup_elements_have_separate_listeners(self):
        """Structurally equal elements are still distinct."""
        doc = EditorDocument()
        doc.mount("<p>Same</p><p>Same</p>")
        first, second = doc.elements()
        calls = []
        doc.add_listener(first, EventType.CLICK, lambda e: calls.append("first"))

        doc.fire(EventType.CLICK, second)

        assert calls == []
        assert doc.listener_count(first) == 1
        assert doc.listener_count(second) == 0

    def test_remove_listener(self):
        """Test listener removal and counts."""
        doc = EditorDocument()
        doc.mount("<p>Hi</p>")
        p = doc.select_one("p")

        def listener(event):
            pass

        doc.add_listener(p, EventType.CLICK, listener)
        assert doc.listener_count() == 1

        assert doc.remove_listener(p, EventType.CLICK, listener) is True
        assert doc.remove_listener(p, EventType.CLICK, listener) is False
        assert doc.listener_count() == 0

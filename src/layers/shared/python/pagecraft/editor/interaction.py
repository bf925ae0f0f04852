"""Pointer interaction wired across every element of a mounted document.

``wire_document`` attaches click, pointer-enter, pointer-leave and drag
listeners to every element except script/style, and returns an
``InteractionHandle``. The handle keeps an ``ElementRecord`` per wired
element (listeners, overlay state, editor-applied styles) so that
``dispose()`` can undo everything from those records alone.

Overlays (hover and selection tint) are editor chrome: they are written as
plain inline declarations. Clearing them puts back whatever the property held
before the editor touched it: the user's value when one was set through the
editor, otherwise the page's own inline value captured at wiring time, and
absence when there was neither.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

import structlog
from bs4 import NavigableString, Tag
from bs4.element import PreformattedString

from pagecraft.editor.document import (
    EditorDocument,
    css_property_name,
    parse_inline_style,
    remove_inline_style,
    set_inline_style,
)
from pagecraft.editor.events import EditorEvent, EventType, Listener
from pagecraft.editor.selection import resolve_selection
from pagecraft.editor.styles import StyleOverrideEngine

logger = structlog.get_logger()

HOVER_OVERLAY = {
    "background-color": "rgba(59, 130, 246, 0.1)",
    "outline": "1px dashed rgba(59, 130, 246, 0.5)",
    "transition": "background-color 0.2s, outline 0.2s",
}

SELECTED_OVERLAY = {
    "background-color": "rgba(59, 130, 246, 0.2)",
    "outline": "2px solid #3b82f6",
    "outline-offset": "2px",
}

OVERLAY_PROPERTIES = frozenset(HOVER_OVERLAY) | frozenset(SELECTED_OVERLAY)

# Inline properties the editor writes as chrome
CHROME_PROPERTIES = OVERLAY_PROPERTIES | {"cursor"}

SKIPPED_TAGS = frozenset({"script", "style"})


class Overlay(str, Enum):
    NONE = "none"
    HOVER = "hover"
    SELECTED = "selected"


@dataclass
class ElementRecord:
    """What the editor has done to one element.

    ``authored`` holds the page's own inline values for the chrome
    properties, captured at wiring time, as ``(value, important)``.
    """

    element: Tag
    listeners: list[tuple[EventType, Listener]] = field(default_factory=list)
    overlay: Overlay = Overlay.NONE
    authored: dict[str, tuple[str, bool]] = field(default_factory=dict)
    user_styles: dict[str, str] = field(default_factory=dict)

    def chrome_properties(self) -> frozenset[str]:
        """Inline properties currently holding editor chrome, not content."""
        chrome = {"cursor"}
        if self.overlay is not Overlay.NONE:
            chrome |= OVERLAY_PROPERTIES
        return frozenset(chrome - self.user_styles.keys())

    def content_value(self, name: str) -> tuple[str, bool] | None:
        """What a chrome property holds once chrome is removed (None means absent)."""
        if name in self.user_styles:
            return self.user_styles[name], True
        return self.authored.get(name)


def restore_property(element: Tag, record: ElementRecord, name: str) -> None:
    """Put a chrome property back to its content value, or remove it."""
    content = record.content_value(name)
    if content is None:
        remove_inline_style(element, name)
    else:
        set_inline_style(element, name, content[0], important=content[1])


def to_plain_text(element: Tag) -> str:
    """Editable text of an element: <br> becomes a newline, other markup is dropped."""
    parts = []
    for node in element.descendants:
        if isinstance(node, Tag):
            if node.name == "br":
                parts.append("\n")
        elif isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
            parts.append(str(node))
    return "".join(parts)


def from_plain_text(document: EditorDocument, element: Tag, text: str) -> None:
    """Replace an element's children with ``text``, newlines as <br>."""
    element.clear()
    for index, line in enumerate(text.split("\n")):
        if index:
            element.append(document.new_tag("br"))
        if line:
            element.append(NavigableString(line))


class InteractionHandle:
    """Live wiring of one document. ``dispose()`` undoes all of it."""

    def __init__(
        self,
        document: EditorDocument,
        engine: StyleOverrideEngine,
        on_select: Callable[[Tag], None] | None = None,
    ):
        self.document = document
        self.engine = engine
        self._on_select = on_select
        self._records: dict[int, ElementRecord] = {}
        self._selected: Tag | None = None
        self._disposed = False

    @property
    def selected(self) -> Tag | None:
        return self._selected

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def records(self) -> list[ElementRecord]:
        return list(self._records.values())

    def record_for(self, element: Tag | None) -> ElementRecord | None:
        if element is None:
            return None
        return self._records.get(id(element))

    # -------------------------------------------------------------------------
    # Wiring
    # -------------------------------------------------------------------------

    def _wire(self) -> None:
        for element in self.document.elements():
            if element.name in SKIPPED_TAGS:
                continue
            inline = parse_inline_style(element.get("style"))
            record = ElementRecord(
                element=element,
                authored={name: inline[name] for name in CHROME_PROPERTIES if name in inline},
            )
            for event_type, listener in (
                (EventType.CLICK, self._on_click),
                (EventType.POINTER_ENTER, self._on_pointer_enter),
                (EventType.POINTER_LEAVE, self._on_pointer_leave),
                (EventType.DRAG_START, self._on_drag_start),
            ):
                self.document.add_listener(element, event_type, listener)
                record.listeners.append((event_type, listener))
            set_inline_style(element, "cursor", "pointer")
            self._records[id(element)] = record

    def _unwire(self, record: ElementRecord) -> None:
        for event_type, listener in record.listeners:
            self.document.remove_listener(record.element, event_type, listener)
        record.listeners.clear()
        self._clear_overlay(record)
        restore_property(record.element, record, "cursor")
        self.engine.release(record.element)

    def dispose(self) -> None:
        """Detach listeners, clear overlays, drop injected rules and the selection.

        Safe to call more than once.
        """
        if self._disposed:
            return
        for record in self._records.values():
            self._unwire(record)
        wired = len(self._records)
        self._records.clear()
        self.engine.clear()
        self._selected = None
        self._disposed = True
        logger.debug("Document interaction disposed", elements=wired)

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def _on_pointer_enter(self, event: EditorEvent) -> None:
        record = self.record_for(event.current_target)
        if record is None or record.element is self._selected:
            return
        self._apply_overlay(record, Overlay.HOVER)

    def _on_pointer_leave(self, event: EditorEvent) -> None:
        record = self.record_for(event.current_target)
        if record is None or record.element is self._selected:
            return
        self._clear_overlay(record)

    def _on_click(self, event: EditorEvent) -> None:
        event.prevent_default()
        event.stop_propagation()
        target = event.target if self.record_for(event.target) else event.current_target
        resolution = resolve_selection(target)
        logger.debug("Click resolved", tag=resolution.element.name, rule=resolution.rule.value)
        self.select(resolution.element)

    def _on_drag_start(self, event: EditorEvent) -> None:
        event.prevent_default()

    # -------------------------------------------------------------------------
    # Overlays and selection
    # -------------------------------------------------------------------------

    def _apply_overlay(self, record: ElementRecord, overlay: Overlay) -> None:
        declarations = SELECTED_OVERLAY if overlay is Overlay.SELECTED else HOVER_OVERLAY
        for name, value in declarations.items():
            set_inline_style(record.element, name, value)
        record.overlay = overlay

    def _clear_overlay(self, record: ElementRecord) -> None:
        if record.overlay is Overlay.NONE:
            return
        for name in OVERLAY_PROPERTIES:
            restore_property(record.element, record, name)
        record.overlay = Overlay.NONE

    def select(self, element: Tag) -> bool:
        """Make ``element`` the selection. Returns False for unwired elements."""
        record = self.record_for(element)
        if record is None or self._disposed:
            return False

        previous = self.record_for(self._selected)
        if previous is not None and previous is not record:
            self._clear_overlay(previous)

        self._clear_overlay(record)
        self._apply_overlay(record, Overlay.SELECTED)
        self._selected = element

        if self._on_select is not None:
            self._on_select(element)
        return True

    def deselect(self) -> None:
        record = self.record_for(self._selected)
        if record is not None:
            self._clear_overlay(record)
        self._selected = None

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def apply_style(self, element: Tag, prop: str, value: str) -> None:
        """Apply an editor style through the override engine and record it."""
        name = css_property_name(prop)
        rule = self.engine.apply(element, name, value)
        record = self.record_for(element)
        if record is None or rule is not None:
            return
        if value:
            record.user_styles[name] = value
        else:
            record.user_styles.pop(name, None)

    def replace_text(self, element: Tag, text: str) -> None:
        """Commit edited plain text; nested elements are unwired and dropped."""
        for descendant in element.find_all(True):
            record = self._records.pop(id(descendant), None)
            if record is not None:
                self._unwire(record)
        from_plain_text(self.document, element, text)

    def style_value(self, element: Tag, prop: str) -> str:
        """Content value of a style property, ignoring overlay chrome."""
        name = css_property_name(prop)
        record = self.record_for(element)
        if record is None:
            return self.engine.computed_value(element, name)
        if name in record.user_styles:
            return record.user_styles[name]
        if name in record.chrome_properties() and name in record.authored:
            return record.authored[name][0]
        return self.engine.computed_value(element, name, skip_inline=record.chrome_properties())

    def scrub(self, live: Tag, copied: Tag) -> None:
        """Strip editor chrome from ``copied`` and bake injected rules inline."""
        record = self.record_for(live)
        if record is None:
            return

        touched = {"cursor"}
        if record.overlay is not Overlay.NONE:
            touched |= OVERLAY_PROPERTIES
        for name in touched:
            restore_property(copied, record, name)

        rule = self.engine.rule_for(live)
        if rule is not None:
            attribute = self.engine.settings.editor_id_attribute
            if copied.has_attr(attribute):
                del copied[attribute]
            for name, value in rule.declarations.items():
                set_inline_style(copied, name, value, important=True)


def wire_document(
    document: EditorDocument,
    engine: StyleOverrideEngine,
    on_select: Callable[[Tag], None] | None = None,
) -> InteractionHandle:
    """Wire a mounted document and return the handle that unwires it."""
    handle = InteractionHandle(document, engine, on_select)
    handle._wire()
    logger.debug("Document wired", elements=len(handle.records))
    return handle

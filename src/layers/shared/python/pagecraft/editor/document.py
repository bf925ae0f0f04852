"""The live document an editing session operates on.

The host's markup is parsed with BeautifulSoup and mounted as the children of
a container element. Injected override rules live in a separate ``head`` node
so they can never leak into the serialized content. Listeners are tracked per
element (by identity, since bs4 tags compare structurally) and events are
dispatched with DOM-like bubbling.
"""

import copy
import re
from typing import Callable, Iterator

from bs4 import BeautifulSoup, Tag

from pagecraft.editor.events import EditorEvent, EventType, Listener

CONTAINER_CLASS = "pagecraft-editor-content"

_IMPORTANT = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)
_CAMEL_HUMP = re.compile(r"([A-Z])")


def css_property_name(name: str) -> str:
    """Normalize ``fontSize`` / ``font-size`` to the CSS property name."""
    return _CAMEL_HUMP.sub(r"-\1", name.strip()).lower()


def parse_inline_style(style: str | None) -> dict[str, tuple[str, bool]]:
    """Parse a ``style`` attribute into ``{property: (value, important)}``."""
    declarations: dict[str, tuple[str, bool]] = {}
    for chunk in (style or "").split(";"):
        name, sep, value = chunk.partition(":")
        if not sep:
            continue
        name = name.strip().lower()
        value = value.strip()
        if not name or not value:
            continue
        important = bool(_IMPORTANT.search(value))
        if important:
            value = _IMPORTANT.sub("", value)
        declarations[name] = (value, important)
    return declarations


def format_inline_style(declarations: dict[str, tuple[str, bool]]) -> str:
    return " ".join(
        f"{name}: {value}{' !important' if important else ''};"
        for name, (value, important) in declarations.items()
    )


def _write_inline_style(element: Tag, declarations: dict[str, tuple[str, bool]]) -> None:
    if declarations:
        element["style"] = format_inline_style(declarations)
    elif element.has_attr("style"):
        del element["style"]


def get_inline_style(element: Tag, prop: str) -> str:
    """Value of an inline declaration, or "" when absent."""
    declaration = parse_inline_style(element.get("style")).get(css_property_name(prop))
    return declaration[0] if declaration else ""


def is_inline_important(element: Tag, prop: str) -> bool:
    declaration = parse_inline_style(element.get("style")).get(css_property_name(prop))
    return bool(declaration and declaration[1])


def set_inline_style(element: Tag, prop: str, value: str, important: bool = False) -> None:
    """Set (or with an empty value, remove) one inline declaration."""
    declarations = parse_inline_style(element.get("style"))
    name = css_property_name(prop)
    if value:
        declarations[name] = (value, important)
    else:
        declarations.pop(name, None)
    _write_inline_style(element, declarations)


def remove_inline_style(element: Tag, prop: str) -> None:
    """Drop an inline declaration; the attribute goes once it is empty."""
    declarations = parse_inline_style(element.get("style"))
    if declarations.pop(css_property_name(prop), None) is not None:
        _write_inline_style(element, declarations)


class EditorDocument:
    """Mounted markup plus the listener registry and event dispatch."""

    def __init__(self):
        self._soup = BeautifulSoup("", "html.parser")
        self.head = self._soup.new_tag("head")
        self.container = self._soup.new_tag("div", attrs={"class": CONTAINER_CLASS})
        self._soup.append(self.head)
        self._soup.append(self.container)
        self._listeners: dict[int, tuple[Tag, dict[EventType, list[Listener]]]] = {}

    # -------------------------------------------------------------------------
    # Content
    # -------------------------------------------------------------------------

    def mount(self, html: str) -> None:
        """Replace the container's children with freshly parsed markup."""
        self.container.clear()
        fragment = BeautifulSoup(html, "html.parser")
        for node in list(fragment.contents):
            self.container.append(node.extract())

    def unmount(self) -> None:
        self.container.clear()

    def elements(self) -> list[Tag]:
        """Every element inside the container, in document order."""
        return self.container.find_all(True)

    def contains(self, element: Tag) -> bool:
        return any(parent is self.container for parent in element.parents)

    def select_one(self, selector: str) -> Tag | None:
        """First mounted element matching a CSS selector."""
        return self.container.select_one(selector)

    def new_tag(self, name: str, **attrs: str) -> Tag:
        return self._soup.new_tag(name, attrs=attrs)

    def serialize(self, scrub: Callable[[Tag, Tag], None] | None = None) -> str:
        """Inner markup of the container.

        With ``scrub``, a copy is serialized instead and the callback receives
        each ``(live, copied)`` element pair first, so transient editor state
        can be removed without touching the live tree.
        """
        if scrub is None:
            return self.container.decode_contents()

        clone = copy.copy(self.container)
        for live, copied in zip(self.container.find_all(True), clone.find_all(True)):
            scrub(live, copied)
        return clone.decode_contents()

    # -------------------------------------------------------------------------
    # Head (injected rules)
    # -------------------------------------------------------------------------

    def head_node(self, node_id: str) -> Tag | None:
        return self.head.find(attrs={"id": node_id})

    def head_nodes(self) -> list[Tag]:
        return self.head.find_all(True, recursive=False)

    def insert_head_node(self, node: Tag) -> None:
        self.head.append(node)

    # -------------------------------------------------------------------------
    # Listeners and dispatch
    # -------------------------------------------------------------------------

    def add_listener(self, element: Tag, event_type: EventType, listener: Listener) -> None:
        _, by_type = self._listeners.setdefault(id(element), (element, {}))
        by_type.setdefault(event_type, []).append(listener)

    def remove_listener(self, element: Tag, event_type: EventType, listener: Listener) -> bool:
        """Detach one listener. Returns False when it was not attached."""
        entry = self._listeners.get(id(element))
        if entry is None:
            return False
        by_type = entry[1]
        listeners = by_type.get(event_type, [])
        for index, existing in enumerate(listeners):
            if existing == listener:
                del listeners[index]
                break
        else:
            return False

        if not listeners:
            del by_type[event_type]
        if not by_type:
            del self._listeners[id(element)]
        return True

    def listener_count(self, element: Tag | None = None) -> int:
        """Attached listeners, for one element or the whole document."""
        if element is not None:
            entry = self._listeners.get(id(element))
            return sum(len(items) for items in entry[1].values()) if entry else 0
        return sum(
            len(items) for _, by_type in self._listeners.values() for items in by_type.values()
        )

    def _propagation_path(self, event: EditorEvent) -> Iterator[Tag]:
        yield event.target
        if not event.type.bubbles:
            return
        for parent in event.target.parents:
            if parent is self.container:
                return
            yield parent

    def dispatch(self, event: EditorEvent) -> EditorEvent:
        """Run listeners on the target, then on ancestors for bubbling events."""
        for node in self._propagation_path(event):
            entry = self._listeners.get(id(node))
            if entry is None:
                continue
            event.current_target = node
            for listener in list(entry[1].get(event.type, [])):
                listener(event)
            if event.propagation_stopped:
                break
        event.current_target = None
        return event

    def fire(self, event_type: EventType, target: Tag) -> EditorEvent:
        """Dispatch a fresh event of ``event_type`` at ``target``."""
        return self.dispatch(EditorEvent(type=event_type, target=target))

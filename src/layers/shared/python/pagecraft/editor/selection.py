"""Resolve a raw click target to the element the user meant to edit."""

from enum import Enum
from typing import NamedTuple

from bs4 import NavigableString, Tag
from bs4.element import Comment

TEXT_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6", "p", "span", "a", "button", "li"})

BLOCK_CONTAINER_TAGS = frozenset({"div"})


class SelectionRule(str, Enum):
    """Which heuristic produced a resolution."""

    TEXT_TARGET = "text_target"
    DIRECT_TEXT = "direct_text"
    TEXT_DESCENDANT = "text_descendant"
    FALLBACK = "fallback"


class Resolution(NamedTuple):
    element: Tag
    rule: SelectionRule


def has_text(element: Tag) -> bool:
    return bool(element.get_text().strip())


def has_direct_text(element: Tag) -> bool:
    """True when a text node that is a direct child carries non-whitespace."""
    return any(
        isinstance(child, NavigableString)
        and not isinstance(child, Comment)
        and child.strip()
        for child in element.children
    )


def resolve_selection(target: Tag) -> Resolution:
    """Pick the best editable element for a click on ``target``.

    A text-bearing textual tag is taken as-is. A block container with its own
    text wins over its children, so loose text next to a span selects the
    container. Otherwise the first textual descendant with text is chosen,
    and failing that the target itself.
    """
    if target.name in TEXT_TAGS and has_text(target):
        return Resolution(target, SelectionRule.TEXT_TARGET)

    if target.name in BLOCK_CONTAINER_TAGS and has_direct_text(target):
        return Resolution(target, SelectionRule.DIRECT_TEXT)

    for descendant in target.find_all(sorted(TEXT_TAGS)):
        if has_text(descendant):
            return Resolution(descendant, SelectionRule.TEXT_DESCENDANT)

    return Resolution(target, SelectionRule.FALLBACK)

"""Style overrides that win against utility-class styling.

Most properties are applied as ``!important`` inline declarations. Font size
is different: Tailwind-style pages put the size on classes at every
breakpoint, so the size classes are stripped and a scoped rule keyed by a
``data-editor-id`` attribute is injected into the document head, repeated at
three selector specificities. There is exactly one rule node per element; a
new value replaces the old node.

The module also resolves "computed" values for the edit panel. There is no
layout engine, so the cascade is approximated from injected rules, inline
styles, known utility classes, tag defaults and inheritance.
"""

from dataclasses import dataclass, field

import structlog
from bs4 import Tag

from pagecraft.editor.config import EditorSettings
from pagecraft.editor.document import (
    EditorDocument,
    css_property_name,
    get_inline_style,
    is_inline_important,
    set_inline_style,
)
from pagecraft.models.base import generate_ulid

logger = structlog.get_logger()

_SIZE_SCALE = ("xs", "sm", "base", "lg", "xl", "2xl", "3xl", "4xl", "5xl", "6xl", "7xl", "8xl", "9xl")
_BREAKPOINTS = ("sm", "md", "lg", "xl", "2xl")

FONT_SIZE_UTILITY_CLASSES = frozenset(
    [f"text-{size}" for size in _SIZE_SCALE]
    + [f"{bp}:text-{size}" for bp in _BREAKPOINTS for size in _SIZE_SCALE]
)

# Properties that need the injected-rule treatment
SCOPED_PROPERTIES = frozenset({"font-size"})

INHERITED_PROPERTIES = frozenset({"color", "font-size", "font-weight", "font-style"})

INITIAL_VALUES = {
    "color": "rgb(0, 0, 0)",
    "background-color": "rgba(0, 0, 0, 0)",
    "font-size": "16px",
    "font-weight": "400",
    "font-style": "normal",
    "text-decoration": "none",
}

UTILITY_CLASS_VALUES: dict[str, dict[str, str]] = {
    "font-size": {
        "text-xs": "12px",
        "text-sm": "14px",
        "text-base": "16px",
        "text-lg": "18px",
        "text-xl": "20px",
        "text-2xl": "24px",
        "text-3xl": "30px",
        "text-4xl": "36px",
        "text-5xl": "48px",
        "text-6xl": "60px",
        "text-7xl": "72px",
        "text-8xl": "96px",
        "text-9xl": "128px",
    },
    "font-weight": {
        "font-thin": "100",
        "font-extralight": "200",
        "font-light": "300",
        "font-normal": "400",
        "font-medium": "500",
        "font-semibold": "600",
        "font-bold": "700",
        "font-extrabold": "800",
        "font-black": "900",
    },
    "font-style": {"italic": "italic", "not-italic": "normal"},
    "text-decoration": {
        "underline": "underline",
        "line-through": "line-through",
        "no-underline": "none",
    },
}

TAG_DEFAULTS: dict[str, dict[str, str]] = {
    "h1": {"font-size": "32px", "font-weight": "700"},
    "h2": {"font-size": "24px", "font-weight": "700"},
    "h3": {"font-size": "18.72px", "font-weight": "700"},
    "h4": {"font-size": "16px", "font-weight": "700"},
    "h5": {"font-size": "13.28px", "font-weight": "700"},
    "h6": {"font-size": "10.72px", "font-weight": "700"},
    "b": {"font-weight": "700"},
    "strong": {"font-weight": "700"},
    "th": {"font-weight": "700"},
    "em": {"font-style": "italic"},
    "i": {"font-style": "italic"},
    "u": {"text-decoration": "underline"},
    "a": {"text-decoration": "underline", "color": "rgb(0, 0, 238)"},
    "small": {"font-size": "13.33px"},
}


def _class_list(element: Tag) -> list[str]:
    classes = element.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return list(classes)


@dataclass
class InjectedRule:
    """One scoped <style> node and the element it targets."""

    editor_id: str
    rule_id: str
    element: Tag
    node: Tag | None = None
    declarations: dict[str, str] = field(default_factory=dict)


class StyleOverrideEngine:
    """Applies editor styles to elements of one document."""

    def __init__(self, document: EditorDocument, settings: EditorSettings | None = None):
        self.document = document
        self.settings = settings or EditorSettings()
        self._rules: dict[str, InjectedRule] = {}

    @property
    def rules(self) -> list[InjectedRule]:
        return list(self._rules.values())

    def rule_for(self, element: Tag) -> InjectedRule | None:
        editor_id = element.get(self.settings.editor_id_attribute)
        rule = self._rules.get(editor_id) if editor_id else None
        if rule is not None and rule.element is element:
            return rule
        return None

    def new_editor_id(self) -> str:
        return f"{self.settings.element_id_prefix}{generate_ulid().lower()}"

    def apply(self, element: Tag, prop: str, value: str) -> InjectedRule | None:
        """Make ``prop: value`` take effect on ``element``.

        Returns the injected rule when the scoped path was used, else None.
        """
        name = css_property_name(prop)
        if name not in SCOPED_PROPERTIES:
            set_inline_style(element, name, value, important=True)
            return None
        return self._apply_scoped(element, name, value)

    def _apply_scoped(self, element: Tag, name: str, value: str) -> InjectedRule:
        classes = _class_list(element)
        kept = [cls for cls in classes if cls not in FONT_SIZE_UTILITY_CLASSES]
        if len(kept) != len(classes):
            if kept:
                element["class"] = kept
            else:
                del element["class"]

        rule = self.rule_for(element)
        if rule is None:
            editor_id = self.new_editor_id()
            element[self.settings.editor_id_attribute] = editor_id
            rule = InjectedRule(
                editor_id=editor_id,
                rule_id=self.settings.rule_id_for(editor_id),
                element=element,
            )
            self._rules[editor_id] = rule

        rule.declarations[name] = value
        self._replace_node(rule)
        logger.debug("Injected scoped style", editor_id=rule.editor_id, property=name, value=value)
        return rule

    def render_rule(self, rule: InjectedRule) -> str:
        """CSS for a rule, repeated at three ascending specificities."""
        body = " ".join(f"{name}: {value} !important;" for name, value in rule.declarations.items())
        selector = f'[{self.settings.editor_id_attribute}="{rule.editor_id}"]'
        return "\n".join(
            f"{scope}{selector} {{ {body} }}" for scope in ("", "html ", "html body ")
        )

    def _replace_node(self, rule: InjectedRule) -> None:
        existing = self.document.head_node(rule.rule_id)
        if existing is not None:
            existing.decompose()
        node = self.document.new_tag("style", id=rule.rule_id)
        node.string = self.render_rule(rule)
        self.document.insert_head_node(node)
        rule.node = node

    def release(self, element: Tag) -> None:
        """Remove the element's injected rule and its identifier attribute."""
        rule = self.rule_for(element)
        if rule is not None:
            self._drop(rule)

    def _drop(self, rule: InjectedRule) -> None:
        node = self.document.head_node(rule.rule_id)
        if node is not None:
            node.decompose()
        if rule.element.get(self.settings.editor_id_attribute) == rule.editor_id:
            del rule.element[self.settings.editor_id_attribute]
        self._rules.pop(rule.editor_id, None)

    def clear(self) -> None:
        """Remove every injected rule and every assigned identifier."""
        for rule in list(self._rules.values()):
            self._drop(rule)

    # -------------------------------------------------------------------------
    # Computed values
    # -------------------------------------------------------------------------

    def computed_value(self, element: Tag, prop: str, skip_inline: frozenset[str] = frozenset()) -> str:
        """Approximate the computed value of ``prop`` on ``element``.

        ``skip_inline`` names properties whose inline value on ``element``
        itself is editor chrome (an overlay) and must be ignored.
        """
        name = css_property_name(prop)
        node: Tag | None = element
        first = True
        while node is not None and node is not self.document.container:
            value = self._declared_value(node, name, skip_inline if first else frozenset())
            if value:
                return value
            if name not in INHERITED_PROPERTIES:
                break
            node = node.parent
            first = False
        return INITIAL_VALUES.get(name, "")

    def _declared_value(self, element: Tag, name: str, skip_inline: frozenset[str]) -> str:
        inline = "" if name in skip_inline else get_inline_style(element, name)
        if inline and is_inline_important(element, name):
            return inline

        rule = self.rule_for(element)
        if rule is not None and name in rule.declarations:
            return rule.declarations[name]

        if inline:
            return inline

        by_class = UTILITY_CLASS_VALUES.get(name, {})
        for cls in reversed(_class_list(element)):
            if cls in by_class:
                return by_class[cls]

        return TAG_DEFAULTS.get(element.name, {}).get(name, "")

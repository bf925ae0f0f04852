"""Editing session: the editor's state machine.

States::

    EMPTY --load--> LOADED --select--> SELECTED --deselect--> LOADED
      ^                |                   |
      +----unmount-----+-------unmount-----+

``load`` while already loaded tears the previous document down first. Text
and style edits are only meaningful in SELECTED; elsewhere they are no-ops
that return False. Every edit marks the session dirty and, when autosave is
enabled and a persistence id is bound, restarts the debounce timer. Save
serializes the whole document (never a diff), hands it to the persistence
collaborator and the host, and clears the dirty flag only when nothing was
edited in the meantime and persistence did not fail.
"""

import asyncio
import inspect
import re
from enum import Enum
from functools import partial
from typing import Awaitable, Callable

import structlog
from bs4 import Tag
from pydantic import BaseModel as PydanticBaseModel

from pagecraft.editor.autosave import AsyncioScheduler, Debouncer, Scheduler
from pagecraft.editor.config import EditorSettings
from pagecraft.editor.document import EditorDocument, css_property_name
from pagecraft.editor.events import EditorEvent, EventType
from pagecraft.editor.interaction import InteractionHandle, to_plain_text, wire_document
from pagecraft.editor.styles import StyleOverrideEngine
from pagecraft.utils.exceptions import ValidationError

logger = structlog.get_logger()

PersistFn = Callable[[str, str], bool | Awaitable[bool]]

_RGB = re.compile(r"rgba?\((\d+),\s*(\d+),\s*(\d+)")
_BARE_NUMBER = re.compile(r"^\d+(\.\d+)?$")


class EditorState(str, Enum):
    """Session states."""

    EMPTY = "empty"
    LOADED = "loaded"
    SELECTED = "selected"


class StylePanel(PydanticBaseModel):
    """What the edit panel shows for the selected element."""

    tag_name: str
    text: str
    color: str
    background_color: str
    font_size: str
    font_weight: str
    font_style: str
    text_decoration: str

    @property
    def color_hex(self) -> str:
        return rgb_to_hex(self.color)

    @property
    def background_hex(self) -> str:
        return rgb_to_hex(self.background_color)


PANEL_PROPERTIES = {
    "color": "color",
    "background_color": "background-color",
    "font_size": "font-size",
    "font_weight": "font-weight",
    "font_style": "font-style",
    "text_decoration": "text-decoration",
}


def is_bold(weight: str) -> bool:
    """Bold means ``bold``/``bolder`` or a numeric weight of 600 and up."""
    weight = weight.strip().lower()
    if weight in ("bold", "bolder"):
        return True
    try:
        return int(float(weight)) >= 600
    except ValueError:
        return False


def rgb_to_hex(value: str) -> str:
    """Convert a CSS colour to ``#rrggbb`` for colour pickers.

    Empty and fully transparent values map to white; values that are neither
    hex nor rgb()/rgba() map to black.
    """
    value = (value or "").strip()
    if not value or value == "transparent" or value == "rgba(0, 0, 0, 0)":
        return "#ffffff"
    if value.startswith("#"):
        return value
    match = _RGB.match(value)
    if not match:
        return "#000000"
    r, g, b = (min(int(part), 255) for part in match.groups())
    return f"#{r:02x}{g:02x}{b:02x}"


def normalize_font_size(value: str) -> str:
    """Give a bare number a px unit; anything with a unit passes through."""
    value = value.strip()
    if _BARE_NUMBER.match(value):
        return f"{value}px"
    return value


class EditingSession:
    """One editor attached to one document at a time."""

    def __init__(
        self,
        on_save: Callable[[str], None] | None = None,
        *,
        autosave_enabled: bool = False,
        persistence_id: str | None = None,
        persist: PersistFn | None = None,
        on_unmount: Callable[[], None] | None = None,
        settings: EditorSettings | None = None,
        scheduler: Scheduler | None = None,
    ):
        """Initialize the session.

        Args:
            on_save: Host callback receiving the serialized markup on every save.
            autosave_enabled: Whether edits trigger debounced persistence.
            persistence_id: Identifier handed to ``persist`` (e.g. a component ID).
            persist: ``persist(id, html)`` returning success; may be a coroutine function.
            on_unmount: Host callback invoked after teardown on unmount.
            settings: Editor settings; defaults are used when omitted.
            scheduler: Timer/background scheduler. Defaults to the asyncio loop
                running at construction time.

        Raises:
            ValidationError: Autosave is configured but there is neither a
                scheduler nor a running event loop to debounce on.
        """
        self.settings = settings or EditorSettings()
        self.autosave_enabled = autosave_enabled
        self.persistence_id = persistence_id
        self._persist_fn = persist
        self._on_save = on_save
        self._on_unmount = on_unmount

        self.document = EditorDocument()
        self.engine = StyleOverrideEngine(self.document, self.settings)
        self._scheduler = scheduler or self._default_scheduler()
        self._autosave = Debouncer(
            self.settings.autosave_delay_seconds, self._on_autosave_elapsed, self._scheduler
        )

        self._state = EditorState.EMPTY
        self._handle: InteractionHandle | None = None
        self._panel: StylePanel | None = None
        self._dirty = False
        self._revision = 0
        self._inflight: asyncio.Future | None = None

    def _default_scheduler(self) -> Scheduler:
        try:
            return AsyncioScheduler(asyncio.get_running_loop())
        except RuntimeError:
            if self.persistence_enabled:
                raise ValidationError(
                    "Autosave needs a scheduler or a running event loop",
                    errors=[{"field": "scheduler", "message": "no running event loop"}],
                ) from None
            return AsyncioScheduler()

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def panel(self) -> StylePanel | None:
        return self._panel

    @property
    def handle(self) -> InteractionHandle | None:
        return self._handle

    @property
    def selected(self) -> Tag | None:
        return self._handle.selected if self._handle is not None else None

    @property
    def autosave_pending(self) -> bool:
        return self._autosave.pending

    @property
    def persistence_enabled(self) -> bool:
        return (
            self.autosave_enabled
            and self.persistence_id is not None
            and self._persist_fn is not None
        )

    # -------------------------------------------------------------------------
    # Load / unmount
    # -------------------------------------------------------------------------

    def load(self, html: str) -> InteractionHandle:
        """Mount new content, tearing down any previous document first.

        Raises:
            ValidationError: If ``html`` is not a string. The session is left untouched.
        """
        if not isinstance(html, str):
            raise ValidationError(
                "Editor content must be a string",
                errors=[{"field": "html", "message": f"expected str, got {type(html).__name__}"}],
            )

        if self._state is not EditorState.EMPTY:
            self._teardown()

        self.document.mount(html)
        self._handle = wire_document(self.document, self.engine, on_select=self._on_selected)
        self._state = EditorState.LOADED
        self._dirty = False

        logger.info(
            "Editor content loaded",
            content_length=len(html),
            elements=len(self._handle.records),
            persistence_id=self.persistence_id,
        )
        return self._handle

    def unmount(self) -> None:
        """Tear everything down and return to EMPTY. Safe to call repeatedly."""
        was_loaded = self._state is not EditorState.EMPTY
        self._teardown()
        self.document.unmount()
        self._state = EditorState.EMPTY

        if was_loaded:
            logger.info("Editor unmounted", persistence_id=self.persistence_id, dirty=self._dirty)
            if self._on_unmount is not None:
                try:
                    self._on_unmount()
                except Exception:
                    logger.exception("Host unmount callback failed")

    def _teardown(self) -> None:
        self._autosave.cancel()
        if self._handle is not None:
            self._handle.dispose()
            self._handle = None
        self._panel = None

    # -------------------------------------------------------------------------
    # Pointer input
    # -------------------------------------------------------------------------

    def click(self, target: Tag) -> EditorEvent | None:
        """Dispatch a click at ``target`` as the pointer would."""
        if self._state is EditorState.EMPTY:
            return None
        return self.document.fire(EventType.CLICK, target)

    def pointer_enter(self, target: Tag) -> EditorEvent | None:
        if self._state is EditorState.EMPTY:
            return None
        return self.document.fire(EventType.POINTER_ENTER, target)

    def pointer_leave(self, target: Tag) -> EditorEvent | None:
        if self._state is EditorState.EMPTY:
            return None
        return self.document.fire(EventType.POINTER_LEAVE, target)

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def select(self, element: Tag) -> bool:
        """Select ``element`` directly, without click resolution."""
        if self._handle is None:
            return False
        return self._handle.select(element)

    def _on_selected(self, element: Tag) -> None:
        self._state = EditorState.SELECTED
        self._refresh_panel()
        logger.debug("Element selected", tag=element.name)

    def deselect(self) -> bool:
        """Return to LOADED. A pending autosave is left to fire."""
        if self._state is not EditorState.SELECTED:
            return False
        self._handle.deselect()
        self._state = EditorState.LOADED
        self._panel = None
        return True

    def _require_selection(self, operation: str) -> Tag | None:
        element = self.selected
        if self._state is not EditorState.SELECTED or element is None:
            logger.debug("Ignoring edit without a selection", operation=operation)
            return None
        return element

    def _refresh_panel(self) -> None:
        element = self.selected
        if element is None:
            self._panel = None
            return
        self._panel = StylePanel(
            tag_name=element.name,
            text=to_plain_text(element),
            **{
                field: self._handle.style_value(element, prop)
                for field, prop in PANEL_PROPERTIES.items()
            },
        )

    # -------------------------------------------------------------------------
    # Edits
    # -------------------------------------------------------------------------

    def edit_text(self, text: str) -> bool:
        """Replace the selected element's content with plain text."""
        element = self._require_selection("edit_text")
        if element is None:
            return False
        if not isinstance(text, str):
            raise ValidationError(
                "Text must be a string",
                errors=[{"field": "text", "message": f"expected str, got {type(text).__name__}"}],
            )
        self._handle.replace_text(element, text)
        self._touch()
        return True

    def apply_style(self, prop: str, value: str) -> bool:
        """Apply a style property to the selected element."""
        element = self._require_selection("apply_style")
        if element is None:
            return False
        name = css_property_name(prop)
        if name == "font-size":
            value = normalize_font_size(value)
        self._handle.apply_style(element, name, value)
        self._touch()
        return True

    def toggle_bold(self) -> bool:
        if self._require_selection("toggle_bold") is None:
            return False
        weight = self.style_value("font-weight")
        return self.apply_style("font-weight", "normal" if is_bold(weight) else "bold")

    def toggle_italic(self) -> bool:
        if self._require_selection("toggle_italic") is None:
            return False
        current = self.style_value("font-style")
        return self.apply_style("font-style", "normal" if current == "italic" else "italic")

    def toggle_underline(self) -> bool:
        if self._require_selection("toggle_underline") is None:
            return False
        current = self.style_value("text-decoration")
        return self.apply_style("text-decoration", "none" if "underline" in current else "underline")

    def style_value(self, prop: str) -> str:
        """Current value of a style property on the selection ("" without one)."""
        element = self.selected
        if element is None or self._handle is None:
            return ""
        return self._handle.style_value(element, prop)

    def is_style_active(self, prop: str, value: str) -> bool:
        """Whether the selection currently shows ``prop: value``."""
        if self.selected is None:
            return False
        name = css_property_name(prop)
        current = self.style_value(name)
        if name == "font-weight":
            bold = is_bold(current)
            return bold if value == "bold" else not bold
        if name == "text-decoration":
            return value in current
        return current == value

    def _touch(self) -> None:
        self._dirty = True
        self._revision += 1
        self._refresh_panel()
        if self.persistence_enabled:
            try:
                self._autosave.schedule()
            except RuntimeError:
                logger.warning("Autosave skipped, no event loop", persistence_id=self.persistence_id)

    def discard_changes(self) -> None:
        """Forget the dirty state without saving. Edits stay in the document."""
        self._autosave.cancel()
        self._dirty = False

    # -------------------------------------------------------------------------
    # Save
    # -------------------------------------------------------------------------

    def snapshot(self) -> str:
        """Serialized markup without editor chrome, injected rules baked inline."""
        if self._handle is None:
            return self.document.serialize()
        return self.document.serialize(scrub=self._handle.scrub)

    def save(self) -> str | None:
        """Persist (if configured) and notify the host with the full markup.

        Returns the serialized markup, or None when nothing is loaded.
        """
        if self._state is EditorState.EMPTY:
            logger.debug("Save ignored, nothing loaded")
            return None

        self._autosave.cancel()
        html = self.snapshot()
        revision = self._revision

        outcome: bool | asyncio.Future = True
        if self.persistence_enabled:
            outcome = self._persist(html)

        notified = self._notify_host(html)

        if isinstance(outcome, asyncio.Future):
            outcome.add_done_callback(partial(self._on_persist_done, revision, notified))
        elif outcome and notified:
            self._mark_clean(revision)
        return html

    def _persist(self, html: str) -> bool | asyncio.Future:
        persistence_id = self.persistence_id
        persist = self._persist_fn

        if inspect.iscoroutinefunction(persist):
            previous = self._inflight

            async def run() -> bool:
                # Saves reach the store in the order they were made
                if previous is not None and not previous.done():
                    await asyncio.wait([previous])
                return await persist(persistence_id, html)

            future = self._scheduler.dispatch(run())
            self._inflight = future
            return future

        try:
            ok = bool(persist(persistence_id, html))
        except Exception:
            logger.exception("Autosave persistence failed", persistence_id=persistence_id)
            return False
        if not ok:
            logger.warning("Autosave persistence rejected", persistence_id=persistence_id)
        return ok

    def _on_persist_done(self, revision: int, notified: bool, future: asyncio.Future) -> None:
        if future.cancelled():
            logger.warning("Autosave persistence cancelled", persistence_id=self.persistence_id)
            return
        exc = future.exception()
        if exc is not None:
            logger.error(
                "Autosave persistence failed",
                persistence_id=self.persistence_id,
                error=str(exc),
            )
            return
        if not future.result():
            logger.warning("Autosave persistence rejected", persistence_id=self.persistence_id)
            return
        if notified:
            self._mark_clean(revision)

    def _notify_host(self, html: str) -> bool:
        if self._on_save is None:
            return True
        try:
            self._on_save(html)
        except Exception:
            logger.exception("Host save callback failed")
            return False
        return True

    def _mark_clean(self, revision: int) -> None:
        # Edits made after the snapshot keep the session dirty
        if revision == self._revision:
            self._dirty = False

    def _on_autosave_elapsed(self) -> None:
        if self._state is EditorState.EMPTY:
            return
        self.save()

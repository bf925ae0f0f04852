"""Direct-manipulation HTML editor core."""

from pagecraft.editor.autosave import AsyncioScheduler, Debouncer, Scheduler
from pagecraft.editor.config import EditorSettings
from pagecraft.editor.document import EditorDocument
from pagecraft.editor.events import EditorEvent, EventType
from pagecraft.editor.interaction import InteractionHandle, wire_document
from pagecraft.editor.selection import SelectionRule, resolve_selection
from pagecraft.editor.session import EditingSession, EditorState, StylePanel
from pagecraft.editor.styles import StyleOverrideEngine

__all__ = [
    "AsyncioScheduler",
    "Debouncer",
    "EditingSession",
    "EditorDocument",
    "EditorEvent",
    "EditorSettings",
    "EditorState",
    "EventType",
    "InteractionHandle",
    "Scheduler",
    "SelectionRule",
    "StyleOverrideEngine",
    "StylePanel",
    "resolve_selection",
    "wire_document",
]

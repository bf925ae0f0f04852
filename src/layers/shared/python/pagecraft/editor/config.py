"""Editor settings."""

import os

from pydantic import BaseModel as PydanticBaseModel, Field


class EditorSettings(PydanticBaseModel):
    """Tunables for an editing session.

    Defaults match what the hosted editor ships with; ``from_env`` lets a
    Lambda override the ones that matter operationally.
    """

    autosave_delay_seconds: float = Field(default=1.0, gt=0)
    max_html_size: int = Field(default=1_000_000, gt=0, description="Bytes")
    editor_id_attribute: str = Field(default="data-editor-id")
    style_id_prefix: str = Field(default="editor-style-")
    element_id_prefix: str = Field(default="editor-element-")

    @classmethod
    def from_env(cls) -> "EditorSettings":
        """Build settings from PAGECRAFT_* environment variables."""
        overrides: dict[str, str] = {}
        if delay := os.environ.get("PAGECRAFT_AUTOSAVE_DELAY_SECONDS"):
            overrides["autosave_delay_seconds"] = delay
        if max_size := os.environ.get("PAGECRAFT_MAX_HTML_SIZE"):
            overrides["max_html_size"] = max_size
        return cls.model_validate(overrides)

    def rule_id_for(self, editor_id: str) -> str:
        """Id of the injected <style> node for an element identifier."""
        return f"{self.style_id_prefix}{editor_id}"

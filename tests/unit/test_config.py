"""Tests for editor settings."""

import pytest
from pydantic import ValidationError


class TestEditorSettings:
    """Tests for EditorSettings."""

    def test_defaults(self):
        """Test shipped defaults."""
        from pagecraft.editor.config import EditorSettings

        settings = EditorSettings()

        assert settings.autosave_delay_seconds == 1.0
        assert settings.editor_id_attribute == "data-editor-id"
        assert settings.rule_id_for("editor-element-abc") == "editor-style-editor-element-abc"

    def test_from_env(self, monkeypatch):
        """Test environment overrides."""
        from pagecraft.editor.config import EditorSettings

        monkeypatch.setenv("PAGECRAFT_AUTOSAVE_DELAY_SECONDS", "2.5")
        monkeypatch.setenv("PAGECRAFT_MAX_HTML_SIZE", "2048")

        settings = EditorSettings.from_env()

        assert settings.autosave_delay_seconds == 2.5
        assert settings.max_html_size == 2048

    def test_invalid_delay(self, monkeypatch):
        """A non-positive delay is rejected."""
        from pagecraft.editor.config import EditorSettings

        monkeypatch.setenv("PAGECRAFT_AUTOSAVE_DELAY_SECONDS", "0")

        with pytest.raises(ValidationError):
            EditorSettings.from_env()

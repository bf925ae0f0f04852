"""Tests for Pydantic models."""

import pytest
from datetime import datetime
from pydantic import ValidationError

from pagecraft.models.base import generate_ulid
from pagecraft.models.component import (
    Component,
    CreateComponentRequest,
    EditComponentRequest,
    EditOperation,
)


class TestBaseModel:
    """Tests for BaseModel."""

    def test_generate_ulid(self):
        """Test ULID generation."""
        ulid1 = generate_ulid()
        ulid2 = generate_ulid()

        assert len(ulid1) == 26
        assert ulid1 != ulid2

    def test_model_timestamps(self):
        """Test automatic timestamps."""
        component = Component(workspace_id="ws-123", content="<p>Hi</p>")

        assert component.created_at is not None
        assert component.updated_at is not None
        assert component.version == 1
        assert component.name == "Untitled page"

    def test_increment_version(self):
        """Test optimistic-locking version bump."""
        component = Component(workspace_id="ws-123", content="<p>Hi</p>")

        component.increment_version()

        assert component.version == 2


class TestComponent:
    """Tests for the Component model."""

    def test_keys(self):
        """Test PK/SK layout."""
        component = Component(id="comp-1", workspace_id="ws-1", content="<p>Hi</p>")

        assert component.get_keys() == {"PK": "WS#ws-1", "SK": "COMPONENT#comp-1"}

    def test_serialization(self):
        """Test DynamoDB serialization."""
        component = Component(id="comp-1", workspace_id="ws-1", content="<p>Hi</p>")

        db_item = component.to_dynamodb()

        assert db_item["id"] == "comp-1"
        assert db_item["content"] == "<p>Hi</p>"
        assert isinstance(db_item["created_at"], str)

    def test_deserialization_keeps_text_fields_raw(self):
        """Markup or names that look like dates stay strings."""
        db_item = {
            "id": "comp-1",
            "workspace_id": "ws-1",
            "name": "2024-01-01",
            "content": "2024-01-01T12:00:00",
            "created_at": "2024-01-01T12:00:00+00:00",
            "updated_at": "2024-01-01T12:00:00+00:00",
            "version": 3,
        }

        component = Component.from_dynamodb(db_item)

        assert component.name == "2024-01-01"
        assert component.content == "2024-01-01T12:00:00"
        assert isinstance(component.created_at, datetime)
        assert component.version == 3

    def test_empty_content_rejected(self):
        """Test that content is required."""
        with pytest.raises(ValidationError):
            Component(workspace_id="ws-1", content="")

    def test_summary_omits_markup(self):
        """Test list summaries."""
        component = Component(id="comp-1", workspace_id="ws-1", content="<p>Hi</p>")

        summary = component.to_summary()

        assert summary.id == "comp-1"
        assert summary.content_length == len("<p>Hi</p>")
        assert "content" not in summary.model_dump()


class TestRequests:
    """Tests for request models."""

    def test_create_request(self):
        """Test create request validation."""
        request = CreateComponentRequest(content="<p>Hi</p>")

        assert request.name is None

    def test_operation_requires_arguments(self):
        """Each op must carry its own arguments."""
        with pytest.raises(ValidationError):
            EditOperation(op="click")
        with pytest.raises(ValidationError):
            EditOperation(op="apply_style", property="color")
        with pytest.raises(ValidationError):
            EditOperation(op="toggle", style="strike")

    def test_valid_operations(self):
        """Test well-formed operations."""
        request = EditComponentRequest(operations=[
            {"op": "click", "selector": "h1"},
            {"op": "edit_text", "text": "New"},
            {"op": "apply_style", "property": "fontSize", "value": "18"},
            {"op": "toggle", "style": "bold"},
            {"op": "deselect"},
        ])

        assert [o.op for o in request.operations] == [
            "click", "edit_text", "apply_style", "toggle", "deselect",
        ]

    def test_empty_batch_rejected(self):
        """Test that a batch needs at least one operation."""
        with pytest.raises(ValidationError):
            EditComponentRequest(operations=[])

"""Pydantic models for Pagecraft entities."""

from pagecraft.models.base import BaseModel, generate_ulid, utc_now
from pagecraft.models.component import (
    Component,
    ComponentSummary,
    CreateComponentRequest,
    EditComponentRequest,
    EditOperation,
    UpdateComponentRequest,
)

__all__ = [
    "BaseModel",
    "Component",
    "ComponentSummary",
    "CreateComponentRequest",
    "EditComponentRequest",
    "EditOperation",
    "UpdateComponentRequest",
    "generate_ulid",
    "utc_now",
]

"""Component model: a stored blob of generated landing-page HTML."""

from datetime import datetime
from typing import ClassVar, Literal

from pydantic import BaseModel as PydanticBaseModel, Field, model_validator

from pagecraft.models.base import BaseModel


class Component(BaseModel):
    """Component entity - one editable landing page document.

    Key Pattern:
        PK: WS#{workspace_id}
        SK: COMPONENT#{id}
    """

    _pk_prefix: ClassVar[str] = "WS#"
    _sk_prefix: ClassVar[str] = "COMPONENT#"
    _raw_text_fields: ClassVar[frozenset[str]] = frozenset({"content", "name"})

    workspace_id: str = Field(..., description="Parent workspace ID")
    name: str = Field(default="Untitled page", min_length=1, max_length=255)
    content: str = Field(..., min_length=1, description="Serialized HTML markup")

    def get_pk(self) -> str:
        """Get partition key: WS#{workspace_id}."""
        return f"WS#{self.workspace_id}"

    def get_sk(self) -> str:
        """Get sort key: COMPONENT#{id}."""
        return f"COMPONENT#{self.id}"

    def to_summary(self) -> "ComponentSummary":
        """Summarize without the (potentially large) markup."""
        return ComponentSummary(
            id=self.id,
            name=self.name,
            version=self.version,
            created_at=self.created_at,
            updated_at=self.updated_at,
            content_length=len(self.content),
        )


class ComponentSummary(PydanticBaseModel):
    """List view of a component."""

    id: str
    name: str
    version: int
    created_at: datetime
    updated_at: datetime
    content_length: int


class CreateComponentRequest(PydanticBaseModel):
    """Request model for storing newly generated markup."""

    content: str = Field(..., min_length=1)
    name: str | None = Field(None, min_length=1, max_length=255)


class UpdateComponentRequest(PydanticBaseModel):
    """Request model for replacing a component's markup."""

    content: str = Field(..., min_length=1)
    name: str | None = Field(None, min_length=1, max_length=255)


class EditOperation(PydanticBaseModel):
    """One headless editor step applied to a stored component.

    ``click`` and ``select`` take a CSS selector; ``click`` goes through the
    same target resolution as a pointer click, ``select`` picks the element
    verbatim.
    """

    op: Literal["click", "select", "edit_text", "apply_style", "toggle", "deselect"]
    selector: str | None = None
    text: str | None = None
    property: str | None = None
    value: str | None = None
    style: Literal["bold", "italic", "underline"] | None = None

    @model_validator(mode="after")
    def check_arguments(self) -> "EditOperation":
        """Each op carries exactly the arguments it needs."""
        required = {
            "click": ("selector",),
            "select": ("selector",),
            "edit_text": ("text",),
            "apply_style": ("property", "value"),
            "toggle": ("style",),
            "deselect": (),
        }[self.op]
        missing = [name for name in required if getattr(self, name) is None]
        if missing:
            raise ValueError(f"'{self.op}' requires: {', '.join(missing)}")
        return self


class EditComponentRequest(PydanticBaseModel):
    """Batch of editor operations, applied in order."""

    operations: list[EditOperation] = Field(..., min_length=1, max_length=200)

"""Service classes for business logic."""

from pagecraft.services.component_store import ComponentStore
from pagecraft.services.html_utils import (
    HtmlValidationResult,
    prepare_generated_html,
    strip_code_fences,
    validate_html,
    wrap_html,
)

__all__ = [
    "ComponentStore",
    "HtmlValidationResult",
    "prepare_generated_html",
    "strip_code_fences",
    "validate_html",
    "wrap_html",
]

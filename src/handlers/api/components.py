"""Components API handler (admin, authenticated).

Stores generated landing-page markup and applies headless editor
operations to it.
"""

import json
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError
from soupsieve import SelectorSyntaxError

from pagecraft.editor import EditingSession
from pagecraft.models.component import (
    CreateComponentRequest,
    EditComponentRequest,
    EditOperation,
    UpdateComponentRequest,
)
from pagecraft.services.component_store import ComponentStore
from pagecraft.utils.auth import get_auth_context, require_workspace_access
from pagecraft.utils.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from pagecraft.utils.responses import (
    created,
    error,
    no_content,
    not_found,
    success,
    validation_error,
)

logger = structlog.get_logger()


def handler(event: dict[str, Any], context: Any) -> dict:
    """Handle components API requests.

    Routes:
        GET    /workspaces/{workspace_id}/components
        POST   /workspaces/{workspace_id}/components
        GET    /workspaces/{workspace_id}/components/{component_id}
        PUT    /workspaces/{workspace_id}/components/{component_id}
        DELETE /workspaces/{workspace_id}/components/{component_id}
        POST   /workspaces/{workspace_id}/components/{component_id}/edits
    """
    try:
        http_method = event.get("httpMethod", "").upper()
        path = event.get("path", "")
        path_params = event.get("pathParameters", {}) or {}
        workspace_id = path_params.get("workspace_id")
        component_id = path_params.get("component_id")

        auth = get_auth_context(event)
        if not workspace_id:
            return error("workspace_id is required", 400)
        require_workspace_access(auth, workspace_id)

        store = ComponentStore(workspace_id)

        if path.endswith("/edits") and http_method == "POST" and component_id:
            return edit_component(store, component_id, event)
        elif http_method == "GET" and component_id:
            return get_component(store, component_id)
        elif http_method == "GET":
            return list_components(store, event)
        elif http_method == "POST":
            return create_component(store, event)
        elif http_method == "PUT" and component_id:
            return update_component(store, component_id, event)
        elif http_method == "DELETE" and component_id:
            return delete_component(store, component_id)
        else:
            return error("Method not allowed", 405)

    except ValidationError as e:
        return validation_error(e.errors)
    except NotFoundError as e:
        return not_found(e.resource_type, e.resource_id)
    except ForbiddenError as e:
        return error(e.message, 403, error_code="FORBIDDEN")
    except ConflictError as e:
        return error(e.message, 409, error_code="CONFLICT")
    except PersistenceError as e:
        return error(e.message, e.status_code, error_code=e.error_code)
    except ValueError as e:
        return error(str(e), 400)
    except Exception as e:
        logger.exception("Components handler error", error=str(e))
        return error("Internal server error", 500)


def _parse_body(event: dict, model: type) -> Any:
    """Parse and validate a JSON body; returns the model or an error response."""
    try:
        body = json.loads(event.get("body") or "{}")
        return model.model_validate(body)
    except PydanticValidationError as e:
        logger.warning("Component request validation failed", errors=e.errors())
        return validation_error([
            {"field": ".".join(str(x) for x in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ])
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON body", error=str(e))
        return error("Invalid JSON body", 400)


def list_components(store: ComponentStore, event: dict) -> dict:
    """List components in a workspace (summaries, no markup)."""
    query_params = event.get("queryStringParameters", {}) or {}
    limit = min(int(query_params.get("limit", 50)), 100)

    components, _ = store.repo.list_by_workspace(store.workspace_id, limit=limit)

    return success({
        "items": [c.to_summary().model_dump(mode="json") for c in components],
        "pagination": {"limit": limit},
    })


def get_component(store: ComponentStore, component_id: str) -> dict:
    """Get a single component, markup included."""
    component = store.load(component_id)
    return success(component.model_dump(mode="json"))


def create_component(store: ComponentStore, event: dict) -> dict:
    """Store new markup."""
    request = _parse_body(event, CreateComponentRequest)
    if not isinstance(request, CreateComponentRequest):
        return request

    component = store.create(request.content, name=request.name)
    return created({"id": component.id, "version": component.version})


def update_component(store: ComponentStore, component_id: str, event: dict) -> dict:
    """Replace a component's markup."""
    request = _parse_body(event, UpdateComponentRequest)
    if not isinstance(request, UpdateComponentRequest):
        return request

    component = store.replace(component_id, request.content, name=request.name)
    return success({"id": component.id, "version": component.version})


def delete_component(store: ComponentStore, component_id: str) -> dict:
    """Delete a component."""
    if not store.repo.delete_component(store.workspace_id, component_id):
        return not_found("Component", component_id)

    logger.info("Component deleted", component_id=component_id, workspace_id=store.workspace_id)
    return no_content()


def _apply_operation(session: EditingSession, operation: EditOperation) -> bool:
    """Run one operation. Returns False when it had no effect."""
    if operation.op in ("click", "select"):
        try:
            element = session.document.select_one(operation.selector)
        except SelectorSyntaxError as e:
            raise ValidationError(
                f"Invalid selector '{operation.selector}'",
                errors=[{"field": "selector", "message": str(e).splitlines()[0]}],
            ) from e
        if element is None:
            raise ValidationError(
                f"No element matches selector '{operation.selector}'",
                errors=[{"field": "selector", "message": "no match"}],
            )
        if operation.op == "click":
            session.click(element)
            return session.selected is not None
        return session.select(element)
    if operation.op == "edit_text":
        return session.edit_text(operation.text)
    if operation.op == "apply_style":
        return session.apply_style(operation.property, operation.value)
    if operation.op == "toggle":
        toggles = {
            "bold": session.toggle_bold,
            "italic": session.toggle_italic,
            "underline": session.toggle_underline,
        }
        return toggles[operation.style]()
    return session.deselect()


def edit_component(store: ComponentStore, component_id: str, event: dict) -> dict:
    """Apply editor operations to a stored component and save the result."""
    request = _parse_body(event, EditComponentRequest)
    if not isinstance(request, EditComponentRequest):
        return request

    component = store.load(component_id)

    saved: list[str] = []
    session = EditingSession(on_save=saved.append, settings=store.settings)
    session.load(component.content)

    applied = 0
    try:
        for operation in request.operations:
            if _apply_operation(session, operation):
                applied += 1
        session.save()
    finally:
        session.unmount()

    if applied == 0:
        return success({
            "id": component.id,
            "version": component.version,
            "applied": 0,
            "content": component.content,
        })

    component = store.persist_or_raise(component_id, saved[-1])
    logger.info(
        "Component edited",
        component_id=component_id,
        operations=len(request.operations),
        applied=applied,
        version=component.version,
    )

    return success({
        "id": component.id,
        "version": component.version,
        "applied": applied,
        "content": component.content,
    })

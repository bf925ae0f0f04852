"""Component store: the editor's persistence collaborator.

``ComponentStore.persist`` has the shape an ``EditingSession`` expects,
``persist(component_id, html) -> bool``. It never raises; failures are
logged and reported as False so the session keeps its dirty flag and retries
on the next save.
"""

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from pagecraft.editor.config import EditorSettings
from pagecraft.models.component import Component
from pagecraft.repositories.component import ComponentRepository
from pagecraft.services.html_utils import validate_html
from pagecraft.utils.exceptions import NotFoundError, PagecraftError, PersistenceError, ValidationError

logger = structlog.get_logger()


class ComponentStore:
    """Workspace-scoped read/write access to stored components."""

    def __init__(
        self,
        workspace_id: str,
        repo: ComponentRepository | None = None,
        settings: EditorSettings | None = None,
    ):
        """Initialize component store.

        Args:
            workspace_id: Workspace whose components this store touches.
            repo: Optional ComponentRepository (created lazily if not provided).
            settings: Editor settings, for the markup size limit.
        """
        self.workspace_id = workspace_id
        self._repo = repo
        self.settings = settings or EditorSettings.from_env()

    @property
    def repo(self) -> ComponentRepository:
        """Get component repository (lazy init)."""
        if self._repo is None:
            self._repo = ComponentRepository()
        return self._repo

    def _validate(self, html: str) -> None:
        result = validate_html(html, self.settings.max_html_size)
        if not result.is_valid:
            raise ValidationError(result.error, errors=[{"field": "content", "message": result.error}])

    def load(self, component_id: str) -> Component:
        """Fetch a component.

        Raises:
            NotFoundError: If the component does not exist in this workspace.
        """
        component = self.repo.get_by_id(self.workspace_id, component_id)
        if component is None:
            raise NotFoundError("Component", component_id)
        return component

    def create(self, html: str, name: str | None = None) -> Component:
        """Validate and store new markup.

        Raises:
            ValidationError: If the markup is rejected.
        """
        self._validate(html)
        component = Component(workspace_id=self.workspace_id, content=html)
        if name:
            component.name = name
        component = self.repo.create_component(component)
        logger.info("Component created", component_id=component.id, workspace_id=self.workspace_id)
        return component

    def replace(self, component_id: str, html: str, name: str | None = None) -> Component:
        """Overwrite a component's markup, bumping its version.

        Raises:
            ValidationError: If the markup is rejected.
            NotFoundError: If the component does not exist.
            ConflictError: If it was modified concurrently.
        """
        self._validate(html)
        component = self.load(component_id)
        component.content = html
        if name:
            component.name = name
        component = self.repo.update_component(component)
        logger.info(
            "Component updated",
            component_id=component_id,
            workspace_id=self.workspace_id,
            version=component.version,
        )
        return component

    def persist(self, component_id: str, html: str) -> bool:
        """Save edited markup for the editor. Never raises."""
        try:
            self.replace(component_id, html)
        except (PagecraftError, ClientError, BotoCoreError) as e:
            logger.warning(
                "Component persistence failed",
                component_id=component_id,
                workspace_id=self.workspace_id,
                error=str(e),
            )
            return False
        return True

    def persist_or_raise(self, component_id: str, html: str) -> Component:
        """Like ``replace`` but storage failures surface as PersistenceError."""
        try:
            return self.replace(component_id, html)
        except (ClientError, BotoCoreError) as e:
            logger.error("Component persistence failed", component_id=component_id, error=str(e))
            raise PersistenceError(component_id, original_error=str(e)) from e

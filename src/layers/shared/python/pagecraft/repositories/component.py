"""Component repository for DynamoDB operations."""

from pagecraft.models.component import Component
from pagecraft.repositories.base import BaseRepository


class ComponentRepository(BaseRepository[Component]):
    """Repository for Component entities."""

    def __init__(self, table_name: str | None = None):
        """Initialize component repository."""
        super().__init__(Component, table_name)

    def get_by_id(self, workspace_id: str, component_id: str) -> Component | None:
        """Get component by ID.

        Args:
            workspace_id: The workspace ID.
            component_id: The component ID.

        Returns:
            Component or None if not found.
        """
        return self.get(pk=f"WS#{workspace_id}", sk=f"COMPONENT#{component_id}")

    def list_by_workspace(
        self,
        workspace_id: str,
        limit: int = 50,
        last_key: dict | None = None,
    ) -> tuple[list[Component], dict | None]:
        """List components in a workspace, newest ULID last."""
        return self.query(
            pk=f"WS#{workspace_id}",
            sk_begins_with="COMPONENT#",
            limit=limit,
            last_key=last_key,
        )

    def create_component(self, component: Component) -> Component:
        """Create a new component."""
        return self.create(component)

    def update_component(self, component: Component) -> Component:
        """Update an existing component, bumping its version."""
        return self.update(component)

    def delete_component(self, workspace_id: str, component_id: str) -> bool:
        """Delete a component.

        Returns:
            True if deleted, False if it did not exist.
        """
        return self.delete(pk=f"WS#{workspace_id}", sk=f"COMPONENT#{component_id}")

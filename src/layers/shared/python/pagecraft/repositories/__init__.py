"""DynamoDB repositories."""

from pagecraft.repositories.base import BaseRepository
from pagecraft.repositories.component import ComponentRepository

__all__ = ["BaseRepository", "ComponentRepository"]

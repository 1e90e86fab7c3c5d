"""Base repository class."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, List, Optional, TypeVar

if TYPE_CHECKING:
    from browser_runner.models.database import Database

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """Base repository with the lookups every table supports."""

    def __init__(self, database: "Database"):
        """
        Initialize repository with database connection.

        Args:
            database: Database instance
        """
        self.db = database

    @abstractmethod
    async def get_by_id(self, id: int) -> Optional[T]:
        """
        Get entity by ID.

        Args:
            id: Entity ID

        Returns:
            Entity or None if not found
        """
        pass

    @abstractmethod
    async def get_all(self, limit: int = 100) -> List[T]:
        """
        Get all entities.

        Args:
            limit: Maximum number of entities to return

        Returns:
            List of entities
        """
        pass

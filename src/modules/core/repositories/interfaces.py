"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that all
domain-specific repository interfaces extend.  Service-layer code
depends on this abstraction, never on Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")

# (items, total_count) for one zero-based page.
PageResult = Tuple[List[T], int]


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Customer``).

    Implementations translate infrastructure failures into
    ``modules.core.exceptions.StorageUnavailable``.
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key."""

    @abstractmethod
    def list_all(self, page: int, page_size: int) -> PageResult[T]:
        """Return one zero-based page of entities and the total count."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

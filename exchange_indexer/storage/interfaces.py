"""
Storage interfaces for the indexer core.

Handlers reach persistent state only through load/save/remove by id;
every save is visible to the next load in the same process.
"""
from abc import ABC, abstractmethod
from typing import Optional, Type, TypeVar

from ..types import Entity, EntityNotFoundError


E = TypeVar('E', bound=Entity)


class EntityStore(ABC):
    """Base interface for entity storage backends."""

    @abstractmethod
    def load(self, entity_cls: Type[E], entity_id: str) -> Optional[E]:
        """
        Load a record by id.

        Args:
            entity_cls: Record type to decode into
            entity_id: Record id

        Returns:
            A fresh copy of the stored record, or None if absent
        """
        pass

    @abstractmethod
    def save(self, entity: Entity) -> None:
        """
        Insert or replace a record under its id.

        Args:
            entity: Record to persist
        """
        pass

    @abstractmethod
    def remove(self, entity_cls: Type[Entity], entity_id: str) -> None:
        """
        Delete a record. Removing an absent record is a no-op.

        Args:
            entity_cls: Record type
            entity_id: Record id
        """
        pass

    def get(self, entity_cls: Type[E], entity_id: str) -> E:
        """Load a record that must exist."""
        entity = self.load(entity_cls, entity_id)
        if entity is None:
            raise EntityNotFoundError(entity_cls.entity_type, entity_id)
        return entity

    def exists(self, entity_cls: Type[Entity], entity_id: str) -> bool:
        return self.load(entity_cls, entity_id) is not None

# exchange_indexer/database/entity_store.py

from typing import Optional, Type

import msgspec

from ..core.logging import IndexerLogger, log_with_context, DEBUG, ERROR
from ..storage.interfaces import EntityStore, E
from ..types import Entity
from .base import EntityRecord
from .connection import DatabaseManager


class DatabaseEntityStore(EntityStore):
    """Entity store writing through to a SQL database.

    Each save commits on its own so a handler's writes are visible to its
    next load; there is no rollback across a handler invocation.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager
        self.logger = IndexerLogger.get_logger('database.entity_store')

    def load(self, entity_cls: Type[E], entity_id: str) -> Optional[E]:
        with self.db_manager.get_session() as session:
            record = session.get(EntityRecord, (entity_cls.entity_type, entity_id))
            if record is None:
                return None
            return msgspec.json.decode(record.payload, type=entity_cls)

    def save(self, entity: Entity) -> None:
        payload = msgspec.json.encode(entity).decode()
        try:
            with self.db_manager.get_transaction() as session:
                record = session.get(EntityRecord, (entity.entity_type, entity.id))
                if record is None:
                    session.add(EntityRecord(
                        entity_type=entity.entity_type,
                        entity_id=entity.id,
                        payload=payload,
                    ))
                else:
                    record.payload = payload
        except Exception as e:
            log_with_context(self.logger, ERROR, "Failed to save entity",
                             entity_type=entity.entity_type,
                             entity_id=entity.id,
                             error=str(e))
            raise

    def remove(self, entity_cls: Type[Entity], entity_id: str) -> None:
        with self.db_manager.get_transaction() as session:
            record = session.get(EntityRecord, (entity_cls.entity_type, entity_id))
            if record is not None:
                session.delete(record)
                log_with_context(self.logger, DEBUG, "Entity removed",
                                 entity_type=entity_cls.entity_type,
                                 entity_id=entity_id)

    def count(self, entity_cls: Type[Entity]) -> int:
        with self.db_manager.get_session() as session:
            return session.query(EntityRecord).filter(
                EntityRecord.entity_type == entity_cls.entity_type
            ).count()

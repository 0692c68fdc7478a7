"""
In-process entity storage implementation.
"""
import hashlib
from typing import Dict, Optional, Tuple, Type

import msgspec

from ..core.logging import LoggingMixin
from ..types import Entity
from .interfaces import EntityStore, E


class MemoryEntityStore(EntityStore, LoggingMixin):
    """Entity store backed by a dict of msgpack-encoded records.

    Records are stored encoded so a loaded record never aliases the stored
    one; handlers must save to make a mutation visible.
    """

    def __init__(self):
        self._records: Dict[Tuple[str, str], bytes] = {}
        self._encoder = msgspec.msgpack.Encoder()

    def load(self, entity_cls: Type[E], entity_id: str) -> Optional[E]:
        data = self._records.get((entity_cls.entity_type, entity_id))
        if data is None:
            return None
        return msgspec.msgpack.decode(data, type=entity_cls)

    def save(self, entity: Entity) -> None:
        self._records[(entity.entity_type, entity.id)] = self._encoder.encode(entity)

    def remove(self, entity_cls: Type[Entity], entity_id: str) -> None:
        removed = self._records.pop((entity_cls.entity_type, entity_id), None)
        if removed is not None:
            self.log_debug("Entity removed",
                           entity_type=entity_cls.entity_type,
                           entity_id=entity_id)

    def count(self, entity_cls: Optional[Type[Entity]] = None) -> int:
        if entity_cls is None:
            return len(self._records)
        return sum(1 for entity_type, _ in self._records if entity_type == entity_cls.entity_type)

    def clear(self) -> None:
        self._records.clear()

    def snapshot(self) -> bytes:
        """Deterministic encoding of the whole store, ordered by key."""
        return msgspec.msgpack.encode([
            [entity_type, entity_id, self._records[(entity_type, entity_id)]]
            for entity_type, entity_id in sorted(self._records)
        ])

    def digest(self) -> str:
        return hashlib.sha256(self.snapshot()).hexdigest()

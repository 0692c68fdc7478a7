# exchange_indexer/types/model/base.py

from typing import ClassVar, Dict, Any

import msgspec
from msgspec import Struct


class Entity(Struct, kw_only=True):
    """Base for every record the handlers load and persist by id."""
    id: str

    entity_type: ClassVar[str] = "Entity"

    def to_dict(self) -> Dict[str, Any]:
        return msgspec.structs.asdict(self)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"

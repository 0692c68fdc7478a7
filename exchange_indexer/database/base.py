# exchange_indexer/database/base.py

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text, text
from sqlalchemy.orm import declarative_base, declarative_mixin


EntityBase = declarative_base()


@declarative_mixin
class TimestampMixin:
    created_at = Column(
        DateTime(timezone=True), 
        nullable=False, 
        default=lambda: datetime.now(timezone.utc),
        server_default=text('CURRENT_TIMESTAMP')
    )
    
    updated_at = Column(
        DateTime(timezone=True), 
        nullable=False, 
        default=lambda: datetime.now(timezone.utc),
        server_default=text('CURRENT_TIMESTAMP'),
        onupdate=lambda: datetime.now(timezone.utc)
    )


class EntityRecord(EntityBase, TimestampMixin):
    """One row per indexed record, keyed by (entity_type, entity_id).

    The payload is the record's msgspec JSON encoding, so decimals keep
    their exact string form.
    """
    __tablename__ = 'entities'

    entity_type = Column(String(32), primary_key=True)
    entity_id = Column(String(160), primary_key=True)
    payload = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<EntityRecord(entity_type={self.entity_type}, entity_id={self.entity_id})>"

# exchange_indexer/types/model/errors.py

from typing import Optional, Dict, Any, Literal
import hashlib
import msgspec
from msgspec import Struct

from ..new import ErrorId, EvmAddress, EvmHash


class IndexerError(Exception):
    """Base class for errors raised by the indexer core"""


class EntityNotFoundError(IndexerError):
    """A handler required a record that storage does not hold.

    Pairs, tokens and the factory singleton are created before any event
    touches them; reaching this means the event stream or the store is
    inconsistent and indexing must stop.
    """

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} '{entity_id}' not found")


class ReconciliationError(IndexerError):
    """The event stream broke the transfer-before-domain-event ordering"""


class ChainReadError(IndexerError):
    """A chain read whose answer feeds valuation could not be completed"""


class ConfigError(IndexerError):
    pass


class ProcessingError(Struct):
    stage: str  # "config", "transform", "storage", "rpc"
    error_type: str  # "missing_entity", "reconciliation_failed", "chain_read_failed", "handler_failed"
    message: str
    status: Literal["unresolved", "resolved"] = "unresolved"
    error_id: Optional[ErrorId] = None
    context: Optional[Dict[str, Any]] = None  # tx_hash, log_index, pair, etc.

    def __post_init__(self) -> None:
        if not self.error_id:
            self.error_id = self.generate_error_id()

    def mark_resolved(self) -> None:
        self.status = "resolved"

    def generate_error_id(self) -> ErrorId:
        content_struct = {
            "stage": self.stage,
            "error_type": self.error_type,
            "message": self.message,
            "context": self.context or {},
        }
        content_bytes = msgspec.msgpack.encode(content_struct)
        hash_hex = hashlib.sha256(content_bytes).hexdigest()

        return ErrorId(hash_hex[:12])


def create_transform_error(
    error_type: str,
    message: str,
    tx_hash: Optional[EvmHash] = None,
    pair: Optional[EvmAddress] = None,
    handler_name: Optional[str] = None,
    log_index: Optional[int] = None,
    block_number: Optional[int] = None,
) -> ProcessingError:
    context = {}
    if tx_hash:
        context["tx_hash"] = tx_hash
    if pair:
        context["pair"] = pair
    if handler_name:
        context["handler_name"] = handler_name
    if log_index is not None:
        context["log_index"] = log_index
    if block_number is not None:
        context["block_number"] = block_number

    return ProcessingError(
        stage="transform",
        error_type=error_type,
        message=message,
        context=context if context else None
    )

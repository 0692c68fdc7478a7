# exchange_indexer/pipeline/indexing_pipeline.py

import time
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import msgspec
from msgspec import Struct

from ..clients.interfaces import ChainReaderInterface
from ..core.logging import IndexerLogger, log_with_context, INFO, DEBUG, ERROR
from ..transform.factory import FactoryEventHandler
from ..transform.reconciler import PairEventReconciler
from ..types import (
    ChainEvent,
    ChainReadError,
    EntityNotFoundError,
    ProcessingError,
    ReconciliationError,
    create_transform_error,
)


class PipelineStats(Struct):
    events_processed: int = 0
    events_by_type: Dict[str, int] = msgspec.field(default_factory=dict)
    first_block: Optional[int] = None
    last_block: Optional[int] = None
    elapsed_seconds: float = 0.0
    errors: List[ProcessingError] = msgspec.field(default_factory=list)

    def record(self, event: ChainEvent) -> None:
        self.events_processed += 1
        self.events_by_type[event.event_type] = self.events_by_type.get(event.event_type, 0) + 1
        if self.first_block is None:
            self.first_block = event.block_number
        self.last_block = event.block_number


class IndexingPipeline:
    """
    Single-threaded dispatcher feeding decoded events to their handlers.

    Events are applied strictly in the order given, which must be chain
    order (block number, then log index). Any handler failure is recorded
    on the stats and re-raised: the store is left as it was at the failing
    event and indexing stops.
    """

    def __init__(self,
                 reconciler: PairEventReconciler,
                 factory_handler: FactoryEventHandler,
                 chain: Optional[ChainReaderInterface] = None):
        self.reconciler = reconciler
        self.factory_handler = factory_handler
        self.chain = chain
        self.stats = PipelineStats()
        self._position: Optional[Tuple[int, int]] = None

        self.handlers: Dict[str, Callable[[ChainEvent], object]] = {
            "PairCreated": self.factory_handler.handle_pair_created,
            **self.reconciler.handler_map,
        }

        self.logger = IndexerLogger.get_logger('pipeline.indexing_pipeline')
        log_with_context(self.logger, INFO, "IndexingPipeline initialized",
                         handlers=sorted(self.handlers))

    def _check_order(self, event: ChainEvent) -> None:
        position = (event.block_number, event.log_index)
        if self._position is not None and position <= self._position:
            raise ReconciliationError(
                f"Event at block {event.block_number} log {event.log_index} "
                f"arrived after block {self._position[0]} log {self._position[1]}"
            )
        self._position = position

    def process_event(self, event: ChainEvent) -> None:
        handler = self.handlers.get(event.event_type)
        if handler is None:
            log_with_context(self.logger, DEBUG, "No handler for event type, skipping",
                             event_type=event.event_type,
                             tx_hash=event.tx_hash)
            return

        try:
            self._check_order(event)
            if self.chain is not None:
                self.chain.set_block(event.block_number)

            handler(event)

        except EntityNotFoundError as e:
            self._record_error(event, "missing_entity", e)
            raise
        except ReconciliationError as e:
            self._record_error(event, "reconciliation_failed", e)
            raise
        except ChainReadError as e:
            self._record_error(event, "chain_read_failed", e)
            raise
        except Exception as e:
            self._record_error(event, "handler_failed", e)
            raise

        self.stats.record(event)
        log_with_context(self.logger, DEBUG, "Event processed",
                         event_type=event.event_type,
                         tx_hash=event.tx_hash,
                         block_number=event.block_number,
                         log_index=event.log_index)

    def _record_error(self, event: ChainEvent, error_type: str, error: Exception) -> None:
        processing_error = create_transform_error(
            error_type=error_type,
            message=str(error),
            tx_hash=event.tx_hash,
            pair=event.address,
            handler_name=event.event_type,
            log_index=event.log_index,
            block_number=event.block_number,
        )
        self.stats.errors.append(processing_error)

        log_with_context(self.logger, ERROR, "Event processing failed, halting",
                         event_type=event.event_type,
                         tx_hash=event.tx_hash,
                         block_number=event.block_number,
                         log_index=event.log_index,
                         error=str(error),
                         error_id=processing_error.error_id)

    def process_events(self, events: Iterable[ChainEvent]) -> PipelineStats:
        start_time = time.time()
        try:
            for event in events:
                self.process_event(event)
        finally:
            self.stats.elapsed_seconds += time.time() - start_time

        log_with_context(self.logger, INFO, "Event batch processed",
                         events_processed=self.stats.events_processed,
                         first_block=self.stats.first_block,
                         last_block=self.stats.last_block,
                         elapsed_seconds=round(self.stats.elapsed_seconds, 3))
        return self.stats

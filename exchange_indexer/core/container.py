# exchange_indexer/core/container.py

from typing import Optional

from ..clients.interfaces import ChainReaderInterface
from ..contracts.token_metadata import TokenMetadataResolver
from ..database.connection import DatabaseManager
from ..pipeline.indexing_pipeline import IndexingPipeline
from ..pricing.valuation import ValuationEngine
from ..storage.interfaces import EntityStore
from ..transform.aggregation import BucketAggregator
from ..transform.factory import FactoryEventHandler
from ..transform.reconciler import PairEventReconciler
from .config import IndexerConfig


class IndexerContainer:
    """Holds one wired indexer: configuration, collaborators and handlers.

    Every component receives its collaborators through its constructor,
    so two containers never share state.
    """

    def __init__(self,
                 config: IndexerConfig,
                 store: EntityStore,
                 chain: ChainReaderInterface,
                 db_manager: Optional[DatabaseManager] = None):
        self.config = config
        self.store = store
        self.chain = chain
        self.db_manager = db_manager

        self.metadata = TokenMetadataResolver(chain, config.chain.decimals_overrides)
        self.valuation = ValuationEngine(store, chain, config.pricing)
        self.aggregator = BucketAggregator(store)
        self.reconciler = PairEventReconciler(
            store, self.valuation, self.aggregator, config.factory_address
        )
        self.factory_handler = FactoryEventHandler(
            store, chain, self.metadata, config.factory_address
        )
        self.pipeline = IndexingPipeline(self.reconciler, self.factory_handler, chain)

    def shutdown(self) -> None:
        if self.db_manager is not None:
            self.db_manager.shutdown()

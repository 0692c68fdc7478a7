# exchange_indexer/__init__.py

import logging
from pathlib import Path
from typing import Optional

from .core.config import IndexerConfig
from .core.container import IndexerContainer
from .core.logging import IndexerLogger, log_with_context
from .clients.interfaces import ChainReaderInterface
from .clients.rpc import RpcChainReader
from .clients.static import StaticChainReader
from .database.connection import DatabaseManager
from .database.entity_store import DatabaseEntityStore
from .pipeline.indexing_pipeline import IndexingPipeline, PipelineStats
from .storage.interfaces import EntityStore
from .storage.memory import MemoryEntityStore


def create_indexer(config: IndexerConfig,
                   store: Optional[EntityStore] = None,
                   chain: Optional[ChainReaderInterface] = None) -> IndexerContainer:
    """
    Wire an indexer for one configuration.

    Without an explicit store, entities persist to the configured database.
    Without an explicit chain reader, reads go over RPC when an endpoint is
    configured and to the configured token table otherwise.
    """
    _configure_logging_early(config)

    logger = IndexerLogger.get_logger('core.init')

    db_manager = None
    if store is None:
        db_manager = DatabaseManager(config.database)
        db_manager.initialize()
        store = DatabaseEntityStore(db_manager)

    if chain is None:
        chain = _create_chain_reader(config)

    container = IndexerContainer(config, store, chain, db_manager)

    log_with_context(logger, logging.INFO, "Indexer created",
                     factory_address=config.factory_address,
                     store=type(store).__name__,
                     chain_reader=type(chain).__name__)
    return container


def _configure_logging_early(config: IndexerConfig) -> None:
    log_dir = Path(config.logging.log_dir) if config.logging.log_dir else None
    IndexerLogger.configure(
        log_dir=log_dir,
        log_level=config.logging.log_level,
        console_enabled=True,
        file_enabled=log_dir is not None,
        structured_format=config.logging.structured_format,
        force=True,
    )


def _create_chain_reader(config: IndexerConfig) -> ChainReaderInterface:
    if config.rpc is not None:
        return RpcChainReader(config.rpc, config.factory_address)
    return StaticChainReader(config.chain.tokens)


__all__ = [
    "create_indexer",
    "IndexerConfig",
    "IndexerContainer",
    "IndexingPipeline",
    "PipelineStats",
    "MemoryEntityStore",
    "DatabaseEntityStore",
    "StaticChainReader",
    "RpcChainReader",
]

# exchange_indexer/types/__init__.py

from .constants import (
    ZERO_ADDRESS,
    ZERO_BI,
    ONE_BI,
    BI_18,
    ZERO_BD,
    ONE_BD,
    TWO_BD,
    MINIMUM_LIQUIDITY,
    BUNDLE_ID,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    DEFAULT_TOKEN_DECIMALS,
    UNKNOWN_TOKEN_METADATA,
)

# New Types
from .new import (
    EvmAddress,
    EvmHash,
    IntStr,
    EntityId,
    ErrorId,
    to_address,
    to_hash,
)

# Configuration Types
from .configs.config import (
    DatabaseConfig,
    RpcConfig,
    TokenMetadataConfig,
    PricingConfig,
    LoggingConfig,
    ChainConfig,
)

# Event Types
from .events import (
    ChainEvent,
    PairCreated,
    PairTransfer,
    PairSync,
    PairMint,
    PairBurn,
    PairSwap,
    ChainEventUnion,
)

# Model Types: Base
from .model.base import Entity

# Model Types: Entities
from .model.entities import (
    Token,
    Pair,
    Factory,
    Bundle,
    Transaction,
    Mint,
    Burn,
    Swap,
)

# Model Types: Buckets
from .model.buckets import (
    PairDayData,
    PairHourData,
    TokenDayData,
    FactoryDayData,
)

# Model Types: Errors
from .model.errors import (
    IndexerError,
    EntityNotFoundError,
    ReconciliationError,
    ChainReadError,
    ConfigError,
    ProcessingError,
    create_transform_error,
)

ENTITY_TYPES = {
    cls.entity_type: cls
    for cls in (
        Token, Pair, Factory, Bundle, Transaction, Mint, Burn, Swap,
        PairDayData, PairHourData, TokenDayData, FactoryDayData,
    )
}

__all__ = [
    # Constants
    "ZERO_ADDRESS",
    "ZERO_BI",
    "ONE_BI",
    "BI_18",
    "ZERO_BD",
    "ONE_BD",
    "TWO_BD",
    "MINIMUM_LIQUIDITY",
    "BUNDLE_ID",
    "SECONDS_PER_DAY",
    "SECONDS_PER_HOUR",
    "DEFAULT_TOKEN_DECIMALS",
    "UNKNOWN_TOKEN_METADATA",

    # New Types
    "EvmAddress",
    "EvmHash",
    "IntStr",
    "EntityId",
    "ErrorId",
    "to_address",
    "to_hash",

    # Configuration types
    "DatabaseConfig",
    "RpcConfig",
    "TokenMetadataConfig",
    "PricingConfig",
    "LoggingConfig",
    "ChainConfig",

    # Event types
    "ChainEvent",
    "PairCreated",
    "PairTransfer",
    "PairSync",
    "PairMint",
    "PairBurn",
    "PairSwap",
    "ChainEventUnion",

    # Model Types
    "Entity",
    "Token",
    "Pair",
    "Factory",
    "Bundle",
    "Transaction",
    "Mint",
    "Burn",
    "Swap",
    "PairDayData",
    "PairHourData",
    "TokenDayData",
    "FactoryDayData",
    "ENTITY_TYPES",

    # Errors
    "IndexerError",
    "EntityNotFoundError",
    "ReconciliationError",
    "ChainReadError",
    "ConfigError",
    "ProcessingError",
    "create_transform_error",
]

# exchange_indexer/types/configs/config.py

from decimal import Decimal
from typing import Dict, List, Optional

import msgspec
from msgspec import Struct

from ..new import EvmAddress


class DatabaseConfig(Struct):
    url: str = "sqlite:///exchange_indexer.db"
    pool_size: int = 5
    max_overflow: int = 10


class RpcConfig(Struct):
    endpoint_url: str
    timeout: int = 30


class TokenMetadataConfig(Struct):
    symbol: str
    name: str
    decimals: int = 18


class PricingConfig(Struct):
    native_token: EvmAddress
    reference_pair: EvmAddress
    whitelist: List[EvmAddress]
    minimum_liquidity_threshold_native: Decimal = Decimal("10")


class LoggingConfig(Struct):
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    structured_format: bool = True


class ChainConfig(Struct):
    factory_address: EvmAddress
    decimals_overrides: Dict[EvmAddress, int] = msgspec.field(default_factory=dict)
    tokens: Dict[EvmAddress, TokenMetadataConfig] = msgspec.field(default_factory=dict)

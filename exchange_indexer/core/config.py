# exchange_indexer/core/config.py

import json
import os
from pathlib import Path
from typing import Dict, List, Optional, Any

import msgspec
import yaml
from msgspec import Struct

from ..types import (
    EvmAddress,
    ConfigError,
    DatabaseConfig,
    RpcConfig,
    PricingConfig,
    LoggingConfig,
    ChainConfig,
)
from .logging import IndexerLogger, log_with_context, INFO


class IndexerConfig(Struct):
    chain: ChainConfig
    pricing: PricingConfig
    database: DatabaseConfig = msgspec.field(default_factory=DatabaseConfig)
    logging: LoggingConfig = msgspec.field(default_factory=LoggingConfig)
    rpc: Optional[RpcConfig] = None

    @property
    def factory_address(self) -> EvmAddress:
        return self.chain.factory_address

    @property
    def native_token(self) -> EvmAddress:
        return self.pricing.native_token

    @property
    def reference_pair(self) -> EvmAddress:
        return self.pricing.reference_pair

    @property
    def whitelist(self) -> List[EvmAddress]:
        return self.pricing.whitelist

    @classmethod
    def from_dict(cls, data: Dict[str, Any], env_vars: Optional[dict] = None) -> 'IndexerConfig':
        try:
            config = msgspec.convert(data, type=cls, strict=False)
        except msgspec.ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        config = config.normalized().with_env(env_vars if env_vars is not None else os.environ)
        config.validate()
        return config

    @classmethod
    def from_file(cls, config_path: str, env_vars: Optional[dict] = None) -> 'IndexerConfig':
        logger = IndexerLogger.get_logger('core.config')
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

        from dotenv import load_dotenv
        load_dotenv()

        with open(path, 'r') as f:
            if path.suffix.lower() in ['.yaml', '.yml']:
                data = yaml.safe_load(f)
            elif path.suffix.lower() == '.json':
                data = json.load(f)
            else:
                raise ConfigError(f"Unsupported config file type: {path.suffix}")

        config = cls.from_dict(data or {}, env_vars)

        log_with_context(logger, INFO, "Configuration loaded",
                         config_path=str(path),
                         factory_address=config.factory_address,
                         whitelist_size=len(config.whitelist),
                         database_url=config.database.url.split('@')[-1])
        return config

    def normalized(self) -> 'IndexerConfig':
        """Lower-case every configured address."""
        chain = msgspec.structs.replace(
            self.chain,
            factory_address=EvmAddress(self.chain.factory_address.lower()),
            decimals_overrides={
                EvmAddress(address.lower()): decimals
                for address, decimals in self.chain.decimals_overrides.items()
            },
            tokens={
                EvmAddress(address.lower()): meta
                for address, meta in self.chain.tokens.items()
            },
        )
        pricing = msgspec.structs.replace(
            self.pricing,
            native_token=EvmAddress(self.pricing.native_token.lower()),
            reference_pair=EvmAddress(self.pricing.reference_pair.lower()),
            whitelist=[EvmAddress(address.lower()) for address in self.pricing.whitelist],
        )
        return msgspec.structs.replace(self, chain=chain, pricing=pricing)

    def with_env(self, env: dict) -> 'IndexerConfig':
        config = self
        if env.get("INDEXER_DB_URL"):
            config = msgspec.structs.replace(
                config,
                database=msgspec.structs.replace(config.database, url=env["INDEXER_DB_URL"]),
            )
        if env.get("INDEXER_RPC_URL"):
            rpc = config.rpc or RpcConfig(endpoint_url=env["INDEXER_RPC_URL"])
            config = msgspec.structs.replace(
                config,
                rpc=msgspec.structs.replace(rpc, endpoint_url=env["INDEXER_RPC_URL"]),
            )
        if env.get("INDEXER_LOG_LEVEL"):
            config = msgspec.structs.replace(
                config,
                logging=msgspec.structs.replace(config.logging, log_level=env["INDEXER_LOG_LEVEL"]),
            )
        return config

    def validate(self) -> None:
        if not self.chain.factory_address:
            raise ConfigError("chain.factory_address is required")
        if not self.pricing.native_token:
            raise ConfigError("pricing.native_token is required")
        if not self.pricing.reference_pair:
            raise ConfigError("pricing.reference_pair is required")
        if len(set(self.pricing.whitelist)) != len(self.pricing.whitelist):
            raise ConfigError("pricing.whitelist contains duplicate addresses")
        if self.pricing.minimum_liquidity_threshold_native < 0:
            raise ConfigError("pricing.minimum_liquidity_threshold_native must not be negative")
        for address, decimals in self.chain.decimals_overrides.items():
            if decimals < 0 or decimals > 77:
                raise ConfigError(f"Decimals override for {address} must be 0-77, got {decimals}")

    def to_dict(self) -> Dict[str, Any]:
        return msgspec.to_builtins(self)

# exchange_indexer/types/model/buckets.py

from decimal import Decimal
from typing import ClassVar

from ..constants import ZERO_BD
from ..new import EvmAddress
from .base import Entity


class PairDayData(Entity, kw_only=True):
    date: int
    pair: EvmAddress
    token0: EvmAddress
    token1: EvmAddress
    reserve0: Decimal = ZERO_BD
    reserve1: Decimal = ZERO_BD
    total_supply: Decimal = ZERO_BD
    reserve_usd: Decimal = ZERO_BD
    daily_volume_token0: Decimal = ZERO_BD
    daily_volume_token1: Decimal = ZERO_BD
    daily_volume_usd: Decimal = ZERO_BD
    daily_txns: int = 0

    entity_type: ClassVar[str] = "PairDayData"


class PairHourData(Entity, kw_only=True):
    hour_start_unix: int
    pair: EvmAddress
    reserve0: Decimal = ZERO_BD
    reserve1: Decimal = ZERO_BD
    total_supply: Decimal = ZERO_BD
    reserve_usd: Decimal = ZERO_BD
    hourly_volume_token0: Decimal = ZERO_BD
    hourly_volume_token1: Decimal = ZERO_BD
    hourly_volume_usd: Decimal = ZERO_BD
    hourly_txns: int = 0

    entity_type: ClassVar[str] = "PairHourData"


class TokenDayData(Entity, kw_only=True):
    date: int
    token: EvmAddress
    price_usd: Decimal = ZERO_BD
    total_liquidity_token: Decimal = ZERO_BD
    total_liquidity_native: Decimal = ZERO_BD
    total_liquidity_usd: Decimal = ZERO_BD
    daily_volume_token: Decimal = ZERO_BD
    daily_volume_native: Decimal = ZERO_BD
    daily_volume_usd: Decimal = ZERO_BD
    daily_txns: int = 0

    entity_type: ClassVar[str] = "TokenDayData"


class FactoryDayData(Entity, kw_only=True):
    date: int
    factory: EvmAddress
    total_volume_native: Decimal = ZERO_BD
    total_volume_usd: Decimal = ZERO_BD
    total_liquidity_native: Decimal = ZERO_BD
    total_liquidity_usd: Decimal = ZERO_BD
    tx_count: int = 0
    daily_volume_native: Decimal = ZERO_BD
    daily_volume_usd: Decimal = ZERO_BD
    daily_volume_untracked: Decimal = ZERO_BD

    entity_type: ClassVar[str] = "FactoryDayData"

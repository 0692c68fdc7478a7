# exchange_indexer/types/model/entities.py

from decimal import Decimal
from typing import ClassVar, List, Optional

import msgspec

from ..constants import ZERO_BD, BUNDLE_ID
from ..new import EvmAddress, EvmHash
from .base import Entity


class Token(Entity, kw_only=True):
    symbol: str
    name: str
    decimals: int
    trade_volume: Decimal = ZERO_BD
    trade_volume_usd: Decimal = ZERO_BD
    untracked_volume_usd: Decimal = ZERO_BD
    total_transactions: int = 0
    total_liquidity: Decimal = ZERO_BD
    derived_native: Decimal = ZERO_BD
    derived_usd: Decimal = ZERO_BD

    entity_type: ClassVar[str] = "Token"


class Pair(Entity, kw_only=True):
    token0: EvmAddress
    token1: EvmAddress
    reserve0: Decimal = ZERO_BD
    reserve1: Decimal = ZERO_BD
    total_supply: Decimal = ZERO_BD
    reserve_native: Decimal = ZERO_BD
    reserve_usd: Decimal = ZERO_BD
    tracked_reserve_native: Decimal = ZERO_BD
    token0_price: Decimal = ZERO_BD
    token1_price: Decimal = ZERO_BD
    volume_token0: Decimal = ZERO_BD
    volume_token1: Decimal = ZERO_BD
    volume_usd: Decimal = ZERO_BD
    untracked_volume_usd: Decimal = ZERO_BD
    total_transactions: int = 0
    created_at_timestamp: int = 0
    created_at_block_number: int = 0

    entity_type: ClassVar[str] = "Pair"


class Factory(Entity, kw_only=True):
    pair_count: int = 0
    total_volume_usd: Decimal = ZERO_BD
    total_volume_native: Decimal = ZERO_BD
    untracked_volume_usd: Decimal = ZERO_BD
    total_liquidity_usd: Decimal = ZERO_BD
    total_liquidity_native: Decimal = ZERO_BD
    total_transactions: int = 0

    entity_type: ClassVar[str] = "Factory"


class Bundle(Entity, kw_only=True):
    id: str = BUNDLE_ID
    native_price: Decimal = ZERO_BD

    entity_type: ClassVar[str] = "Bundle"


class Transaction(Entity, kw_only=True):
    block_number: int
    timestamp: int
    mints: List[str] = msgspec.field(default_factory=list)
    burns: List[str] = msgspec.field(default_factory=list)
    swaps: List[str] = msgspec.field(default_factory=list)

    entity_type: ClassVar[str] = "Transaction"


class Mint(Entity, kw_only=True):
    transaction: EvmHash
    timestamp: int
    pair: EvmAddress
    token0: EvmAddress
    token1: EvmAddress
    liquidity: Decimal
    to: Optional[EvmAddress] = None
    sender: Optional[EvmAddress] = None
    amount0: Optional[Decimal] = None
    amount1: Optional[Decimal] = None
    amount_usd: Optional[Decimal] = None
    log_index: Optional[int] = None

    entity_type: ClassVar[str] = "Mint"

    @property
    def complete(self) -> bool:
        # the companion Mint event is the only writer of sender
        return self.sender is not None


class Burn(Entity, kw_only=True):
    transaction: EvmHash
    timestamp: int
    pair: EvmAddress
    token0: EvmAddress
    token1: EvmAddress
    liquidity: Decimal
    needs_complete: bool
    sender: Optional[EvmAddress] = None
    to: Optional[EvmAddress] = None
    amount0: Optional[Decimal] = None
    amount1: Optional[Decimal] = None
    amount_usd: Optional[Decimal] = None
    log_index: Optional[int] = None
    fee_to: Optional[EvmAddress] = None
    fee_liquidity: Optional[Decimal] = None

    entity_type: ClassVar[str] = "Burn"


class Swap(Entity, kw_only=True):
    transaction: EvmHash
    timestamp: int
    pair: EvmAddress
    token0: EvmAddress
    token1: EvmAddress
    sender: EvmAddress
    from_address: EvmAddress
    to: EvmAddress
    amount0_in: Decimal
    amount1_in: Decimal
    amount0_out: Decimal
    amount1_out: Decimal
    amount_usd: Decimal
    log_index: int

    entity_type: ClassVar[str] = "Swap"

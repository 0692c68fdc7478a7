# exchange_indexer/types/events.py

from typing import Union

import msgspec
from msgspec import Struct

from .new import EvmAddress, EvmHash, IntStr


class ChainEvent(Struct, kw_only=True, tag=True):
    """Envelope shared by every decoded log delivered to the handlers.

    `address` is the emitting contract: the pair for pool events, the
    factory for PairCreated. Raw uint256 amounts travel as decimal strings.
    """
    tx_hash: EvmHash
    tx_from: EvmAddress
    block_number: int
    timestamp: int
    log_index: int
    address: EvmAddress

    @property
    def event_type(self) -> str:
        return self.__class__.__name__


class PairTransfer(ChainEvent, kw_only=True, tag=True):
    from_address: EvmAddress = msgspec.field(name="from")
    to_address: EvmAddress = msgspec.field(name="to")
    value: IntStr


class PairSync(ChainEvent, kw_only=True, tag=True):
    reserve0: IntStr
    reserve1: IntStr


class PairMint(ChainEvent, kw_only=True, tag=True):
    sender: EvmAddress
    amount0: IntStr
    amount1: IntStr


class PairBurn(ChainEvent, kw_only=True, tag=True):
    sender: EvmAddress
    amount0: IntStr
    amount1: IntStr
    to: EvmAddress


class PairSwap(ChainEvent, kw_only=True, tag=True):
    sender: EvmAddress
    amount0_in: IntStr = msgspec.field(name="amount0In")
    amount1_in: IntStr = msgspec.field(name="amount1In")
    amount0_out: IntStr = msgspec.field(name="amount0Out")
    amount1_out: IntStr = msgspec.field(name="amount1Out")
    to: EvmAddress


class PairCreated(ChainEvent, kw_only=True, tag=True):
    token0: EvmAddress
    token1: EvmAddress
    pair: EvmAddress


ChainEventUnion = Union[
    PairCreated,
    PairTransfer,
    PairSync,
    PairMint,
    PairBurn,
    PairSwap,
]

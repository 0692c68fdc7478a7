# tests/conftest.py
"""
pytest fixtures for the exchange indexer

Addresses are ordered so that USDC sorts before WNATIVE before FOO; the
reference pair therefore has the stable coin as token0.
"""

from decimal import Decimal

import pytest

from exchange_indexer import create_indexer
from exchange_indexer.clients.static import StaticChainReader
from exchange_indexer.core.config import IndexerConfig
from exchange_indexer.storage.memory import MemoryEntityStore
from exchange_indexer.types import (
    ZERO_ADDRESS,
    PairBurn,
    PairCreated,
    PairMint,
    PairSwap,
    PairSync,
    PairTransfer,
)


FACTORY = "0x" + "f" * 40
USDC = "0x" + "1" * 40
WNATIVE = "0x" + "2" * 40
FOO = "0x" + "3" * 40
BAR = "0x" + "4" * 40
REF_PAIR = "0x" + "a" * 40
FOO_PAIR = "0x" + "b" * 40
BAR_FOO_PAIR = "0x" + "c" * 40

USER = "0x" + "5" * 40
ROUTER = "0x" + "6" * 40
FEE_TO = "0x" + "7" * 40

START_BLOCK = 100
START_TIMESTAMP = 1_700_000_000

E18 = 10 ** 18
E6 = 10 ** 6


def config_data() -> dict:
    return {
        "chain": {
            "factory_address": FACTORY,
            "tokens": {
                USDC: {"symbol": "USDC", "name": "USD Coin", "decimals": 6},
                WNATIVE: {"symbol": "WNATIVE", "name": "Wrapped Native", "decimals": 18},
                FOO: {"symbol": "FOO", "name": "Foo Token", "decimals": 18},
            },
        },
        "pricing": {
            "native_token": WNATIVE,
            "reference_pair": REF_PAIR,
            "whitelist": [WNATIVE, USDC],
            "minimum_liquidity_threshold_native": "10",
        },
        "database": {"url": "sqlite:///:memory:"},
    }


class EventBuilder:
    """Builds events with increasing block numbers and log indexes."""

    def __init__(self, block_number: int = START_BLOCK, timestamp: int = START_TIMESTAMP):
        self.block_number = block_number
        self.timestamp = timestamp
        self.log_index = 0
        self._tx_count = 0

    def next_block(self, seconds: int = 12) -> None:
        self.block_number += 1
        self.timestamp += seconds
        self.log_index = 0

    def new_tx(self) -> str:
        self._tx_count += 1
        return "0x%064x" % self._tx_count

    def _envelope(self, address: str, tx_hash: str) -> dict:
        envelope = {
            "tx_hash": tx_hash,
            "tx_from": USER,
            "block_number": self.block_number,
            "timestamp": self.timestamp,
            "log_index": self.log_index,
            "address": address,
        }
        self.log_index += 1
        return envelope

    def pair_created(self, token0: str, token1: str, pair: str, tx_hash: str = None) -> PairCreated:
        return PairCreated(token0=token0, token1=token1, pair=pair,
                           **self._envelope(FACTORY, tx_hash or self.new_tx()))

    def transfer(self, pair: str, from_address: str, to_address: str, value: int,
                 tx_hash: str) -> PairTransfer:
        return PairTransfer(from_address=from_address, to_address=to_address, value=str(value),
                            **self._envelope(pair, tx_hash))

    def sync(self, pair: str, reserve0: int, reserve1: int, tx_hash: str) -> PairSync:
        return PairSync(reserve0=str(reserve0), reserve1=str(reserve1),
                        **self._envelope(pair, tx_hash))

    def mint(self, pair: str, amount0: int, amount1: int, tx_hash: str,
             sender: str = ROUTER) -> PairMint:
        return PairMint(sender=sender, amount0=str(amount0), amount1=str(amount1),
                        **self._envelope(pair, tx_hash))

    def burn(self, pair: str, amount0: int, amount1: int, tx_hash: str,
             sender: str = ROUTER, to: str = USER) -> PairBurn:
        return PairBurn(sender=sender, amount0=str(amount0), amount1=str(amount1), to=to,
                        **self._envelope(pair, tx_hash))

    def swap(self, pair: str, amount0_in: int, amount1_in: int, amount0_out: int,
             amount1_out: int, tx_hash: str, sender: str = ROUTER, to: str = USER) -> PairSwap:
        return PairSwap(sender=sender,
                        amount0_in=str(amount0_in), amount1_in=str(amount1_in),
                        amount0_out=str(amount0_out), amount1_out=str(amount1_out),
                        to=to, **self._envelope(pair, tx_hash))

    def first_deposit(self, pair: str, liquidity: int, amount0: int, amount1: int) -> list:
        """Events of a pair's first liquidity add, minimum liquidity lock included."""
        tx_hash = self.new_tx()
        return [
            self.transfer(pair, ZERO_ADDRESS, ZERO_ADDRESS, 1000, tx_hash),
            self.transfer(pair, ZERO_ADDRESS, USER, liquidity, tx_hash),
            self.sync(pair, amount0, amount1, tx_hash),
            self.mint(pair, amount0, amount1, tx_hash),
        ]


@pytest.fixture
def indexer_config() -> IndexerConfig:
    return IndexerConfig.from_dict(config_data(), env_vars={})


@pytest.fixture
def store() -> MemoryEntityStore:
    return MemoryEntityStore()


@pytest.fixture
def chain(indexer_config) -> StaticChainReader:
    return StaticChainReader(indexer_config.chain.tokens)


@pytest.fixture
def indexer(indexer_config, store, chain):
    return create_indexer(indexer_config, store=store, chain=chain)


@pytest.fixture
def events() -> EventBuilder:
    return EventBuilder()


@pytest.fixture
def pairs_created(indexer, events):
    """Reference pair (USDC/WNATIVE) and FOO pair (WNATIVE/FOO) registered."""
    indexer.pipeline.process_events([
        events.pair_created(USDC, WNATIVE, REF_PAIR),
        events.pair_created(WNATIVE, FOO, FOO_PAIR),
    ])
    events.next_block()
    return indexer


@pytest.fixture
def priced_market(pairs_created, events):
    """
    Reference pair seeded with 40,000 USDC / 20 WNATIVE (native price 2000)
    and FOO pair with 20 WNATIVE / 200 FOO, then synced once more so the
    reference pair clears the liquidity threshold.
    """
    indexer = pairs_created
    indexer.pipeline.process_events(
        events.first_deposit(REF_PAIR, 100 * E18, 40_000 * E6, 20 * E18)
    )
    events.next_block()
    indexer.pipeline.process_events(
        events.first_deposit(FOO_PAIR, 50 * E18, 20 * E18, 200 * E18)
    )
    events.next_block()
    tx_hash = events.new_tx()
    indexer.pipeline.process_events([
        events.sync(REF_PAIR, 40_000 * E6, 20 * E18, tx_hash),
        events.sync(FOO_PAIR, 20 * E18, 200 * E18, tx_hash),
    ])
    events.next_block()
    return indexer


def dec(value) -> Decimal:
    return Decimal(str(value))

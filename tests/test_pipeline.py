# tests/test_pipeline.py

import msgspec
import pytest

from exchange_indexer import create_indexer
from exchange_indexer.clients.static import StaticChainReader
from exchange_indexer.pipeline import decode_events, load_events
from exchange_indexer.storage.memory import MemoryEntityStore
from exchange_indexer.types import (
    ZERO_ADDRESS,
    ChainReadError,
    EntityNotFoundError,
    PairSwap,
    PairTransfer,
    ReconciliationError,
)

from conftest import (
    BAR,
    BAR_FOO_PAIR,
    E18,
    E6,
    FOO,
    FOO_PAIR,
    REF_PAIR,
    USDC,
    USER,
    WNATIVE,
    EventBuilder,
)


def market_history() -> list:
    events = EventBuilder()
    history = [
        events.pair_created(USDC, WNATIVE, REF_PAIR),
        events.pair_created(WNATIVE, FOO, FOO_PAIR),
        events.pair_created(BAR, FOO, BAR_FOO_PAIR),
    ]
    events.next_block()
    history += events.first_deposit(REF_PAIR, 100 * E18, 40_000 * E6, 20 * E18)
    events.next_block()
    history += events.first_deposit(FOO_PAIR, 50 * E18, 20 * E18, 200 * E18)
    events.next_block()

    tx_hash = events.new_tx()
    history += [
        events.sync(FOO_PAIR, 21 * E18, 191 * E18, tx_hash),
        events.swap(FOO_PAIR, E18, 0, 0, 9 * E18, tx_hash),
    ]
    events.next_block(seconds=3600)

    tx_hash = events.new_tx()
    history += [
        events.transfer(REF_PAIR, USER, REF_PAIR, 10 * E18, tx_hash),
        events.transfer(REF_PAIR, REF_PAIR, ZERO_ADDRESS, 10 * E18, tx_hash),
        events.sync(REF_PAIR, 36_000 * E6, 18 * E18, tx_hash),
        events.burn(REF_PAIR, 4000 * E6, 2 * E18, tx_hash),
    ]
    events.next_block(seconds=86400)

    tx_hash = events.new_tx()
    history += [
        events.sync(REF_PAIR, 37_000 * E6, 17_500 * 10 ** 15, tx_hash),
        events.swap(REF_PAIR, 1000 * E6, 0, 0, 500 * 10 ** 15, tx_hash),
    ]
    return history


def replay(indexer_config, history):
    store = MemoryEntityStore()
    indexer = create_indexer(indexer_config, store=store,
                             chain=StaticChainReader(indexer_config.chain.tokens))
    stats = indexer.pipeline.process_events(history)
    return store, stats


def test_replay_is_deterministic(indexer_config):
    store_a, _ = replay(indexer_config, market_history())
    store_b, _ = replay(indexer_config, market_history())

    assert store_a.count() > 0
    assert store_a.snapshot() == store_b.snapshot()
    assert store_a.digest() == store_b.digest()


def test_stats_count_events_by_type(indexer_config):
    history = market_history()
    _, stats = replay(indexer_config, history)

    assert stats.events_processed == len(history)
    assert stats.events_by_type["PairCreated"] == 3
    assert stats.events_by_type["PairSwap"] == 2
    assert stats.events_by_type["PairBurn"] == 1
    assert stats.first_block == history[0].block_number
    assert stats.last_block == history[-1].block_number
    assert stats.errors == []


def test_out_of_order_event_halts(indexer, events):
    first = events.pair_created(USDC, WNATIVE, REF_PAIR)
    second = events.pair_created(WNATIVE, FOO, FOO_PAIR)

    with pytest.raises(ReconciliationError):
        indexer.pipeline.process_events([second, first])


def test_event_for_unknown_pair_halts(indexer, events):
    tx_hash = events.new_tx()
    with pytest.raises(EntityNotFoundError):
        indexer.pipeline.process_events([
            events.sync(REF_PAIR, 1, 1, tx_hash),
        ])

    error = indexer.pipeline.stats.errors[0]
    assert error.error_type == "missing_entity"
    assert error.context["pair"] == REF_PAIR
    assert error.error_id


class UnreachableFactoryReader(StaticChainReader):
    def get_pair_address(self, token_a, token_b):
        raise ChainReadError("getPair timed out")


def test_failed_pair_lookup_halts(indexer_config, store, events):
    indexer = create_indexer(indexer_config, store=store,
                             chain=UnreachableFactoryReader(indexer_config.chain.tokens))
    indexer.pipeline.process_events([events.pair_created(USDC, WNATIVE, REF_PAIR)])
    events.next_block()

    with pytest.raises(ChainReadError):
        indexer.pipeline.process_events(
            events.first_deposit(REF_PAIR, 100 * E18, 40_000 * E6, 20 * E18)
        )

    error = indexer.pipeline.stats.errors[0]
    assert error.error_type == "chain_read_failed"
    assert error.context["pair"] == REF_PAIR


def test_json_lines_feed_uses_wire_names(tmp_path):
    events = EventBuilder()
    tx_hash = events.new_tx()
    history = [
        events.transfer(REF_PAIR, ZERO_ADDRESS, USER, E18, tx_hash),
        events.swap(FOO_PAIR, E18, 0, 0, 9 * E18, tx_hash),
    ]

    lines = [msgspec.json.encode(event) for event in history]
    assert b'"type":"PairTransfer"' in lines[0]
    assert b'"from":' in lines[0]
    assert b'"amount0In":' in lines[1]

    path = tmp_path / "events.jsonl"
    path.write_bytes(b"\n".join(lines) + b"\n\n")

    decoded = list(load_events(path))
    assert decoded == history
    assert isinstance(decoded[0], PairTransfer)
    assert isinstance(decoded[1], PairSwap)


def test_malformed_line_is_rejected():
    with pytest.raises(msgspec.DecodeError):
        list(decode_events(['{"type": "PairSync", "reserve0": "1"}']))

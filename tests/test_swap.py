# tests/test_swap.py

from decimal import Decimal

from exchange_indexer.types import Factory, Pair, Swap, Token, Transaction

from conftest import BAR, BAR_FOO_PAIR, E18, E6, FACTORY, FOO, FOO_PAIR, REF_PAIR, ROUTER, USER, WNATIVE


def swap_one_native_for_foo(indexer, events) -> str:
    tx_hash = events.new_tx()
    indexer.pipeline.process_events([
        events.swap(FOO_PAIR, E18, 0, 0, 9 * E18, tx_hash),
    ])
    return tx_hash


def test_swap_record(priced_market, events, store):
    tx_hash = swap_one_native_for_foo(priced_market, events)

    assert store.get(Transaction, tx_hash).swaps == [f"{tx_hash}-0"]

    swap = store.get(Swap, f"{tx_hash}-0")
    assert swap.pair == FOO_PAIR
    assert swap.sender == ROUTER
    assert swap.from_address == USER
    assert swap.to == USER
    assert swap.amount0_in == Decimal(1)
    assert swap.amount1_out == Decimal(9)
    assert swap.amount1_in == Decimal(0)
    # tracked through the WNATIVE side: 1 x 2000
    assert swap.amount_usd == Decimal(2000)


def test_swap_updates_pair_token_and_factory_volume(priced_market, events, store):
    swap_one_native_for_foo(priced_market, events)

    pair = store.get(Pair, FOO_PAIR)
    assert pair.volume_token0 == Decimal(1)
    assert pair.volume_token1 == Decimal(9)
    assert pair.volume_usd == Decimal(2000)
    # average of both sides: (1 x 1 + 9 x 0.1) / 2 native
    assert pair.untracked_volume_usd == Decimal(1900)
    assert pair.total_transactions == 2

    native = store.get(Token, WNATIVE)
    assert native.trade_volume == Decimal(1)
    assert native.trade_volume_usd == Decimal(2000)
    assert native.untracked_volume_usd == Decimal(1900)
    assert native.total_transactions == 3

    foo = store.get(Token, FOO)
    assert foo.trade_volume == Decimal(9)
    assert foo.trade_volume_usd == Decimal(2000)
    assert foo.total_transactions == 2

    factory = store.get(Factory, FACTORY)
    assert factory.total_volume_usd == Decimal(2000)
    assert factory.total_volume_native == Decimal(1)
    assert factory.untracked_volume_usd == Decimal(1900)
    assert factory.total_transactions == 3


def test_swap_between_whitelisted_tokens_averages_sides(priced_market, events, store):
    tx_hash = events.new_tx()
    priced_market.pipeline.process_events([
        events.swap(REF_PAIR, 4000 * E6, 0, 0, 2 * E18, tx_hash),
    ])

    swap = store.get(Swap, f"{tx_hash}-0")
    assert swap.amount_usd == Decimal(4000)
    assert store.get(Pair, REF_PAIR).untracked_volume_usd == Decimal(4000)


def test_untracked_swap_falls_back_to_derived_value(priced_market, events, store):
    priced_market.pipeline.process_events([
        events.pair_created(BAR, FOO, BAR_FOO_PAIR),
    ])
    bar = store.get(Token, BAR)
    assert bar.symbol == "unknown"
    assert bar.decimals == 18

    tx_hash = events.new_tx()
    priced_market.pipeline.process_events([
        events.swap(BAR_FOO_PAIR, E18, 0, 0, 2 * E18, tx_hash),
    ])

    # (2 FOO x 0.1 + 1 BAR x 0) / 2 = 0.1 native
    swap = store.get(Swap, f"{tx_hash}-0")
    assert swap.amount_usd == Decimal(200)

    factory = store.get(Factory, FACTORY)
    assert factory.total_volume_usd == Decimal(0)
    assert factory.untracked_volume_usd == Decimal(200)
    assert store.get(Pair, BAR_FOO_PAIR).volume_usd == Decimal(0)


def test_swaps_in_one_transaction_get_sequential_ids(priced_market, events, store):
    tx_hash = events.new_tx()
    priced_market.pipeline.process_events([
        events.swap(FOO_PAIR, E18, 0, 0, 9 * E18, tx_hash),
        events.swap(REF_PAIR, 0, E18, 2000 * E6, 0, tx_hash),
    ])

    assert store.get(Transaction, tx_hash).swaps == [f"{tx_hash}-0", f"{tx_hash}-1"]
    assert store.get(Swap, f"{tx_hash}-1").pair == REF_PAIR

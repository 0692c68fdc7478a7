# tests/test_memory_store.py

from decimal import Decimal

from exchange_indexer.storage.memory import MemoryEntityStore
from exchange_indexer.types import Pair, Token

from conftest import FOO, REF_PAIR, USDC, WNATIVE


def test_loaded_records_do_not_alias_storage():
    store = MemoryEntityStore()
    store.save(Pair(id=REF_PAIR, token0=USDC, token1=WNATIVE))

    pair = store.get(Pair, REF_PAIR)
    pair.reserve0 = Decimal(5)

    assert store.get(Pair, REF_PAIR).reserve0 == Decimal(0)


def test_snapshot_ignores_insertion_order():
    first = MemoryEntityStore()
    second = MemoryEntityStore()
    tokens = [Token(id=address, symbol="T", name="T", decimals=18) for address in (USDC, WNATIVE, FOO)]

    for token in tokens:
        first.save(token)
    for token in reversed(tokens):
        second.save(token)

    assert first.snapshot() == second.snapshot()
    assert first.count(Token) == 3
    assert first.count(Pair) == 0


def test_remove_and_clear():
    store = MemoryEntityStore()
    store.save(Token(id=FOO, symbol="FOO", name="Foo", decimals=18))

    store.remove(Token, FOO)
    store.remove(Token, FOO)
    assert store.load(Token, FOO) is None

    store.save(Token(id=FOO, symbol="FOO", name="Foo", decimals=18))
    store.clear()
    assert store.count() == 0

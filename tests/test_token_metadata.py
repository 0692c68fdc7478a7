# tests/test_token_metadata.py

from unittest.mock import MagicMock

import pytest

from exchange_indexer.clients.interfaces import CallResult
from exchange_indexer.clients.rpc import RpcChainReader
from exchange_indexer.clients.static import StaticChainReader
from exchange_indexer.contracts.token_metadata import TokenMetadataResolver
from exchange_indexer.types import ChainReadError, RpcConfig, TokenMetadataConfig, ZERO_ADDRESS

from conftest import FACTORY, FOO, USDC, WNATIVE


def make_reader() -> StaticChainReader:
    return StaticChainReader({
        USDC: TokenMetadataConfig(symbol="USDC", name="USD Coin", decimals=6),
    })


def test_resolves_metadata_from_chain():
    resolver = TokenMetadataResolver(make_reader())
    metadata = resolver.resolve(USDC)

    assert metadata.symbol == "USDC"
    assert metadata.name == "USD Coin"
    assert metadata.decimals == 6


def test_reverted_calls_fall_back_to_defaults():
    resolver = TokenMetadataResolver(make_reader())
    metadata = resolver.resolve(FOO)

    assert metadata.symbol == "unknown"
    assert metadata.name == "unknown"
    assert metadata.decimals == 18


def test_decimals_override_wins_over_chain():
    resolver = TokenMetadataResolver(make_reader(), {USDC: 8})

    assert resolver.fetch_decimals(USDC) == 8
    assert resolver.fetch_symbol(USDC) == "USDC"


def test_static_reader_pair_lookup_is_order_independent():
    reader = StaticChainReader()
    pair = "0x" + "9" * 40
    reader.register_pair(USDC, WNATIVE, pair)

    assert reader.get_pair_address(USDC, WNATIVE) == pair
    assert reader.get_pair_address(WNATIVE, USDC) == pair
    assert reader.get_pair_address(USDC, FOO) == ZERO_ADDRESS


def test_call_result_value_or():
    assert CallResult.success("ABC").value_or("unknown") == "ABC"
    assert CallResult.failure("execution reverted").value_or("unknown") == "unknown"


def test_rpc_reader_turns_reverts_into_failures():
    w3 = MagicMock()
    token_contract = MagicMock()
    token_contract.functions.symbol.return_value.call.side_effect = Exception("execution reverted")
    token_contract.functions.decimals.return_value.call.return_value = 6
    w3.eth.contract.return_value = token_contract

    reader = RpcChainReader(RpcConfig(endpoint_url="http://localhost:8545"), FACTORY, w3=w3)
    reader.set_block(123)

    symbol = reader.get_token_symbol(USDC)
    assert not symbol.ok
    assert "reverted" in symbol.error

    decimals = reader.get_token_decimals(USDC)
    assert decimals.ok and decimals.value == 6
    token_contract.functions.decimals.return_value.call.assert_called_with(block_identifier=123)


def test_rpc_reader_missing_pair_is_zero_address():
    w3 = MagicMock()
    contract = MagicMock()
    contract.functions.getPair.return_value.call.return_value = "0x0000000000000000000000000000000000000000"
    w3.eth.contract.return_value = contract

    reader = RpcChainReader(RpcConfig(endpoint_url="http://localhost:8545"), FACTORY, w3=w3)

    assert reader.get_pair_address(USDC, FOO) == ZERO_ADDRESS


def test_rpc_reader_raises_when_pair_lookup_fails():
    w3 = MagicMock()
    contract = MagicMock()
    contract.functions.getPair.return_value.call.side_effect = ConnectionError("rpc down")
    w3.eth.contract.return_value = contract

    reader = RpcChainReader(RpcConfig(endpoint_url="http://localhost:8545"), FACTORY, w3=w3)

    with pytest.raises(ChainReadError, match="rpc down"):
        reader.get_pair_address(WNATIVE, FOO)

# exchange_indexer/clients/static.py

from typing import Dict, Optional, Tuple

from ..core.logging import LoggingMixin
from ..types import EvmAddress, ZERO_ADDRESS, TokenMetadataConfig
from .interfaces import ChainReaderInterface, CallResult


class StaticChainReader(ChainReaderInterface, LoggingMixin):
    """Chain reader answering from in-process registries.

    Used for replaying recorded event files: pairs are learned from the
    factory's PairCreated events, token metadata from configuration.
    Tokens without configured metadata behave like reverted calls.
    """

    def __init__(self, tokens: Optional[Dict[EvmAddress, TokenMetadataConfig]] = None):
        self.tokens = {address.lower(): meta for address, meta in (tokens or {}).items()}
        self._pairs: Dict[Tuple[str, str], EvmAddress] = {}

    @staticmethod
    def _key(token_a: str, token_b: str) -> Tuple[str, str]:
        a, b = token_a.lower(), token_b.lower()
        return (a, b) if a < b else (b, a)

    def register_pair(self, token0: EvmAddress, token1: EvmAddress, pair: EvmAddress) -> None:
        self._pairs[self._key(token0, token1)] = EvmAddress(pair.lower())
        self.log_debug("Pair registered", pair=pair, token0=token0, token1=token1)

    def get_pair_address(self, token_a: EvmAddress, token_b: EvmAddress) -> EvmAddress:
        return self._pairs.get(self._key(token_a, token_b), ZERO_ADDRESS)

    def _metadata(self, token: EvmAddress) -> Optional[TokenMetadataConfig]:
        return self.tokens.get(token.lower())

    def get_token_symbol(self, token: EvmAddress) -> CallResult[str]:
        meta = self._metadata(token)
        if meta is None:
            return CallResult.failure(f"no metadata for {token}")
        return CallResult.success(meta.symbol)

    def get_token_name(self, token: EvmAddress) -> CallResult[str]:
        meta = self._metadata(token)
        if meta is None:
            return CallResult.failure(f"no metadata for {token}")
        return CallResult.success(meta.name)

    def get_token_decimals(self, token: EvmAddress) -> CallResult[int]:
        meta = self._metadata(token)
        if meta is None:
            return CallResult.failure(f"no metadata for {token}")
        return CallResult.success(meta.decimals)

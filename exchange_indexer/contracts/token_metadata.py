# exchange_indexer/contracts/token_metadata.py

from typing import Dict, Optional

from msgspec import Struct

from ..clients.interfaces import ChainReaderInterface
from ..core.logging import LoggingMixin
from ..types import EvmAddress, DEFAULT_TOKEN_DECIMALS, UNKNOWN_TOKEN_METADATA


class TokenMetadata(Struct):
    symbol: str
    name: str
    decimals: int


class TokenMetadataResolver(LoggingMixin):
    """Resolves ERC20 metadata when a token is first referenced.

    A reverted call falls back to "unknown" for symbol and name and to 18
    for decimals. Tokens listed in decimals_overrides never hit the chain
    for decimals, since their on-chain value is not trusted.
    """

    def __init__(self, chain: ChainReaderInterface,
                 decimals_overrides: Optional[Dict[EvmAddress, int]] = None):
        self.chain = chain
        self.decimals_overrides = {
            address.lower(): decimals for address, decimals in (decimals_overrides or {}).items()
        }

    def fetch_symbol(self, token: EvmAddress) -> str:
        result = self.chain.get_token_symbol(token)
        if not result.ok:
            self.log_warning("Symbol call reverted, using default",
                             token=token,
                             default=UNKNOWN_TOKEN_METADATA,
                             error=result.error)
        return result.value_or(UNKNOWN_TOKEN_METADATA)

    def fetch_name(self, token: EvmAddress) -> str:
        result = self.chain.get_token_name(token)
        if not result.ok:
            self.log_warning("Name call reverted, using default",
                             token=token,
                             default=UNKNOWN_TOKEN_METADATA,
                             error=result.error)
        return result.value_or(UNKNOWN_TOKEN_METADATA)

    def fetch_decimals(self, token: EvmAddress) -> int:
        override = self.decimals_overrides.get(token.lower())
        if override is not None:
            return override

        result = self.chain.get_token_decimals(token)
        if not result.ok:
            self.log_warning("Decimals call reverted, using default",
                             token=token,
                             default=DEFAULT_TOKEN_DECIMALS,
                             error=result.error)
        return int(result.value_or(DEFAULT_TOKEN_DECIMALS))

    def resolve(self, token: EvmAddress) -> TokenMetadata:
        return TokenMetadata(
            symbol=self.fetch_symbol(token),
            name=self.fetch_name(token),
            decimals=self.fetch_decimals(token),
        )

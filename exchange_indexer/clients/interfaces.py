"""
Interfaces for point-in-time chain reads.

Contract calls can revert; readers report that through CallResult instead
of raising, and callers apply their own fallback.
"""
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from msgspec import Struct

from ..types import EvmAddress


T = TypeVar('T')


class CallResult(Struct, Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: Any) -> 'CallResult':
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> 'CallResult':
        return cls(ok=False, error=error)

    def value_or(self, default: T) -> T:
        return self.value if self.ok else default


class ChainReaderInterface(ABC):
    """Interface for chain read implementations."""
    
    @abstractmethod
    def get_pair_address(self, token_a: EvmAddress, token_b: EvmAddress) -> EvmAddress:
        """
        Look up the factory's pair for two tokens, in either order.
        
        Returns:
            Pair address, or ZERO_ADDRESS when the factory has none

        Raises:
            ChainReadError: the lookup itself failed
        """
        pass

    @abstractmethod
    def get_token_symbol(self, token: EvmAddress) -> CallResult[str]:
        pass

    @abstractmethod
    def get_token_name(self, token: EvmAddress) -> CallResult[str]:
        pass

    @abstractmethod
    def get_token_decimals(self, token: EvmAddress) -> CallResult[int]:
        pass

    def set_block(self, block_number: int) -> None:
        """Pin subsequent reads to a block height. Readers without history
        ignore this."""
        return None

    def register_pair(self, token0: EvmAddress, token1: EvmAddress, pair: EvmAddress) -> None:
        """Record a pair observed on the event feed. Readers backed by the
        chain already know it and ignore this."""
        return None

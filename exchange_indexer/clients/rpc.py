# exchange_indexer/clients/rpc.py

from typing import Any, Callable, Optional, Union

from web3 import Web3

from ..core.logging import LoggingMixin
from ..types import ChainReadError, EvmAddress, ZERO_ADDRESS, RpcConfig
from .interfaces import ChainReaderInterface, CallResult


FACTORY_ABI = [
    {
        "constant": True,
        "inputs": [
            {"name": "tokenA", "type": "address"},
            {"name": "tokenB", "type": "address"},
        ],
        "name": "getPair",
        "outputs": [{"name": "pair", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
]

ERC20_ABI = [
    {
        "constant": True,
        "inputs": [],
        "name": "symbol",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "name",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
]


class RpcChainReader(ChainReaderInterface, LoggingMixin):
    """
    Chain reader calling the factory and ERC20 contracts over JSON-RPC.
    
    Reads are pinned to the block set with set_block so re-deriving a block
    sees the same chain state it saw the first time.
    """
    
    def __init__(self, config: RpcConfig, factory_address: EvmAddress, w3: Optional[Web3] = None):
        self.config = config
        self.w3 = w3 or Web3(Web3.HTTPProvider(
            config.endpoint_url,
            request_kwargs={"timeout": config.timeout},
        ))
        self.factory = self.w3.eth.contract(
            address=Web3.to_checksum_address(factory_address),
            abi=FACTORY_ABI,
        )
        self.block_identifier: Union[int, str] = "latest"

        self.log_info("RpcChainReader initialized",
                      factory_address=factory_address,
                      timeout=config.timeout)

    def set_block(self, block_number: int) -> None:
        self.block_identifier = block_number

    def _token(self, token: EvmAddress):
        return self.w3.eth.contract(address=Web3.to_checksum_address(token), abi=ERC20_ABI)

    def _try_call(self, call: Callable[[], Any], method: str, address: str) -> CallResult:
        """Run a metadata call; reverts and transport errors become failures."""
        try:
            return CallResult.success(call())
        except Exception as e:
            self.log_warning("Contract call failed",
                             method=method,
                             token=address,
                             block_number=self.block_identifier,
                             error=str(e))
            return CallResult.failure(str(e))
    
    def get_pair_address(self, token_a: EvmAddress, token_b: EvmAddress) -> EvmAddress:
        try:
            pair = self.factory.functions.getPair(
                Web3.to_checksum_address(token_a),
                Web3.to_checksum_address(token_b),
            ).call(block_identifier=self.block_identifier)
        except Exception as e:
            self.log_error("Factory getPair failed",
                           token=token_a,
                           entity_id=token_b,
                           block_number=self.block_identifier,
                           error=str(e))
            raise ChainReadError(
                f"getPair({token_a}, {token_b}) failed at block {self.block_identifier}: {e}"
            ) from e

        if not pair:
            return ZERO_ADDRESS
        return EvmAddress(pair.lower())

    def get_token_symbol(self, token: EvmAddress) -> CallResult[str]:
        return self._try_call(
            lambda: self._token(token).functions.symbol().call(block_identifier=self.block_identifier),
            "symbol",
            token,
        )

    def get_token_name(self, token: EvmAddress) -> CallResult[str]:
        return self._try_call(
            lambda: self._token(token).functions.name().call(block_identifier=self.block_identifier),
            "name",
            token,
        )

    def get_token_decimals(self, token: EvmAddress) -> CallResult[int]:
        return self._try_call(
            lambda: self._token(token).functions.decimals().call(block_identifier=self.block_identifier),
            "decimals",
            token,
        )

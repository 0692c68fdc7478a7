# exchange_indexer/transform/factory.py

from ..clients.interfaces import ChainReaderInterface
from ..contracts.token_metadata import TokenMetadataResolver
from ..core.logging import LoggingMixin
from ..storage.interfaces import EntityStore
from ..types import (
    Bundle,
    BUNDLE_ID,
    EvmAddress,
    Factory,
    Pair,
    PairCreated,
    Token,
)


class FactoryEventHandler(LoggingMixin):
    """Creates pairs, and the tokens and singletons they need, from PairCreated."""

    def __init__(self, store: EntityStore, chain: ChainReaderInterface,
                 metadata: TokenMetadataResolver, factory_address: EvmAddress):
        self.store = store
        self.chain = chain
        self.metadata = metadata
        self.factory_address = EvmAddress(factory_address.lower())

    def _load_or_create_factory(self) -> Factory:
        factory = self.store.load(Factory, self.factory_address)
        if factory is None:
            factory = Factory(id=self.factory_address)
            self.store.save(factory)

            self.store.save(Bundle(id=BUNDLE_ID))
            self.log_info("Factory and bundle created", entity_id=self.factory_address)
        return factory

    def _load_or_create_token(self, address: EvmAddress) -> Token:
        token = self.store.load(Token, address)
        if token is not None:
            return token

        metadata = self.metadata.resolve(address)
        token = Token(
            id=address,
            symbol=metadata.symbol,
            name=metadata.name,
            decimals=metadata.decimals,
        )
        self.store.save(token)
        self.log_info("Token created",
                      token=address,
                      symbol=metadata.symbol,
                      decimals=metadata.decimals)
        return token

    def handle_pair_created(self, event: PairCreated) -> Pair:
        if event.address.lower() != self.factory_address:
            self.log_warning("PairCreated from an unexpected factory",
                             tx_hash=event.tx_hash,
                             entity_id=event.address)

        pair_address = EvmAddress(event.pair.lower())
        existing = self.store.load(Pair, pair_address)
        if existing is not None:
            self.log_warning("Pair already exists, ignoring PairCreated",
                             tx_hash=event.tx_hash,
                             pair=pair_address)
            return existing

        factory = self._load_or_create_factory()
        factory.pair_count += 1
        self.store.save(factory)

        token0 = self._load_or_create_token(EvmAddress(event.token0.lower()))
        token1 = self._load_or_create_token(EvmAddress(event.token1.lower()))

        pair = Pair(
            id=pair_address,
            token0=token0.id,
            token1=token1.id,
            created_at_timestamp=event.timestamp,
            created_at_block_number=event.block_number,
        )
        self.store.save(pair)
        self.chain.register_pair(token0.id, token1.id, pair.id)

        self.log_info("Pair created",
                      tx_hash=event.tx_hash,
                      block_number=event.block_number,
                      pair=pair.id,
                      token0=token0.id,
                      token1=token1.id,
                      pair_count=factory.pair_count)
        return pair

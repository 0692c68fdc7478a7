# exchange_indexer/transform/staging.py

from typing import Literal, Optional

from ..core.logging import LoggingMixin
from ..storage.interfaces import EntityStore
from ..types import (
    Burn,
    ChainEvent,
    EvmHash,
    Mint,
    Swap,
    Transaction,
)


OperationKind = Literal["mints", "burns", "swaps"]


class OperationStage(LoggingMixin):
    """
    Logical operations opened within one chain transaction.

    A liquidity add or remove is observed as a transfer of pool tokens
    followed by the pool's Mint/Burn event. The transfer opens the record
    here, and the later domain event completes it. Each track is an
    ordered list of record ids persisted on the Transaction; every change
    is saved before the method returns.
    """

    def __init__(self, store: EntityStore, transaction: Transaction):
        self.store = store
        self.transaction = transaction

    @classmethod
    def load(cls, store: EntityStore, tx_hash: EvmHash) -> Optional['OperationStage']:
        transaction = store.load(Transaction, tx_hash)
        if transaction is None:
            return None
        return cls(store, transaction)

    @classmethod
    def load_or_create(cls, store: EntityStore, event: ChainEvent) -> 'OperationStage':
        transaction = store.load(Transaction, event.tx_hash)
        if transaction is None:
            transaction = Transaction(
                id=event.tx_hash,
                block_number=event.block_number,
                timestamp=event.timestamp,
            )
            store.save(transaction)
        return cls(store, transaction)

    @property
    def tx_hash(self) -> EvmHash:
        return EvmHash(self.transaction.id)

    @property
    def timestamp(self) -> int:
        return self.transaction.timestamp

    def next_id(self, kind: OperationKind) -> str:
        return f"{self.transaction.id}-{len(getattr(self.transaction, kind))}"

    def save(self) -> None:
        self.store.save(self.transaction)

    # === Mints ===

    def last_mint(self) -> Optional[Mint]:
        if not self.transaction.mints:
            return None
        return self.store.get(Mint, self.transaction.mints[-1])

    def has_open_mint(self) -> bool:
        """True when the latest mint still waits for its Mint event."""
        mint = self.last_mint()
        return mint is not None and not mint.complete

    def open_mint(self, mint: Mint) -> Mint:
        self.store.save(mint)
        self.transaction.mints = self.transaction.mints + [mint.id]
        self.save()
        return mint

    def discard_last_mint(self) -> Mint:
        """Delete the latest mint and drop it from the mint track."""
        mint = self.store.get(Mint, self.transaction.mints[-1])
        self.store.remove(Mint, mint.id)
        self.transaction.mints = self.transaction.mints[:-1]
        self.save()
        self.log_debug("Mint discarded", tx_hash=self.tx_hash, mint_id=mint.id)
        return mint

    # === Burns ===

    def last_burn(self) -> Optional[Burn]:
        if not self.transaction.burns:
            return None
        return self.store.get(Burn, self.transaction.burns[-1])

    def pending_burn(self) -> Optional[Burn]:
        """The latest burn if it was opened by a direct send and still waits
        for its finalizing transfer."""
        burn = self.last_burn()
        if burn is not None and burn.needs_complete:
            return burn
        return None

    def open_burn(self, burn: Burn) -> Burn:
        self.store.save(burn)
        self.transaction.burns = self.transaction.burns + [burn.id]
        self.save()
        return burn

    def replace_last_burn(self, burn: Burn) -> Burn:
        self.store.save(burn)
        self.transaction.burns = self.transaction.burns[:-1] + [burn.id]
        self.save()
        return burn

    # === Swaps ===

    def append_swap(self, swap: Swap) -> Swap:
        self.store.save(swap)
        self.transaction.swaps = self.transaction.swaps + [swap.id]
        self.save()
        return swap

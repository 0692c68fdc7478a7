# exchange_indexer/transform/reconciler.py

from decimal import Decimal
from typing import Callable, Dict, Tuple

from ..core.logging import LoggingMixin
from ..pricing.valuation import ValuationEngine
from ..storage.interfaces import EntityStore
from ..types import (
    BI_18,
    BUNDLE_ID,
    MINIMUM_LIQUIDITY,
    ZERO_ADDRESS,
    ZERO_BD,
    TWO_BD,
    Bundle,
    Burn,
    ChainEvent,
    EvmAddress,
    Factory,
    Mint,
    Pair,
    PairBurn,
    PairMint,
    PairSwap,
    PairSync,
    PairTransfer,
    ReconciliationError,
    Swap,
    Token,
)
from ..utils.amounts import amount_to_int, convert_token_to_decimal, safe_div, with_decimal_context
from .aggregation import BucketAggregator
from .staging import OperationStage


class PairEventReconciler(LoggingMixin):
    """
    Applies pair events to pairs, tokens, the factory and their rollups.

    Events must arrive in chain order. Within a transaction the pool-token
    Transfer events come before the Mint/Burn event describing the same
    operation: transfers open the logical Mint/Burn record, the domain
    event completes it.
    """

    def __init__(self, store: EntityStore, valuation: ValuationEngine,
                 aggregator: BucketAggregator, factory_address: EvmAddress):
        self.store = store
        self.valuation = valuation
        self.aggregator = aggregator
        self.factory_address = EvmAddress(factory_address.lower())

        self.handler_map: Dict[str, Callable[[ChainEvent], None]] = {
            "PairTransfer": self.handle_transfer,
            "PairSync": self.handle_sync,
            "PairMint": self.handle_mint,
            "PairBurn": self.handle_burn,
            "PairSwap": self.handle_swap,
        }

        self.log_info("PairEventReconciler initialized",
                      factory_address=self.factory_address,
                      supported_events=list(self.handler_map.keys()))

    def _load_pair_tokens(self, pair_address: str) -> Tuple[Pair, Token, Token]:
        pair = self.store.get(Pair, EvmAddress(pair_address.lower()))
        token0 = self.store.get(Token, pair.token0)
        token1 = self.store.get(Token, pair.token1)
        return pair, token0, token1

    # === Transfer ===

    @with_decimal_context
    def handle_transfer(self, event: PairTransfer) -> None:
        from_address = EvmAddress(event.from_address.lower())
        to_address = EvmAddress(event.to_address.lower())
        raw_value = amount_to_int(event.value)

        # liquidity locked by the pair on its first mint
        if to_address == ZERO_ADDRESS and raw_value == MINIMUM_LIQUIDITY:
            self.log_debug("Skipping minimum liquidity transfer",
                           tx_hash=event.tx_hash,
                           pair=event.address,
                           log_index=event.log_index)
            return

        pair = self.store.get(Pair, EvmAddress(event.address.lower()))
        value = convert_token_to_decimal(raw_value, BI_18)
        stage = OperationStage.load_or_create(self.store, event)

        if from_address == ZERO_ADDRESS:
            pair.total_supply = pair.total_supply + value
            self.store.save(pair)

            if not stage.has_open_mint():
                mint = stage.open_mint(Mint(
                    id=stage.next_id("mints"),
                    transaction=stage.tx_hash,
                    timestamp=stage.timestamp,
                    pair=pair.id,
                    token0=pair.token0,
                    token1=pair.token1,
                    to=to_address,
                    liquidity=value,
                ))
                self.log_debug("Mint opened",
                               tx_hash=event.tx_hash,
                               pair=pair.id,
                               log_index=event.log_index,
                               entity_id=mint.id)

        # direct send of pool tokens to the pair ahead of a burn
        if to_address == pair.id:
            burn = stage.open_burn(Burn(
                id=stage.next_id("burns"),
                transaction=stage.tx_hash,
                timestamp=stage.timestamp,
                pair=pair.id,
                token0=pair.token0,
                token1=pair.token1,
                liquidity=value,
                sender=from_address,
                to=to_address,
                needs_complete=True,
            ))
            self.log_debug("Burn opened by direct send",
                           tx_hash=event.tx_hash,
                           pair=pair.id,
                           log_index=event.log_index,
                           entity_id=burn.id)

        if to_address == ZERO_ADDRESS and from_address == pair.id:
            pair.total_supply = pair.total_supply - value
            self.store.save(pair)
            self._finalize_burn(stage, pair, value, event)

        stage.save()

    def _finalize_burn(self, stage: OperationStage, pair: Pair, value: Decimal,
                       event: PairTransfer) -> Burn:
        burn = stage.pending_burn()
        reused = burn is not None

        if burn is None:
            burn = Burn(
                id=stage.next_id("burns"),
                transaction=stage.tx_hash,
                timestamp=stage.timestamp,
                pair=pair.id,
                token0=pair.token0,
                token1=pair.token1,
                liquidity=value,
                needs_complete=False,
            )
        else:
            burn.needs_complete = False

        # An unfinished mint right before the burning transfer is the
        # protocol fee minted during the withdrawal, not a user deposit.
        if stage.has_open_mint():
            fee_mint = stage.discard_last_mint()
            burn.fee_to = fee_mint.to
            burn.fee_liquidity = fee_mint.liquidity
            self.log_debug("Fee mint folded into burn",
                           tx_hash=event.tx_hash,
                           pair=pair.id,
                           log_index=event.log_index,
                           entity_id=burn.id,
                           fee_liquidity=str(fee_mint.liquidity))

        if reused:
            stage.replace_last_burn(burn)
        else:
            stage.open_burn(burn)
        return burn

    # === Sync ===

    @with_decimal_context
    def handle_sync(self, event: PairSync) -> None:
        pair, token0, token1 = self._load_pair_tokens(event.address)
        factory = self.store.get(Factory, self.factory_address)

        # remove this pair's previous contribution before recomputing it
        factory.total_liquidity_native = factory.total_liquidity_native - pair.tracked_reserve_native
        token0.total_liquidity = token0.total_liquidity - pair.reserve0
        token1.total_liquidity = token1.total_liquidity - pair.reserve1

        pair.reserve0 = convert_token_to_decimal(event.reserve0, token0.decimals)
        pair.reserve1 = convert_token_to_decimal(event.reserve1, token1.decimals)
        pair.token0_price = safe_div(pair.reserve0, pair.reserve1)
        pair.token1_price = safe_div(pair.reserve1, pair.reserve0)
        self.store.save(pair)

        # the reference pair may be the one that just moved
        bundle = self.store.get(Bundle, BUNDLE_ID)
        bundle.native_price = self.valuation.native_price_in_usd()
        self.store.save(bundle)

        token0.derived_native = self.valuation.derived_native_per_token(token0)
        token0.derived_usd = token0.derived_native * bundle.native_price
        self.store.save(token0)

        token1.derived_native = self.valuation.derived_native_per_token(token1)
        token1.derived_usd = token1.derived_native * bundle.native_price
        self.store.save(token1)

        # zero when neither token is whitelisted
        tracked_liquidity_usd = self.valuation.tracked_liquidity_usd(
            bundle, pair.reserve0, token0, pair.reserve1, token1
        )
        tracked_liquidity_native = safe_div(tracked_liquidity_usd, bundle.native_price)

        pair.tracked_reserve_native = tracked_liquidity_native
        pair.reserve_native = (
            pair.reserve0 * token0.derived_native + pair.reserve1 * token1.derived_native
        )
        pair.reserve_usd = pair.reserve_native * bundle.native_price

        factory.total_liquidity_native = factory.total_liquidity_native + tracked_liquidity_native
        factory.total_liquidity_usd = factory.total_liquidity_native * bundle.native_price

        token0.total_liquidity = token0.total_liquidity + pair.reserve0
        token1.total_liquidity = token1.total_liquidity + pair.reserve1

        self.store.save(pair)
        self.store.save(factory)
        self.store.save(token0)
        self.store.save(token1)

        self.log_debug("Pair synced",
                       tx_hash=event.tx_hash,
                       pair=pair.id,
                       block_number=event.block_number,
                       reserve0=str(pair.reserve0),
                       reserve1=str(pair.reserve1),
                       native_price=str(bundle.native_price))

    # === Mint / Burn ===

    def _record_liquidity_event(self, pair: Pair, token0: Token, token1: Token,
                                amount0: Decimal, amount1: Decimal) -> Decimal:
        """Count one transaction on every aggregate and value the amounts in USD."""
        factory = self.store.get(Factory, self.factory_address)
        bundle = self.store.get(Bundle, BUNDLE_ID)

        token0.total_transactions += 1
        token1.total_transactions += 1

        amount_usd = (
            token1.derived_native * amount1 + token0.derived_native * amount0
        ) * bundle.native_price

        pair.total_transactions += 1
        factory.total_transactions += 1

        self.store.save(token0)
        self.store.save(token1)
        self.store.save(pair)
        self.store.save(factory)
        return amount_usd

    def _update_buckets(self, pair: Pair, token0: Token, token1: Token, timestamp: int):
        factory = self.store.get(Factory, self.factory_address)
        bundle = self.store.get(Bundle, BUNDLE_ID)

        return (
            self.aggregator.update_pair_day_data(pair, timestamp),
            self.aggregator.update_pair_hour_data(pair, timestamp),
            self.aggregator.update_factory_day_data(factory, timestamp),
            self.aggregator.update_token_day_data(token0, bundle, timestamp),
            self.aggregator.update_token_day_data(token1, bundle, timestamp),
        )

    @with_decimal_context
    def handle_mint(self, event: PairMint) -> None:
        stage = OperationStage.load(self.store, event.tx_hash)
        mint = stage.last_mint() if stage is not None else None
        if mint is None:
            self.log_error("Mint event without a staged mint",
                           tx_hash=event.tx_hash,
                           pair=event.address,
                           log_index=event.log_index)
            raise ReconciliationError(f"No staged mint for transaction {event.tx_hash}")

        pair, token0, token1 = self._load_pair_tokens(event.address)
        if mint.pair != pair.id:
            self.log_warning("Staged mint belongs to another pair",
                             tx_hash=event.tx_hash,
                             pair=pair.id,
                             entity_id=mint.id)

        amount0 = convert_token_to_decimal(event.amount0, token0.decimals)
        amount1 = convert_token_to_decimal(event.amount1, token1.decimals)
        amount_usd = self._record_liquidity_event(pair, token0, token1, amount0, amount1)

        mint.sender = EvmAddress(event.sender.lower())
        mint.amount0 = amount0
        mint.amount1 = amount1
        mint.log_index = event.log_index
        mint.amount_usd = amount_usd
        self.store.save(mint)

        self._update_buckets(pair, token0, token1, event.timestamp)

        self.log_debug("Mint completed",
                       tx_hash=event.tx_hash,
                       pair=pair.id,
                       log_index=event.log_index,
                       entity_id=mint.id,
                       amount_usd=str(amount_usd))

    @with_decimal_context
    def handle_burn(self, event: PairBurn) -> None:
        stage = OperationStage.load(self.store, event.tx_hash)
        if stage is None:
            self.log_warning("Burn event without a transaction, skipping",
                             tx_hash=event.tx_hash,
                             pair=event.address,
                             log_index=event.log_index)
            return

        burn = stage.last_burn()
        if burn is None:
            self.log_error("Burn event without a staged burn",
                           tx_hash=event.tx_hash,
                           pair=event.address,
                           log_index=event.log_index)
            raise ReconciliationError(f"No staged burn for transaction {event.tx_hash}")

        pair, token0, token1 = self._load_pair_tokens(event.address)
        amount0 = convert_token_to_decimal(event.amount0, token0.decimals)
        amount1 = convert_token_to_decimal(event.amount1, token1.decimals)
        amount_usd = self._record_liquidity_event(pair, token0, token1, amount0, amount1)

        burn.sender = EvmAddress(event.sender.lower())
        burn.to = EvmAddress(event.to.lower())
        burn.amount0 = amount0
        burn.amount1 = amount1
        burn.log_index = event.log_index
        burn.amount_usd = amount_usd
        self.store.save(burn)

        self._update_buckets(pair, token0, token1, event.timestamp)

        self.log_debug("Burn completed",
                       tx_hash=event.tx_hash,
                       pair=pair.id,
                       log_index=event.log_index,
                       entity_id=burn.id,
                       amount_usd=str(amount_usd))

    # === Swap ===

    @with_decimal_context
    def handle_swap(self, event: PairSwap) -> None:
        pair, token0, token1 = self._load_pair_tokens(event.address)

        amount0_in = convert_token_to_decimal(event.amount0_in, token0.decimals)
        amount1_in = convert_token_to_decimal(event.amount1_in, token1.decimals)
        amount0_out = convert_token_to_decimal(event.amount0_out, token0.decimals)
        amount1_out = convert_token_to_decimal(event.amount1_out, token1.decimals)

        amount0_total = amount0_out + amount0_in
        amount1_total = amount1_out + amount1_in

        bundle = self.store.get(Bundle, BUNDLE_ID)

        derived_amount_native = (
            token1.derived_native * amount1_total + token0.derived_native * amount0_total
        ) / TWO_BD
        derived_amount_usd = derived_amount_native * bundle.native_price

        # only whitelisted sides count towards tracked volume
        tracked_amount_usd = self.valuation.tracked_volume_usd(
            bundle, amount0_total, token0, amount1_total, token1
        )
        tracked_amount_native = safe_div(tracked_amount_usd, bundle.native_price)

        token0.trade_volume = token0.trade_volume + amount0_total
        token0.trade_volume_usd = token0.trade_volume_usd + tracked_amount_usd
        token0.untracked_volume_usd = token0.untracked_volume_usd + derived_amount_usd
        token0.total_transactions += 1

        token1.trade_volume = token1.trade_volume + amount1_total
        token1.trade_volume_usd = token1.trade_volume_usd + tracked_amount_usd
        token1.untracked_volume_usd = token1.untracked_volume_usd + derived_amount_usd
        token1.total_transactions += 1

        pair.volume_usd = pair.volume_usd + tracked_amount_usd
        pair.volume_token0 = pair.volume_token0 + amount0_total
        pair.volume_token1 = pair.volume_token1 + amount1_total
        pair.untracked_volume_usd = pair.untracked_volume_usd + derived_amount_usd
        pair.total_transactions += 1

        factory = self.store.get(Factory, self.factory_address)
        factory.total_volume_usd = factory.total_volume_usd + tracked_amount_usd
        factory.total_volume_native = factory.total_volume_native + tracked_amount_native
        factory.untracked_volume_usd = factory.untracked_volume_usd + derived_amount_usd
        factory.total_transactions += 1

        self.store.save(pair)
        self.store.save(token0)
        self.store.save(token1)
        self.store.save(factory)

        stage = OperationStage.load_or_create(self.store, event)
        swap = stage.append_swap(Swap(
            id=stage.next_id("swaps"),
            transaction=stage.tx_hash,
            timestamp=stage.timestamp,
            pair=pair.id,
            token0=pair.token0,
            token1=pair.token1,
            sender=EvmAddress(event.sender.lower()),
            from_address=EvmAddress(event.tx_from.lower()),
            to=EvmAddress(event.to.lower()),
            amount0_in=amount0_in,
            amount1_in=amount1_in,
            amount0_out=amount0_out,
            amount1_out=amount1_out,
            amount_usd=tracked_amount_usd if tracked_amount_usd != ZERO_BD else derived_amount_usd,
            log_index=event.log_index,
        ))

        pair_day, pair_hour, factory_day, token0_day, token1_day = self._update_buckets(
            pair, token0, token1, event.timestamp
        )

        factory_day.daily_volume_usd = factory_day.daily_volume_usd + tracked_amount_usd
        factory_day.daily_volume_native = factory_day.daily_volume_native + tracked_amount_native
        factory_day.daily_volume_untracked = factory_day.daily_volume_untracked + derived_amount_usd
        self.store.save(factory_day)

        pair_day.daily_volume_token0 = pair_day.daily_volume_token0 + amount0_total
        pair_day.daily_volume_token1 = pair_day.daily_volume_token1 + amount1_total
        pair_day.daily_volume_usd = pair_day.daily_volume_usd + tracked_amount_usd
        self.store.save(pair_day)

        pair_hour.hourly_volume_token0 = pair_hour.hourly_volume_token0 + amount0_total
        pair_hour.hourly_volume_token1 = pair_hour.hourly_volume_token1 + amount1_total
        pair_hour.hourly_volume_usd = pair_hour.hourly_volume_usd + tracked_amount_usd
        self.store.save(pair_hour)

        for token_day, token, amount_total in (
            (token0_day, token0, amount0_total),
            (token1_day, token1, amount1_total),
        ):
            volume_native = amount_total * token.derived_native
            token_day.daily_volume_token = token_day.daily_volume_token + amount_total
            token_day.daily_volume_native = token_day.daily_volume_native + volume_native
            token_day.daily_volume_usd = token_day.daily_volume_usd + volume_native * bundle.native_price
            self.store.save(token_day)

        self.log_debug("Swap recorded",
                       tx_hash=event.tx_hash,
                       pair=pair.id,
                       log_index=event.log_index,
                       entity_id=swap.id,
                       amount_usd=str(swap.amount_usd))

# exchange_indexer/transform/aggregation.py

from ..core.logging import LoggingMixin
from ..storage.interfaces import EntityStore
from ..types import (
    Bundle,
    Factory,
    FactoryDayData,
    Pair,
    PairDayData,
    PairHourData,
    Token,
    TokenDayData,
)
from ..utils.amounts import with_decimal_context
from ..utils.periods import PeriodType, bucket_id


class BucketAggregator(LoggingMixin):
    """
    Day and hour rollups for pairs, tokens and the factory.

    A bucket is created on the first event that falls into its window.
    Snapshot fields are overwritten with the owner's current state on every
    touch; accumulators only grow until the window rolls over. Each update
    counts one transaction and returns the saved bucket so the swap handler
    can add volume to it.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    def update_pair_day_data(self, pair: Pair, timestamp: int) -> PairDayData:
        day = PeriodType.ONE_DAY
        day_pair_id = bucket_id(pair.id, day, timestamp)

        bucket = self.store.load(PairDayData, day_pair_id)
        if bucket is None:
            bucket = PairDayData(
                id=day_pair_id,
                date=day.bucket_start(timestamp),
                pair=pair.id,
                token0=pair.token0,
                token1=pair.token1,
            )
            self.log_debug("Pair day bucket created", pair=pair.id, entity_id=day_pair_id)

        bucket.total_supply = pair.total_supply
        bucket.reserve0 = pair.reserve0
        bucket.reserve1 = pair.reserve1
        bucket.reserve_usd = pair.reserve_usd
        bucket.daily_txns += 1
        self.store.save(bucket)
        return bucket

    def update_pair_hour_data(self, pair: Pair, timestamp: int) -> PairHourData:
        hour = PeriodType.ONE_HOUR
        hour_pair_id = bucket_id(pair.id, hour, timestamp)

        bucket = self.store.load(PairHourData, hour_pair_id)
        if bucket is None:
            bucket = PairHourData(
                id=hour_pair_id,
                hour_start_unix=hour.bucket_start(timestamp),
                pair=pair.id,
            )
            self.log_debug("Pair hour bucket created", pair=pair.id, entity_id=hour_pair_id)

        bucket.total_supply = pair.total_supply
        bucket.reserve0 = pair.reserve0
        bucket.reserve1 = pair.reserve1
        bucket.reserve_usd = pair.reserve_usd
        bucket.hourly_txns += 1
        self.store.save(bucket)
        return bucket

    def update_factory_day_data(self, factory: Factory, timestamp: int) -> FactoryDayData:
        day = PeriodType.ONE_DAY
        day_factory_id = bucket_id(factory.id, day, timestamp)

        bucket = self.store.load(FactoryDayData, day_factory_id)
        if bucket is None:
            bucket = FactoryDayData(
                id=day_factory_id,
                date=day.bucket_start(timestamp),
                factory=factory.id,
            )
            self.log_debug("Factory day bucket created", entity_id=day_factory_id)

        bucket.total_liquidity_usd = factory.total_liquidity_usd
        bucket.total_liquidity_native = factory.total_liquidity_native
        bucket.total_volume_usd = factory.total_volume_usd
        bucket.total_volume_native = factory.total_volume_native
        bucket.tx_count = factory.total_transactions
        self.store.save(bucket)
        return bucket

    @with_decimal_context
    def update_token_day_data(self, token: Token, bundle: Bundle, timestamp: int) -> TokenDayData:
        day = PeriodType.ONE_DAY
        token_day_id = bucket_id(token.id, day, timestamp)

        bucket = self.store.load(TokenDayData, token_day_id)
        if bucket is None:
            bucket = TokenDayData(
                id=token_day_id,
                date=day.bucket_start(timestamp),
                token=token.id,
            )
            self.log_debug("Token day bucket created", token=token.id, entity_id=token_day_id)

        bucket.price_usd = token.derived_native * bundle.native_price
        bucket.total_liquidity_token = token.total_liquidity
        bucket.total_liquidity_native = token.total_liquidity * token.derived_native
        bucket.total_liquidity_usd = bucket.total_liquidity_native * bundle.native_price
        bucket.daily_txns += 1
        self.store.save(bucket)
        return bucket

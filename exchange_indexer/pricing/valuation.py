# exchange_indexer/pricing/valuation.py

from decimal import Decimal
from typing import List

from ..clients.interfaces import ChainReaderInterface
from ..core.logging import LoggingMixin
from ..storage.interfaces import EntityStore
from ..types import (
    Bundle,
    EvmAddress,
    Pair,
    PricingConfig,
    Token,
    ZERO_ADDRESS,
    ZERO_BD,
    ONE_BD,
    TWO_BD,
)
from ..utils.amounts import with_decimal_context


class ValuationEngine(LoggingMixin):
    """
    Native-currency and USD valuation of tokens and amounts.

    The native price in USD is read from one configured stable/native
    reference pair. Every other token is priced transitively through the
    first whitelisted token it shares a sufficiently liquid pair with.
    Tracked volume and liquidity only count the whitelisted side(s) of a
    pair, which filters long-tail tokens with manipulable prices out of the
    global totals.
    """

    def __init__(self, store: EntityStore, chain: ChainReaderInterface, config: PricingConfig):
        self.store = store
        self.chain = chain
        self.native_token = EvmAddress(config.native_token.lower())
        self.reference_pair = EvmAddress(config.reference_pair.lower())
        self.whitelist: List[EvmAddress] = [EvmAddress(a.lower()) for a in config.whitelist]
        self._whitelist_set = frozenset(self.whitelist)
        self.minimum_liquidity_threshold = Decimal(config.minimum_liquidity_threshold_native)

        self.log_info("ValuationEngine initialized",
                      native_token=self.native_token,
                      reference_pair=self.reference_pair,
                      whitelist_size=len(self.whitelist),
                      minimum_liquidity_threshold=str(self.minimum_liquidity_threshold))

    def is_whitelisted(self, token: EvmAddress) -> bool:
        return token in self._whitelist_set

    def native_price_in_usd(self) -> Decimal:
        reference = self.store.load(Pair, self.reference_pair)
        if reference is None:
            return ZERO_BD
        return reference.token0_price

    @with_decimal_context
    def derived_native_per_token(self, token: Token) -> Decimal:
        if token.id == self.native_token:
            return ONE_BD

        for whitelisted in self.whitelist:
            pair_address = self.chain.get_pair_address(token.id, whitelisted)
            if pair_address == ZERO_ADDRESS:
                continue

            pair = self.store.get(Pair, pair_address)
            # gated on the tracked reserve, not reserve_native: a pool whose
            # native value rests on untracked tokens must not set a price
            if pair.tracked_reserve_native <= self.minimum_liquidity_threshold:
                continue

            if pair.token0 == token.id:
                # token1 per token x native per token1
                token1 = self.store.get(Token, pair.token1)
                return pair.token1_price * token1.derived_native
            if pair.token1 == token.id:
                token0 = self.store.get(Token, pair.token0)
                return pair.token0_price * token0.derived_native

        return ZERO_BD

    @with_decimal_context
    def tracked_volume_usd(self, bundle: Bundle,
                           amount0: Decimal, token0: Token,
                           amount1: Decimal, token1: Token) -> Decimal:
        """
        USD volume attributable to whitelisted tokens.

        Both whitelisted: average of the two sides. One whitelisted: that
        side alone. Neither: zero.
        """
        price0 = token0.derived_native * bundle.native_price
        price1 = token1.derived_native * bundle.native_price
        whitelisted0 = self.is_whitelisted(token0.id)
        whitelisted1 = self.is_whitelisted(token1.id)

        if whitelisted0 and whitelisted1:
            return (amount0 * price0 + amount1 * price1) / TWO_BD
        if whitelisted0:
            return amount0 * price0
        if whitelisted1:
            return amount1 * price1
        return ZERO_BD

    @with_decimal_context
    def tracked_liquidity_usd(self, bundle: Bundle,
                              amount0: Decimal, token0: Token,
                              amount1: Decimal, token1: Token) -> Decimal:
        """
        USD liquidity attributable to whitelisted tokens.

        Both whitelisted: sum of the two sides. One whitelisted: twice that
        side, standing in for the unpriced half. Neither: zero.
        """
        price0 = token0.derived_native * bundle.native_price
        price1 = token1.derived_native * bundle.native_price
        whitelisted0 = self.is_whitelisted(token0.id)
        whitelisted1 = self.is_whitelisted(token1.id)

        if whitelisted0 and whitelisted1:
            return amount0 * price0 + amount1 * price1
        if whitelisted0:
            return amount0 * price0 * TWO_BD
        if whitelisted1:
            return amount1 * price1 * TWO_BD
        return ZERO_BD

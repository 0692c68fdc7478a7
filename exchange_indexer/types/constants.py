# exchange_indexer/types/constants.py

from decimal import Decimal

from .new import EvmAddress


ZERO_ADDRESS = EvmAddress("0x0000000000000000000000000000000000000000")

ZERO_BI = 0
ONE_BI = 1
BI_18 = 18

ZERO_BD = Decimal("0")
ONE_BD = Decimal("1")
TWO_BD = Decimal("2")

# liquidity tokens locked forever by the pair contract on its first mint
MINIMUM_LIQUIDITY = 1000

BUNDLE_ID = "1"

SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600

DEFAULT_TOKEN_DECIMALS = 18
UNKNOWN_TOKEN_METADATA = "unknown"

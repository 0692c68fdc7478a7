# exchange_indexer/utils/periods.py

import enum

from ..types.constants import SECONDS_PER_DAY, SECONDS_PER_HOUR


class PeriodType(enum.Enum):
    ONE_HOUR = "1hr"
    ONE_DAY = "1day"

    def seconds(self) -> int:
        """Get the duration of this period type in seconds"""
        durations = {
            PeriodType.ONE_HOUR: SECONDS_PER_HOUR,
            PeriodType.ONE_DAY: SECONDS_PER_DAY,
        }
        return durations[self]

    def bucket_index(self, timestamp: int) -> int:
        return timestamp // self.seconds()

    def bucket_start(self, timestamp: int) -> int:
        return self.bucket_index(timestamp) * self.seconds()


def bucket_id(owner_id: str, period_type: PeriodType, timestamp: int) -> str:
    return f"{owner_id}-{period_type.bucket_index(timestamp)}"

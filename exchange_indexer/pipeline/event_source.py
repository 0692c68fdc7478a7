# exchange_indexer/pipeline/event_source.py

"""
Readers for recorded event feeds.

A feed is JSON lines, one tagged event per line:

    {"type": "PairSync", "tx_hash": "0x..", "block_number": 1, ..., "reserve0": "1000"}
"""

from pathlib import Path
from typing import Iterable, Iterator, Union

import msgspec

from ..core.logging import IndexerLogger, log_with_context, ERROR
from ..types import ChainEventUnion, ChainEvent


_decoder = msgspec.json.Decoder(ChainEventUnion)


def decode_events(lines: Iterable[Union[str, bytes]]) -> Iterator[ChainEvent]:
    logger = IndexerLogger.get_logger('pipeline.event_source')

    for line_number, line in enumerate(lines, start=1):
        if isinstance(line, str):
            line = line.encode()
        if not line.strip():
            continue
        try:
            yield _decoder.decode(line)
        except msgspec.DecodeError as e:
            log_with_context(logger, ERROR, "Failed to decode event",
                             line_number=line_number,
                             error=str(e))
            raise


def load_events(path: Union[str, Path]) -> Iterator[ChainEvent]:
    with open(path, 'rb') as f:
        yield from decode_events(f)

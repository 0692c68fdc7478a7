# exchange_indexer/pipeline/__init__.py

from .indexing_pipeline import IndexingPipeline, PipelineStats
from .event_source import load_events, decode_events

__all__ = [
    "IndexingPipeline",
    "PipelineStats",
    "load_events",
    "decode_events",
]

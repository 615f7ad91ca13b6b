"""Network record and throughput providers."""

from pageweight.adapters.base import (
    RecordProvider,
    RecordSourceError,
    ThroughputEstimator,
    parse_record,
)
from pageweight.adapters.json_file import (
    FixedThroughputEstimator,
    JsonDocumentLoader,
    JsonRecordProvider,
    JsonThroughputEstimator,
)

__all__ = [
    "RecordProvider",
    "RecordSourceError",
    "ThroughputEstimator",
    "parse_record",
    "FixedThroughputEstimator",
    "JsonDocumentLoader",
    "JsonRecordProvider",
    "JsonThroughputEstimator",
]

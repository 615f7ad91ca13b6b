"""Analyzers for aggregating and scoring network payloads."""

from pageweight.analyzers.byte_weight import META, aggregate_records, compute_audit
from pageweight.analyzers.pipeline import AuditPipeline
from pageweight.analyzers.scoring import bytes_to_ms, compute_log_normal_score

__all__ = [
    "META",
    "AuditPipeline",
    "aggregate_records",
    "bytes_to_ms",
    "compute_audit",
    "compute_log_normal_score",
]

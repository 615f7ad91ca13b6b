"""Data models and schemas."""

from pageweight.models.schemas import (
    AuditMeta,
    AuditOutcome,
    ByteWeightItem,
    NetworkRecord,
    ResourceType,
    ScoreOptions,
)

__all__ = [
    "AuditMeta",
    "AuditOutcome",
    "ByteWeightItem",
    "NetworkRecord",
    "ResourceType",
    "ScoreOptions",
]

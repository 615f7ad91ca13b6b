"""Pydantic models for network records and audit results."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class ResourceType(str, Enum):
    """Resource classification of a network request."""

    DOCUMENT = "document"
    STYLESHEET = "stylesheet"
    IMAGE = "image"
    MEDIA = "media"
    FONT = "font"
    SCRIPT = "script"
    TEXTTRACK = "texttrack"
    XHR = "xhr"
    FETCH = "fetch"
    EVENTSOURCE = "eventsource"
    WEBSOCKET = "websocket"
    MANIFEST = "manifest"
    OTHER = "other"


class ItemType(str, Enum):
    """Semantic type of a table column."""

    URL = "url"
    BYTES = "bytes"
    MS = "ms"


class NetworkRecord(BaseModel):
    """A single observed network transfer."""

    url: str
    scheme: str = ""
    finished: bool = False
    transfer_size: int = Field(default=0, ge=0)
    resource_type: ResourceType = ResourceType.OTHER


# --- Audit Configuration ---


class ScoreOptions(BaseModel):
    """Calibration for the total byte weight audit."""

    # ~75th and ~90th percentiles of total page weight on HTTP Archive
    score_podr: float = Field(default=2500 * 1024, gt=0)
    score_median: float = Field(default=4000 * 1024, gt=0)
    # Based on HTTP Archive data, 170 KiB for a single script
    bundle_size_threshold: int = Field(default=170 * 1024, ge=0)
    top_n: int = Field(default=10, ge=1)

    @model_validator(mode="after")
    def _check_curve_anchors(self) -> "ScoreOptions":
        from pageweight.analyzers.scoring import log_normal_shape

        if self.score_podr >= self.score_median:
            raise ValueError("score_podr must be smaller than score_median")
        log_normal_shape(self.score_podr, self.score_median)
        return self


class AuditMeta(BaseModel):
    """Static description of an audit."""

    name: str
    description: str
    failure_description: str
    help_text: str
    score_display_mode: str = "numeric"
    required_artifacts: list[str] = Field(default_factory=list)


# --- Result Models ---


class ByteWeightItem(BaseModel):
    """Per-request contribution to the total page weight."""

    url: str
    total_bytes: int = Field(ge=0)
    total_ms: float = Field(default=0.0, ge=0)
    flagged: bool = False


class TableHeading(BaseModel):
    """Column description for a details table."""

    key: str
    item_type: ItemType
    text: str
    display_unit: str | None = None
    granularity: float | None = None


class TableDetails(BaseModel):
    """Tabular details payload handed to a report renderer."""

    type: str = "table"
    headings: list[TableHeading] = Field(default_factory=list)
    items: list[ByteWeightItem] = Field(default_factory=list)


class ByteWeightSummary(BaseModel):
    """Extended info block for programmatic consumers."""

    results: list[ByteWeightItem] = Field(default_factory=list)
    total_completed_requests: int = 0


class AuditOutcome(BaseModel):
    """Complete result of a single audit run."""

    score: float = Field(gt=0, le=1)
    raw_value: int = Field(ge=0)
    display_value: str
    details: TableDetails
    extended_info: ByteWeightSummary

    @property
    def top_results(self) -> list[ByteWeightItem]:
        """Largest requests, heaviest first."""
        return self.extended_info.results

    @property
    def total_completed_requests(self) -> int:
        """Number of requests that counted toward the total."""
        return self.extended_info.total_completed_requests

    def to_report(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return self.model_dump(mode="json", exclude_none=True)

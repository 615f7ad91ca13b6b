"""Abstract interfaces for the collaborators that feed an audit."""

import logging
from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import urlparse

from pydantic import ValidationError

from pageweight.models.schemas import NetworkRecord, ResourceType

logger = logging.getLogger(__name__)


class RecordProvider(ABC):
    """Base class for network record providers.

    A provider turns a reference to captured traffic (a file path, a URL)
    into the ordered list of records for the primary page load.
    """

    @abstractmethod
    async def get_network_records(self, source: str) -> list[NetworkRecord]:
        """Return network records for a traffic capture.

        Args:
            source: Reference to the captured traffic.

        Returns:
            Records in the order they were observed.

        Raises:
            RecordSourceError: If the source cannot be read or parsed.
        """
        ...


class ThroughputEstimator(ABC):
    """Base class for effective network throughput estimators."""

    @abstractmethod
    async def get_throughput(self, source: str) -> float | None:
        """Return the effective throughput in bytes per millisecond.

        Args:
            source: Reference to the captured traffic.

        Returns:
            Throughput, or None if it cannot be estimated.
        """
        ...


def parse_record(entry: dict[str, Any]) -> NetworkRecord:
    """Normalize a raw record dict into a NetworkRecord.

    Accepts both snake_case and camelCase keys. A missing or null transfer
    size counts as 0 bytes, and a missing scheme is taken from the URL.
    String flags such as "false" are parsed as booleans.

    Args:
        entry: Raw record data.

    Returns:
        NetworkRecord.

    Raises:
        RecordSourceError: If the entry has no URL or holds invalid values.
    """
    url = entry.get("url")
    if not url:
        raise RecordSourceError(f"Network record without url: {entry!r}")

    scheme = entry.get("scheme") or urlparse(url).scheme

    transfer_size = entry.get("transfer_size", entry.get("transferSize"))
    if transfer_size is None:
        logger.debug(f"No transfer size for {url}, counting as 0 bytes")
        transfer_size = 0
    try:
        transfer_size = max(0, int(transfer_size))
    except (TypeError, ValueError, OverflowError) as e:
        raise RecordSourceError(f"Invalid transfer size for {url}: {transfer_size!r}") from e

    raw_type = (
        entry.get("resource_type")
        or entry.get("resourceType")
        or entry.get("_resourceType")
        or ResourceType.OTHER.value
    )
    try:
        resource_type = ResourceType(str(raw_type).lower())
    except ValueError:
        resource_type = ResourceType.OTHER

    try:
        return NetworkRecord(
            url=url,
            scheme=scheme.lower(),
            finished=entry.get("finished") or False,
            transfer_size=transfer_size,
            resource_type=resource_type,
        )
    except ValidationError as e:
        raise RecordSourceError(f"Invalid network record for {url}: {e}") from e


class RecordSourceError(Exception):
    """Raised when network records or throughput cannot be loaded."""

    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source
        super().__init__(message)

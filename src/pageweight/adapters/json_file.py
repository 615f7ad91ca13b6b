"""Load network records and throughput from JSON documents.

A document is either a bare list of records or an object::

    {
      "records": [{"url": "...", "finished": true, "transferSize": 1024, ...}],
      "throughput": 1600.0
    }

Sources may be local paths or http(s) URLs.
"""

import asyncio
import json
import logging
import math
from pathlib import Path
from typing import Any

import httpx

from pageweight.adapters.base import (
    RecordProvider,
    RecordSourceError,
    ThroughputEstimator,
    parse_record,
)
from pageweight.models.schemas import NetworkRecord

logger = logging.getLogger(__name__)

RECORD_KEYS = ("records", "networkRecords", "network_records")


class JsonDocumentLoader:
    """Fetches and decodes JSON documents from disk or over HTTP.

    Concurrent loads of the same source share a single read, so the record
    provider and throughput estimator of one audit see the same snapshot.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        """Initialize the loader.

        Args:
            client: Optional httpx client for remote documents.
        """
        self._client = client
        self._pending: dict[str, asyncio.Task] = {}

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=30.0, follow_redirects=True)

    async def _fetch_text(self, url: str) -> str:
        """Fetch a remote document."""
        client = await self._get_client()
        try:
            response = await client.get(url)
            response.raise_for_status()
            return response.text
        finally:
            if self._client is None:
                await client.aclose()

    async def load(self, source: str) -> Any:
        """Load and decode a JSON document.

        Args:
            source: Local path or http(s) URL.

        Returns:
            Decoded JSON value. Callers sharing a read must not mutate it.

        Raises:
            RecordSourceError: If the document is not valid JSON.
            httpx.HTTPError: If a remote document cannot be fetched.
            OSError: If a local document cannot be read.
        """
        task = self._pending.get(source)
        if task is None:
            task = asyncio.ensure_future(self._read(source))
            self._pending[source] = task
            task.add_done_callback(lambda _: self._pending.pop(source, None))
        return await asyncio.shield(task)

    async def _read(self, source: str) -> Any:
        """Read and decode a document without sharing."""
        if source.startswith(("http://", "https://")):
            logger.debug(f"Fetching records document from {source}")
            text = await self._fetch_text(source)
        else:
            text = Path(source).read_text(encoding="utf-8")

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise RecordSourceError(f"Invalid JSON in {source}: {e}", source=source) from e


def _extract_records(document: Any, source: str) -> list[dict]:
    """Pull the raw record list out of a decoded document."""
    if isinstance(document, list):
        return document
    if isinstance(document, dict):
        for key in RECORD_KEYS:
            if isinstance(document.get(key), list):
                return document[key]
    raise RecordSourceError(f"No network records found in {source}", source=source)


class JsonRecordProvider(RecordProvider):
    """Provides network records from a JSON document."""

    def __init__(self, loader: JsonDocumentLoader | None = None) -> None:
        self.loader = loader or JsonDocumentLoader()

    async def get_network_records(self, source: str) -> list[NetworkRecord]:
        document = await self.loader.load(source)
        entries = _extract_records(document, source)

        records = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise RecordSourceError(f"Malformed record in {source}: {entry!r}", source=source)
            records.append(parse_record(entry))

        logger.debug(f"Loaded {len(records)} network records from {source}")
        return records


class JsonThroughputEstimator(ThroughputEstimator):
    """Reads a precomputed throughput (bytes/ms) from a JSON document.

    Returns None for bare record lists, documents without a throughput, and
    non-finite values such as NaN.
    """

    def __init__(self, loader: JsonDocumentLoader | None = None) -> None:
        self.loader = loader or JsonDocumentLoader()

    async def get_throughput(self, source: str) -> float | None:
        document = await self.loader.load(source)
        if not isinstance(document, dict):
            return None

        value = document.get("throughput")
        if value is None:
            return None
        try:
            throughput = float(value)
        except (TypeError, ValueError) as e:
            raise RecordSourceError(
                f"Invalid throughput in {source}: {value!r}", source=source
            ) from e

        if not math.isfinite(throughput):
            logger.warning(f"Ignoring non-finite throughput {value!r} in {source}")
            return None
        return throughput


class FixedThroughputEstimator(ThroughputEstimator):
    """Returns the same throughput for every source."""

    def __init__(self, throughput: float | None) -> None:
        self.throughput = throughput

    async def get_throughput(self, source: str) -> float | None:
        return self.throughput

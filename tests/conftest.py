"""Shared fixtures."""

import pytest

from pageweight.models.schemas import NetworkRecord, ResourceType


@pytest.fixture
def make_record():
    """Factory for finished http records."""

    def _make(
        url: str = "https://example.com/a.js",
        transfer_size: int = 1000,
        resource_type: ResourceType = ResourceType.SCRIPT,
        scheme: str = "https",
        finished: bool = True,
    ) -> NetworkRecord:
        return NetworkRecord(
            url=url,
            scheme=scheme,
            finished=finished,
            transfer_size=transfer_size,
            resource_type=resource_type,
        )

    return _make

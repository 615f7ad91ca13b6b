"""Gather audit inputs and run the total byte weight audit."""

import asyncio
import logging

from pageweight.adapters.base import RecordProvider, ThroughputEstimator
from pageweight.analyzers.byte_weight import compute_audit
from pageweight.models.schemas import AuditOutcome, ScoreOptions

logger = logging.getLogger(__name__)


class AuditPipeline:
    """Orchestrates a single audit run.

    Pipeline stages:
    1. Request network records and throughput concurrently
    2. Aggregate and score the records
    """

    def __init__(
        self,
        record_provider: RecordProvider,
        throughput_estimator: ThroughputEstimator,
        options: ScoreOptions | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            record_provider: Source of network records.
            throughput_estimator: Source of the effective throughput.
            options: Scoring calibration. Defaults to ScoreOptions().
        """
        self.record_provider = record_provider
        self.throughput_estimator = throughput_estimator
        self.options = options or ScoreOptions()

    async def run(self, source: str) -> AuditOutcome:
        """Audit the traffic captured in source.

        Errors from either collaborator propagate unchanged; there is no
        partial result.

        Args:
            source: Reference to the captured traffic.

        Returns:
            AuditOutcome for the page load.
        """
        logger.debug(f"Gathering audit inputs from {source}")
        records, throughput = await asyncio.gather(
            self.record_provider.get_network_records(source),
            self.throughput_estimator.get_throughput(source),
        )
        return compute_audit(records, throughput, self.options)

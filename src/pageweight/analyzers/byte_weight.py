"""Total byte weight audit: how heavy is the page's network payload."""

import logging
from collections.abc import Iterable

from pageweight.analyzers.scoring import (
    bytes_to_ms,
    compute_log_normal_score,
    has_throughput,
)
from pageweight.formatting import format_bytes_to_kb
from pageweight.models.schemas import (
    AuditMeta,
    AuditOutcome,
    ByteWeightItem,
    ByteWeightSummary,
    ItemType,
    NetworkRecord,
    ResourceType,
    ScoreOptions,
    TableDetails,
    TableHeading,
)

logger = logging.getLogger(__name__)

# Data URIs are already counted inside the resource that embeds them
DATA_SCHEME = "data"

DEFAULT_BUNDLE_SIZE_THRESHOLD = 170 * 1024

META = AuditMeta(
    name="total-byte-weight",
    description="Avoids enormous network payloads",
    failure_description="Has enormous network payloads",
    help_text=(
        "Large network payloads cost users real money and are highly correlated with "
        "long load times. [Learn more]"
        "(https://developers.google.com/web/tools/lighthouse/audits/network-payloads)."
    ),
    score_display_mode="numeric",
    required_artifacts=["devtoolsLogs"],
)

HEADINGS = [
    TableHeading(key="url", item_type=ItemType.URL, text="URL"),
    TableHeading(
        key="total_bytes",
        item_type=ItemType.BYTES,
        text="Total Size",
        display_unit="kb",
        granularity=1,
    ),
    TableHeading(key="total_ms", item_type=ItemType.MS, text="Transfer Time"),
]


def has_exceeded_js_bundle_size(
    record: NetworkRecord,
    threshold: int = DEFAULT_BUNDLE_SIZE_THRESHOLD,
) -> bool:
    """Check whether a record is a script larger than the bundle size limit."""
    return record.resource_type == ResourceType.SCRIPT and record.transfer_size > threshold


def is_countable(record: NetworkRecord) -> bool:
    """Check whether a record has a byte count that belongs in the total.

    Unfinished requests have no reliable transfer size.
    """
    return record.scheme != DATA_SCHEME and record.finished


def aggregate_records(
    records: Iterable[NetworkRecord],
    throughput: float | None,
    bundle_size_threshold: int = DEFAULT_BUNDLE_SIZE_THRESHOLD,
) -> tuple[list[ByteWeightItem], int]:
    """Filter records and compute per-request results.

    Args:
        records: Network records in the order they were observed.
        throughput: Effective throughput in bytes/ms. Transfer times are 0 when
            this is missing, not finite, or not positive.
        bundle_size_threshold: Script size in bytes above which a request is flagged.

    Returns:
        Tuple of (results in encounter order, total bytes over all results).
    """
    results: list[ByteWeightItem] = []
    total_bytes = 0

    for record in records:
        if not is_countable(record):
            logger.debug(
                f"Skipping {record.url} (scheme={record.scheme!r}, finished={record.finished})"
            )
            continue

        item = ByteWeightItem(
            url=record.url,
            total_bytes=record.transfer_size,
            total_ms=bytes_to_ms(record.transfer_size, throughput),
            flagged=has_exceeded_js_bundle_size(record, bundle_size_threshold),
        )
        total_bytes += item.total_bytes
        results.append(item)

    return results, total_bytes


def rank_results(results: list[ByteWeightItem], top_n: int = 10) -> list[ByteWeightItem]:
    """Return the heaviest results first, keeping encounter order for ties."""
    return sorted(results, key=lambda item: item.total_bytes, reverse=True)[:top_n]


def compute_audit(
    records: Iterable[NetworkRecord],
    throughput: float | None,
    options: ScoreOptions | None = None,
) -> AuditOutcome:
    """Run the total byte weight audit over a set of network records.

    Args:
        records: Network records for the page load.
        throughput: Effective throughput in bytes/ms, used only for transfer times.
        options: Scoring calibration. Defaults to ScoreOptions().

    Returns:
        AuditOutcome with score, totals, and a details table of the largest requests.
    """
    options = options or ScoreOptions()

    if not has_throughput(throughput):
        logger.warning(f"Throughput unavailable ({throughput!r}), transfer times reported as 0")

    results, total_bytes = aggregate_records(
        records, throughput, options.bundle_size_threshold
    )
    total_completed_requests = len(results)
    top_results = rank_results(results, options.top_n)

    score = compute_log_normal_score(total_bytes, options.score_podr, options.score_median)

    flagged = sum(1 for item in results if item.flagged)
    logger.info(
        f"{META.name}: {total_completed_requests} requests, {total_bytes} bytes, "
        f"score={score:.3f}, {flagged} oversized scripts"
    )

    return AuditOutcome(
        score=score,
        raw_value=total_bytes,
        display_value=f"Total size was {format_bytes_to_kb(total_bytes, 1)}",
        details=TableDetails(headings=HEADINGS, items=top_results),
        extended_info=ByteWeightSummary(
            results=top_results,
            total_completed_requests=total_completed_requests,
        ),
    )

"""Log-normal scoring curve shared by "smaller is better" metrics."""

import math
import sys


def has_throughput(throughput: float | None) -> bool:
    """Check whether a throughput estimate is usable (finite and positive)."""
    return throughput is not None and math.isfinite(throughput) and throughput > 0


def log_normal_shape(podr: float, median: float) -> float:
    """Derive the distribution shape from the two calibration anchors.

    The shape places the point of diminishing returns where the curve's
    second derivative peaks, so scores fall off fastest just past it.

    Raises:
        ValueError: If the anchors are too close together to define a curve.
    """
    log_ratio = math.log(podr / median)
    discriminant = max(0.0, (log_ratio - 3) ** 2 - 8)
    radicand = max(0.0, 1 - 3 * log_ratio - math.sqrt(discriminant))
    shape = math.sqrt(radicand) / 2
    if shape <= 0:
        raise ValueError(f"podr ({podr}) is too close to median ({median})")
    return shape


def compute_log_normal_score(value: float, podr: float, median: float) -> float:
    """Map a raw measurement onto a 0-1 score.

    Args:
        value: Measured value. Lower is better.
        podr: Point of diminishing returns, where the score starts dropping sharply.
        median: Value that maps to a score of 0.5.

    Returns:
        Score in (0, 1]. 1.0 for values <= 0, strictly decreasing above that.

    Raises:
        ValueError: If the anchors are not positive, podr >= median, or the
            anchors are too close together.
    """
    if podr <= 0 or median <= 0:
        raise ValueError(f"Curve anchors must be positive (podr={podr}, median={median})")
    if podr >= median:
        raise ValueError(f"podr ({podr}) must be smaller than median ({median})")

    shape = log_normal_shape(podr, median)
    if value <= 0:
        return 1.0

    standardized = (math.log(value) - math.log(median)) / (math.sqrt(2) * shape)
    score = math.erfc(standardized) / 2

    # erfc underflows for absurdly large inputs
    return min(1.0, max(score, sys.float_info.min))


def bytes_to_ms(num_bytes: int, throughput: float | None) -> float:
    """Estimate transfer time for a byte count.

    Args:
        num_bytes: Bytes transferred.
        throughput: Effective throughput in bytes per millisecond.

    Returns:
        Milliseconds, or 0.0 when throughput is missing, not finite, or not positive.
    """
    if not has_throughput(throughput):
        return 0.0
    return num_bytes / throughput

"""Environment-driven configuration."""

import os

from pageweight.models.schemas import ScoreOptions

ENV_SCORE_PODR = "PAGEWEIGHT_SCORE_PODR"
ENV_SCORE_MEDIAN = "PAGEWEIGHT_SCORE_MEDIAN"
ENV_BUNDLE_THRESHOLD = "PAGEWEIGHT_BUNDLE_THRESHOLD"
ENV_THROUGHPUT = "PAGEWEIGHT_THROUGHPUT"


def _env_number(name: str) -> float | None:
    """Read a numeric environment variable, None if unset or empty."""
    value = os.environ.get(name, "").strip()
    if not value:
        return None
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e


def load_score_options(
    score_podr: float | None = None,
    score_median: float | None = None,
    bundle_size_threshold: int | None = None,
) -> ScoreOptions:
    """Build ScoreOptions from explicit values, then environment, then defaults.

    Raises:
        ValueError: If an environment value is not numeric.
        pydantic.ValidationError: If the resulting options are inconsistent.
    """
    overrides = {
        "score_podr": score_podr if score_podr is not None else _env_number(ENV_SCORE_PODR),
        "score_median": score_median if score_median is not None else _env_number(ENV_SCORE_MEDIAN),
        "bundle_size_threshold": (
            bundle_size_threshold
            if bundle_size_threshold is not None
            else _env_number(ENV_BUNDLE_THRESHOLD)
        ),
    }
    if overrides["bundle_size_threshold"] is not None:
        overrides["bundle_size_threshold"] = int(overrides["bundle_size_threshold"])
    return ScoreOptions(**{k: v for k, v in overrides.items() if v is not None})


def load_throughput(throughput: float | None = None) -> float | None:
    """Resolve a fixed throughput override (bytes/ms) from argument or environment."""
    if throughput is not None:
        return throughput
    return _env_number(ENV_THROUGHPUT)

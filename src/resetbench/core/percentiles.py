"""Nearest-rank percentiles over duration samples."""

from __future__ import annotations

import math
from typing import Sequence

from resetbench.models.job import PercentileReport

REPORT_PERCENTILES = (50, 90, 99)


def nearest_rank_percentile(sorted_values: Sequence[float], p: float) -> float:
    """Return the value at rank ceil(count * p / 100), 1-indexed, minimum rank 1.

    ``sorted_values`` must be ascending. No interpolation between ranks.
    """
    if not sorted_values:
        raise ValueError("nearest_rank_percentile needs at least one value")
    if not 0 < p <= 100:
        raise ValueError(f"percentile must be in (0, 100], got {p}")
    rank = max(math.ceil(len(sorted_values) * p / 100), 1)
    return sorted_values[rank - 1]


def compute_report(durations: Sequence[float]) -> PercentileReport | None:
    """P50/P90/P99 over ``durations``; None when there is no data."""
    if not durations:
        return None
    values = sorted(durations)
    p50, p90, p99 = (nearest_rank_percentile(values, p) for p in REPORT_PERCENTILES)
    return PercentileReport(count=len(values), p50=p50, p90=p90, p99=p99)

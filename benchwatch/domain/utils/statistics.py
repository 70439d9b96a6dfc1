"""
Latency distribution statistics.

Computes descriptive statistics over successful probe latencies. All
calculations are deterministic; percentiles use the nearest-rank index on the
sorted samples so identical sample multisets always yield identical figures.
"""

import logging
import statistics
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)


@dataclass
class LatencyDistribution:
    """
    Container for latency statistics in milliseconds.

    Attributes
    ----------
    mean : float
        Average latency
    median : float
        Middle value (robust to outliers)
    min : float
        Fastest sample
    max : float
        Slowest sample
    p95 : float
        95th percentile (SLA threshold)
    p99 : float
        99th percentile (high-confidence upper bound)
    count : int
        Number of samples
    """

    mean: float = 0.0
    median: float = 0.0
    min: float = 0.0
    max: float = 0.0
    p95: float = 0.0
    p99: float = 0.0
    count: int = 0


def compute_latency_distribution(samples: List[float]) -> LatencyDistribution:
    """
    Compute the latency distribution of a list of samples.

    Parameters
    ----------
    samples : List[float]
        Elapsed times in milliseconds, in any order.

    Returns
    -------
    LatencyDistribution
        Computed figures; all zero when ``samples`` is empty.

    Examples
    --------
    >>> dist = compute_latency_distribution([40.0, 50.0, 60.0])
    >>> dist.mean
    50.0
    >>> compute_latency_distribution([]).p99
    0.0
    """
    if not samples:
        return LatencyDistribution()

    sorted_samples = sorted(samples)
    n = len(sorted_samples)

    return LatencyDistribution(
        mean=statistics.fmean(sorted_samples),
        median=statistics.median(sorted_samples),
        min=sorted_samples[0],
        max=sorted_samples[-1],
        p95=_nearest_rank(sorted_samples, 0.95),
        p99=_nearest_rank(sorted_samples, 0.99),
        count=n,
    )


def _nearest_rank(sorted_samples: List[float], percentile: float) -> float:
    idx = int(percentile * len(sorted_samples))
    return sorted_samples[min(idx, len(sorted_samples) - 1)]

"""
Domain utilities for latency statistics and sample aggregation.

This package reduces probe samples into the aggregated Result the engine
reports. Every reduction is order-independent (sums, counts, sorted
percentiles), so concurrent workers may append in any order.
"""

from .aggregation import SampleAccumulator, aggregate_samples, percentage
from .statistics import LatencyDistribution, compute_latency_distribution

__all__ = [
    "SampleAccumulator",
    "aggregate_samples",
    "percentage",
    "LatencyDistribution",
    "compute_latency_distribution",
]

"""
Sample aggregation for benchmark campaigns.

Provides the shared accumulator that concurrent profile workers append to and
the reduction that turns the collected samples into a Result.
"""

import asyncio
import logging
from typing import Iterable, List

from ..models import Result, Sample
from .statistics import compute_latency_distribution

logger = logging.getLogger(__name__)

RATE_DECIMALS = 2


def percentage(part: int, total: int) -> float:
    """
    Return ``part`` as a percentage of ``total`` rounded to 2 decimals.

    Examples
    --------
    >>> percentage(1, 3)
    33.33
    >>> percentage(0, 0)
    0.0
    """
    if total <= 0:
        return 0.0
    return round(part / total * 100, RATE_DECIMALS)


def aggregate_samples(samples: Iterable[Sample]) -> Result:
    """
    Reduce probe samples into an aggregated Result.

    Latency figures use successful samples only; failed samples count toward
    the totals and the error rate. The error rate is derived as
    ``100 - success_rate`` so the two always sum to 100 for a non-empty set.

    Parameters
    ----------
    samples : Iterable[Sample]
        Probe outcomes in any order.

    Returns
    -------
    Result
        Aggregated figures; every field is zero for an empty sample set.
    """
    latencies: List[float] = []
    total = 0
    for sample in samples:
        total += 1
        if sample.success:
            latencies.append(sample.elapsed_ms)

    if total == 0:
        return Result()

    successful = len(latencies)
    success_rate = percentage(successful, total)
    dist = compute_latency_distribution(latencies)

    return Result(
        average_response_time=round(dist.mean, RATE_DECIMALS),
        success_rate=success_rate,
        error_rate=round(100.0 - success_rate, RATE_DECIMALS),
        total_requests=total,
        successful_requests=successful,
        failed_requests=total - successful,
        min_response_time=round(dist.min, RATE_DECIMALS),
        max_response_time=round(dist.max, RATE_DECIMALS),
        median_response_time=round(dist.median, RATE_DECIMALS),
        p95_response_time=round(dist.p95, RATE_DECIMALS),
        p99_response_time=round(dist.p99, RATE_DECIMALS),
    )


class SampleAccumulator:
    """
    Campaign-scoped sample store shared by concurrent workers.

    Appends are serialized through an ``asyncio.Lock`` so no sample is lost
    when several workers record at once. One accumulator belongs to exactly
    one campaign.
    """

    def __init__(self) -> None:
        self._samples: List[Sample] = []
        self._lock = asyncio.Lock()

    async def add(self, sample: Sample) -> None:
        """Record one probe outcome."""
        async with self._lock:
            self._samples.append(sample)

    async def count(self) -> int:
        """Return the number of samples recorded so far."""
        async with self._lock:
            return len(self._samples)

    async def snapshot(self) -> List[Sample]:
        """Return a copy of the samples recorded so far."""
        async with self._lock:
            return list(self._samples)

    async def result(self) -> Result:
        """Aggregate everything recorded so far into a Result."""
        samples = await self.snapshot()
        result = aggregate_samples(samples)
        logger.debug(
            "aggregation.result",
            extra={
                "total_requests": result.total_requests,
                "successful_requests": result.successful_requests,
            },
        )
        return result

"""
Tests for sample aggregation and latency statistics.
"""

import asyncio

import pytest

from benchwatch.domain.models import Result, Sample
from benchwatch.domain.utils.aggregation import (
    SampleAccumulator,
    aggregate_samples,
    percentage,
)
from benchwatch.domain.utils.statistics import compute_latency_distribution


def _ok(ms: float) -> Sample:
    return Sample(elapsed_ms=ms, success=True, status_code=200)


def _fail(ms: float = 0.0, status=None) -> Sample:
    return Sample(elapsed_ms=ms, success=False, status_code=status)


def test_empty_sample_set_is_all_zero():
    assert aggregate_samples([]) == Result()


def test_counts_add_up_and_rates_sum_to_100():
    samples = [_ok(10), _ok(20), _fail(), _ok(30), _fail(5000, 500), _ok(40)]
    result = aggregate_samples(samples)
    assert result.total_requests == 6
    assert result.successful_requests == 4
    assert result.failed_requests == 2
    assert result.successful_requests + result.failed_requests == result.total_requests
    assert result.success_rate == 66.67
    assert result.error_rate == 33.33
    assert result.success_rate + result.error_rate == pytest.approx(100.0)


def test_average_uses_successful_samples_only():
    result = aggregate_samples([_ok(100), _ok(200), _fail(9000, 504)])
    assert result.average_response_time == 150.0


def test_all_failures_have_zero_latency():
    result = aggregate_samples([_fail(), _fail(), _fail()])
    assert result.average_response_time == 0.0
    assert result.p99_response_time == 0.0
    assert result.success_rate == 0.0
    assert result.error_rate == 100.0


def test_rates_rounded_to_two_decimals():
    result = aggregate_samples([_ok(1.0)] * 2 + [_fail()])
    assert result.success_rate == 66.67
    assert result.error_rate == 33.33
    avg = aggregate_samples([_ok(1.0), _ok(1.0), _ok(2.0)]).average_response_time
    assert avg == 1.33


def test_result_is_order_independent():
    samples = [_ok(5), _fail(), _ok(15), _ok(25), _fail(1, 500)]
    assert aggregate_samples(samples) == aggregate_samples(list(reversed(samples)))


def test_percentage_helper():
    assert percentage(1, 3) == 33.33
    assert percentage(0, 0) == 0.0
    assert percentage(5, 5) == 100.0


def test_latency_distribution():
    dist = compute_latency_distribution([float(i) for i in range(1, 101)])
    assert dist.count == 100
    assert dist.min == 1.0
    assert dist.max == 100.0
    assert dist.median == 50.5
    assert 94.0 <= dist.p95 <= 96.0
    assert 98.0 <= dist.p99 <= 100.0


def test_latency_distribution_empty():
    dist = compute_latency_distribution([])
    assert dist.count == 0
    assert dist.mean == 0.0


@pytest.mark.asyncio
async def test_accumulator_loses_no_updates_under_concurrency():
    acc = SampleAccumulator()

    async def writer(n: int) -> None:
        for i in range(200):
            await acc.add(_ok(1.0) if (i + n) % 3 else _fail())
            if i % 10 == 0:
                await asyncio.sleep(0)

    await asyncio.gather(*(writer(n) for n in range(20)))
    result = await acc.result()
    assert await acc.count() == 4000
    assert result.total_requests == 4000
    assert result.successful_requests + result.failed_requests == 4000

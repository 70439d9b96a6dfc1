"""Tests for the campaign and monitor scoring curves."""

from __future__ import annotations

import pytest

from benchwatch.domain.models import Result
from benchwatch.domain.scoring import (
    monitor_performance_score,
    performance_score,
    sla_compliance,
)


def _result(avg: float, error_rate: float = 0.0, total: int = 1000) -> Result:
    failed = round(total * error_rate / 100)
    return Result(
        average_response_time=avg,
        success_rate=round(100 - error_rate, 2),
        error_rate=error_rate,
        total_requests=total,
        successful_requests=total - failed,
        failed_requests=failed,
    )


@pytest.mark.parametrize(
    "avg,expected",
    [(50, 100), (200, 100), (200.01, 90), (500, 90), (501, 80), (1000, 80), (1001, 70)],
)
def test_latency_thresholds(avg, expected):
    assert performance_score(_result(avg)) == expected


@pytest.mark.parametrize(
    "error_rate,expected",
    [(0.0, 100), (0.1, 100), (0.2, 90), (1.0, 90), (1.5, 80), (5.0, 80), (5.1, 60)],
)
def test_error_rate_thresholds(error_rate, expected):
    assert performance_score(_result(50, error_rate)) == expected


def test_score_non_increasing_with_latency():
    latencies = [0, 100, 199, 200, 201, 350, 500, 501, 750, 1000, 1001, 5000]
    scores = [performance_score(_result(ms)) for ms in latencies]
    assert scores == sorted(scores, reverse=True)


def test_combined_deductions():
    assert performance_score(_result(1500, 10.0)) == 30


def test_score_zero_when_every_sample_fails():
    result = Result(
        error_rate=100.0, total_requests=5, successful_requests=0, failed_requests=5
    )
    assert performance_score(result) == 0


def test_score_zero_for_empty_result():
    assert performance_score(Result()) == 0


@pytest.mark.parametrize(
    "online,elapsed,expected",
    [
        (False, 10, 0.0),
        (True, 900, 100.0),
        (True, 1000, 100.0),
        (True, 1001, 90.0),
        (True, 2001, 75.0),
        (True, 5001, 50.0),
    ],
)
def test_sla_compliance(online, elapsed, expected):
    assert sla_compliance(online, elapsed) == expected


@pytest.mark.parametrize(
    "online,elapsed,expected",
    [
        (False, 10, 0),
        (True, 400, 100),
        (True, 501, 90),
        (True, 1001, 80),
        (True, 3001, 60),
    ],
)
def test_monitor_performance_score(online, elapsed, expected):
    assert monitor_performance_score(online, elapsed) == expected

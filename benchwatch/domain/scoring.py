"""Scoring curves for campaign results and monitor ticks.

All scores are integers or percentages clamped to ``[0, 100]``. Thresholds are
strict ("greater than"), so a value sitting exactly on a threshold is not
penalized by it.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from .models import Result

# (threshold, deduction) pairs, checked from the most severe down
CAMPAIGN_LATENCY_PENALTIES: Sequence[Tuple[float, int]] = (
    (1000.0, 30),
    (500.0, 20),
    (200.0, 10),
)
CAMPAIGN_ERROR_RATE_PENALTIES: Sequence[Tuple[float, int]] = (
    (5.0, 40),
    (1.0, 20),
    (0.1, 10),
)
SLA_LATENCY_PENALTIES: Sequence[Tuple[float, int]] = (
    (5000.0, 50),
    (2000.0, 25),
    (1000.0, 10),
)
MONITOR_LATENCY_PENALTIES: Sequence[Tuple[float, int]] = (
    (3000.0, 40),
    (1000.0, 20),
    (500.0, 10),
)


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def _deduction(value: float, penalties: Sequence[Tuple[float, int]]) -> int:
    for threshold, points in penalties:
        if value > threshold:
            return points
    return 0


def performance_score(result: Result) -> int:
    """Score a campaign Result from its average latency and error rate.

    An empty Result scores 0, and so does a Result whose every sample failed.
    """
    if result.total_requests == 0 or result.successful_requests == 0:
        return 0
    score = 100
    score -= _deduction(result.average_response_time, CAMPAIGN_LATENCY_PENALTIES)
    score -= _deduction(result.error_rate, CAMPAIGN_ERROR_RATE_PENALTIES)
    return int(_clamp(score))


def sla_compliance(online: bool, elapsed_ms: float) -> float:
    """SLA compliance of a single health check."""
    if not online:
        return 0.0
    return float(_clamp(100 - _deduction(elapsed_ms, SLA_LATENCY_PENALTIES)))


def monitor_performance_score(online: bool, elapsed_ms: float) -> int:
    """Performance score of a single health check."""
    if not online:
        return 0
    return int(_clamp(100 - _deduction(elapsed_ms, MONITOR_LATENCY_PENALTIES)))

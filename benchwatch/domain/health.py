"""Derivation of monitor tick records from a health-check probe.

Every tick yields exactly one (reliability, performance) record pair. Each
tick is judged on its own: uptime is 0 or 100 and the outage count is a 0/1
flag, leaving trends and totals to whoever consumes the history.
"""

from __future__ import annotations

from typing import Tuple

from .models import HealthSample, PerformanceSample, Sample
from .scoring import monitor_performance_score, sla_compliance

TickRecords = Tuple[HealthSample, PerformanceSample]


def derive_tick_records(sample: Sample) -> TickRecords:
    """Build the record pair of a tick whose probe returned ``sample``.

    A transport failure reports a response time of 0; a non-2xx response
    reports the time the response took.
    """
    online = sample.success
    response_time = 0.0 if sample.transport_error else round(sample.elapsed_ms, 2)
    health = HealthSample(
        online=online,
        response_time=response_time,
        uptime=100.0 if online else 0.0,
        sla_compliance=sla_compliance(online, sample.elapsed_ms),
        outage_count=0 if online else 1,
        mttr=0.0 if online else 1.0,
        status_code=sample.status_code,
    )
    performance = PerformanceSample(
        response_time=response_time,
        uptime=health.uptime,
        error_rate=0.0 if online else 100.0,
        performance_score=monitor_performance_score(online, sample.elapsed_ms),
    )
    return health, performance


def failure_tick_records() -> TickRecords:
    """Record pair for a tick whose check could not be carried out at all."""
    health = HealthSample(
        online=False,
        response_time=0.0,
        uptime=0.0,
        sla_compliance=0.0,
        outage_count=1,
        mttr=1.0,
    )
    performance = PerformanceSample(
        response_time=0.0, uptime=0.0, error_rate=100.0, performance_score=0
    )
    return health, performance

"""Tests for the reliability monitor's schedules and tick records."""

from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from benchwatch.adapters.http_probe import HttpProbe
from benchwatch.config.models import MonitorSettings
from benchwatch.server.monitor import ReliabilityMonitor
from benchwatch.sinks import InMemoryMetricsSink
from helpers import ok_handler, probe_for, refused_handler


class _ExplodingProbe(HttpProbe):
    async def probe(self, url, **kwargs):
        raise RuntimeError("probe crashed")


class _FlakySink(InMemoryMetricsSink):
    """Rejects the first ``failures`` reliability writes."""

    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures

    async def record_reliability_sample(self, target_id, sample):
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("storage unavailable")
        await super().record_reliability_sample(target_id, sample)


@pytest.mark.asyncio
async def test_start_runs_immediate_head_check(sink, fast_monitor):
    seen = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.headers["user-agent"]))
        return httpx.Response(200)

    monitor = ReliabilityMonitor(probe_for(handler), sink, fast_monitor)
    health = await monitor.start("api", "http://target/")
    try:
        assert health.online is True
        assert health.uptime == 100.0
        assert health.sla_compliance == 100.0
        assert health.outage_count == 0
        assert seen == [("HEAD", "Benchwatch-Uptime-Monitor/1.0")]
        assert sink.reliability_for("api") == [health]
        [perf] = sink.performance_for("api")
        assert perf.uptime == 100.0
        assert perf.error_rate == 0.0
        assert perf.performance_score == 100
    finally:
        await monitor.shutdown()


@pytest.mark.asyncio
async def test_unreachable_target_reports_outage(sink, fast_monitor):
    monitor = ReliabilityMonitor(probe_for(refused_handler), sink, fast_monitor)
    health = await monitor.start("api", "http://target/")
    await monitor.shutdown()

    assert health.online is False
    assert health.uptime == 0.0
    assert health.sla_compliance == 0.0
    assert health.outage_count == 1
    assert health.mttr == 1.0
    assert health.response_time == 0.0
    assert health.status_code is None
    [perf] = sink.performance_for("api")
    assert perf.error_rate == 100.0
    assert perf.performance_score == 0


@pytest.mark.asyncio
async def test_error_status_counts_as_offline(sink, fast_monitor):
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    monitor = ReliabilityMonitor(probe_for(handler), sink, fast_monitor)
    health = await monitor.check("api", "http://target/")
    assert health.online is False
    assert health.status_code == 503
    assert health.outage_count == 1


@pytest.mark.asyncio
async def test_restart_keeps_single_schedule(sink, fast_monitor):
    monitor = ReliabilityMonitor(probe_for(ok_handler), sink, fast_monitor)
    await monitor.start("api", "http://target/")
    await monitor.start("api", "http://target/")
    assert monitor.active_targets() == ["api"]

    await asyncio.sleep(0.5)
    await monitor.shutdown()
    # Two immediate checks plus two ticks of one schedule
    assert len(sink.reliability_for("api")) == 4
    assert len(sink.performance_for("api")) == 4


@pytest.mark.asyncio
async def test_stop_unknown_target_is_noop(sink, fast_monitor):
    monitor = ReliabilityMonitor(probe_for(ok_handler), sink, fast_monitor)
    assert monitor.stop("nope") is False
    assert sink.reliability_samples == []


@pytest.mark.asyncio
async def test_stop_prevents_further_ticks(sink, fast_monitor):
    monitor = ReliabilityMonitor(probe_for(ok_handler), sink, fast_monitor)
    await monitor.start("api", "http://target/")
    assert monitor.stop("api") is True
    assert monitor.is_monitoring("api") is False

    await asyncio.sleep(0.45)
    assert len(sink.reliability_for("api")) == 1
    await monitor.shutdown()


@pytest.mark.asyncio
async def test_targets_are_independent(sink, fast_monitor):
    monitor = ReliabilityMonitor(probe_for(ok_handler), sink, fast_monitor)
    await monitor.start("a", "http://a/")
    await monitor.start("b", "http://b/")
    monitor.stop("a")
    await asyncio.sleep(0.3)
    await monitor.shutdown()

    assert len(sink.reliability_for("a")) == 1
    assert len(sink.reliability_for("b")) == 2


@pytest.mark.asyncio
async def test_crashed_check_writes_failure_pair(sink, fast_monitor):
    client = httpx.AsyncClient(transport=httpx.MockTransport(ok_handler))
    probe = _ExplodingProbe(client=client)
    monitor = ReliabilityMonitor(probe, sink, fast_monitor)
    health = await monitor.check("api", "http://target/")

    assert health.online is False
    assert health.uptime == 0.0
    assert health.outage_count == 1
    [perf] = sink.performance_for("api")
    assert perf.error_rate == 100.0
    assert perf.performance_score == 0


@pytest.mark.asyncio
async def test_start_propagates_sink_error(fast_monitor):
    sink = _FlakySink(failures=1)
    monitor = ReliabilityMonitor(probe_for(ok_handler), sink, fast_monitor)
    with pytest.raises(RuntimeError):
        await monitor.start("api", "http://target/")
    await monitor.shutdown()


@pytest.mark.asyncio
async def test_schedule_survives_sink_error(fast_monitor, caplog):
    # Immediate check and first tick fail; the second tick lands
    sink = _FlakySink(failures=2)
    monitor = ReliabilityMonitor(probe_for(ok_handler), sink, fast_monitor)
    with caplog.at_level(logging.ERROR, logger="benchwatch.server.monitor"):
        with pytest.raises(RuntimeError):
            await monitor.start("api", "http://target/")
        await asyncio.sleep(0.5)
    assert monitor.is_monitoring("api")
    await monitor.shutdown()

    assert len(sink.reliability_for("api")) >= 1
    assert any(r.message == "monitor.tick.write_failed" for r in caplog.records)


@pytest.mark.asyncio
async def test_shutdown_stops_every_target(sink, fast_monitor):
    monitor = ReliabilityMonitor(probe_for(ok_handler), sink, fast_monitor)
    await monitor.start("a", "http://a/")
    await monitor.start("b", "http://b/")
    await monitor.shutdown()
    assert monitor.active_targets() == []


@pytest.mark.asyncio
async def test_fetch_status_page_metrics(sink, fast_monitor):
    seen = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers["user-agent"])
        return httpx.Response(200, text="<p>Uptime: 99.95%</p><p>Incidents: 2</p>")

    monitor = ReliabilityMonitor(probe_for(handler), sink, fast_monitor)
    metrics = await monitor.fetch_status_page_metrics("http://status/")
    assert metrics.uptime == 99.95
    assert metrics.incidents == 2
    assert seen == ["Benchwatch-Status-Monitor/1.0"]


@pytest.mark.asyncio
async def test_ticks_keep_fixed_rate_with_slow_target(sink):
    async def slow(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0.15)
        return httpx.Response(200)

    settings = MonitorSettings(interval_seconds=0.3, timeout_seconds=1.0)
    monitor = ReliabilityMonitor(probe_for(slow), sink, settings)
    await monitor.start("api", "http://target/")
    await asyncio.sleep(1.0)
    await monitor.shutdown()

    ticks = [s.recorded_at for s in sink.reliability_for("api")[1:]]
    assert len(ticks) >= 3
    gaps = [(b - a).total_seconds() for a, b in zip(ticks, ticks[1:])]
    # Check duration does not add to the interval
    assert all(0.22 <= gap <= 0.38 for gap in gaps), gaps

"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so ``import benchwatch`` resolves
to the local sources regardless of the working directory pytest chooses.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()


@pytest.fixture
def sink():
    """Fresh in-memory sink per test."""
    from benchwatch.sinks import InMemoryMetricsSink

    return InMemoryMetricsSink()


@pytest.fixture
def fast_profiles():
    """Profile settings with short pauses so campaigns finish quickly."""
    from benchwatch.config.models import ProfileSettings

    return ProfileSettings(
        latency_min_delay_ms=1.0,
        latency_max_delay_ms=2.0,
        latency_error_backoff_ms=1.0,
        load_pause_ms=5.0,
        stress_pause_ms=5.0,
        reliability_interval_seconds=0.05,
    )


@pytest.fixture
def fast_monitor():
    """Monitor settings ticking every 200ms."""
    from benchwatch.config.models import MonitorSettings

    return MonitorSettings(interval_seconds=0.2, timeout_seconds=1.0)

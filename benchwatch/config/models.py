"""Config models and loader.

This module defines Pydantic models for file- and environment-based
configuration. Every default reproduces the engine's documented behavior, so an
empty configuration file yields the standard load profiles and a 5-minute
monitor cadence. Tuned values are validated at load time.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProbeSettings(BaseModel):
    """Settings for the shared HTTP probe client.

    Attributes
    ----------
    user_agent_prefix: str
        Product token placed in front of each profile's client tag, e.g.
        ``Benchwatch-LoadTest/1.0``.
    max_connections: int
        Connection pool size of the shared ``httpx.AsyncClient``. Must cover
        the largest worker pool a campaign can spawn.
    follow_redirects: bool
        Whether 3xx responses are followed before the outcome is judged.
    """

    user_agent_prefix: str = Field("Benchwatch", min_length=1)
    max_connections: int = Field(64, ge=1)
    follow_redirects: bool = True


class ProfileSettings(BaseModel):
    """Tunable constants of the four benchmark profiles.

    Durations are in seconds unless the field name ends in ``_ms``.
    """

    # Latency probe (response_time)
    latency_min_requests: int = Field(5, ge=1)
    latency_max_requests: int = Field(100, ge=1)
    latency_delay_factor: float = Field(0.1, ge=0.0)
    latency_min_delay_ms: float = Field(50.0, ge=0.0)
    latency_max_delay_ms: float = Field(200.0, ge=0.0)
    latency_error_backoff_ms: float = Field(100.0, ge=0.0)
    latency_timeout_seconds: float = Field(10.0, gt=0.0)

    # Load test
    load_workers: int = Field(10, ge=1)
    load_pause_ms: float = Field(50.0, ge=0.0)
    load_timeout_seconds: float = Field(10.0, gt=0.0)

    # Stress test
    stress_phases: int = Field(3, ge=1)
    stress_concurrency_step: int = Field(5, ge=1)
    stress_max_concurrency: int = Field(50, ge=1)
    stress_pause_ms: float = Field(100.0, ge=0.0)
    stress_timeout_seconds: float = Field(15.0, gt=0.0)

    # Reliability test
    reliability_interval_seconds: float = Field(5.0, ge=0.0)
    reliability_timeout_seconds: float = Field(30.0, gt=0.0)

    @model_validator(mode="after")
    def _check_bounds(self) -> "ProfileSettings":
        if self.latency_max_requests < self.latency_min_requests:
            raise ValueError("latency_max_requests must be >= latency_min_requests")
        if self.latency_max_delay_ms < self.latency_min_delay_ms:
            raise ValueError("latency_max_delay_ms must be >= latency_min_delay_ms")
        return self


class MonitorSettings(BaseModel):
    """Settings for the reliability monitor.

    Attributes
    ----------
    interval_seconds: float
        Cadence of the recurring health check per target.
    timeout_seconds: float
        Timeout of each health-check probe.
    method: str
        HTTP method used by the health check.
    """

    interval_seconds: float = Field(300.0, gt=0.0)
    timeout_seconds: float = Field(30.0, gt=0.0)
    method: str = Field("HEAD")


class TargetConfig(BaseModel):
    """A tracked target to register with the monitor at startup."""

    target_id: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    status_page_url: Optional[str] = None


class AppConfig(BaseModel):
    """Top-level application configuration.

    Attributes
    ----------
    probe: ProbeSettings
        HTTP client settings shared by every probe.
    profiles: ProfileSettings
        Benchmark profile constants.
    monitor: MonitorSettings
        Reliability monitor cadence and probe settings.
    targets: List[TargetConfig]
        Targets monitored from process start.
    """

    probe: ProbeSettings = Field(default_factory=ProbeSettings)
    profiles: ProfileSettings = Field(default_factory=ProfileSettings)
    monitor: MonitorSettings = Field(default_factory=MonitorSettings)
    targets: List[TargetConfig] = Field(default_factory=list)

    @staticmethod
    def load(path: Path) -> "AppConfig":
        """Load application config from a JSON file."""
        data = json.loads(path.read_text(encoding="utf-8"))
        return AppConfig.model_validate(data)


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    config_path: Optional[str]
        Path to the JSON application config used when none is passed on the
        command line.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="BENCHWATCH_")

    log_level: str = Field("INFO")
    config_path: Optional[str] = None

"""Canonical data model of the measurement engine.

These Pydantic models represent the values that flow between the probe, the
benchmark profiles, the reliability monitor, and the metrics sink. Samples
are ephemeral and never persisted individually; Results, health samples and
performance samples are what the engine hands to the sink.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidTransitionError, UnsupportedProfileError


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class ProfileKind(str, Enum):
    """Closed set of benchmark load profiles."""

    RESPONSE_TIME = "response_time"
    LOAD_TEST = "load_test"
    STRESS_TEST = "stress_test"
    RELIABILITY_TEST = "reliability_test"

    @classmethod
    def parse(cls, value: "ProfileKind | str") -> "ProfileKind":
        """Coerce a profile tag into a member.

        Raises
        ------
        UnsupportedProfileError
            If the tag does not name one of the four profiles.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise UnsupportedProfileError(value) from exc


class CampaignStatus(str, Enum):
    """Lifecycle status of a benchmark campaign."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (CampaignStatus.COMPLETED, CampaignStatus.FAILED)


_ALLOWED_TRANSITIONS = {
    CampaignStatus.PENDING: {CampaignStatus.RUNNING},
    CampaignStatus.RUNNING: {CampaignStatus.COMPLETED, CampaignStatus.FAILED},
    CampaignStatus.COMPLETED: set(),
    CampaignStatus.FAILED: set(),
}


class Sample(BaseModel):
    """Outcome of a single probe.

    Attributes
    ----------
    elapsed_ms: float
        Time until the response completed, or until the failure was observed.
    success: bool
        True iff a 2xx response arrived within the timeout.
    status_code: Optional[int]
        HTTP status when a response was received; None for transport errors.
    """

    model_config = ConfigDict(frozen=True)

    elapsed_ms: float = Field(0.0, ge=0.0)
    success: bool
    status_code: Optional[int] = None

    @property
    def transport_error(self) -> bool:
        """True when no HTTP response was received at all."""
        return self.status_code is None and not self.success


class Result(BaseModel):
    """Aggregated statistics of a campaign's samples.

    Latency figures are computed over successful samples only. Rates are
    percentages of all issued requests, rounded to 2 decimal places.

    Attributes
    ----------
    average_response_time: float
        Mean latency (ms) of successful samples, 0 when there are none.
    success_rate: float
        Percentage of successful requests.
    error_rate: float
        Percentage of failed requests; ``100 - success_rate`` within rounding.
    total_requests / successful_requests / failed_requests: int
        Exact counts, with ``successful + failed == total``.
    min/max/median/p95/p99_response_time: float
        Latency distribution of successful samples, 0 when there are none.
    """

    model_config = ConfigDict(frozen=True)

    average_response_time: float = 0.0
    success_rate: float = 0.0
    error_rate: float = 0.0
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    min_response_time: float = 0.0
    max_response_time: float = 0.0
    median_response_time: float = 0.0
    p95_response_time: float = 0.0
    p99_response_time: float = 0.0


class CampaignTimestamps(BaseModel):
    """Start and completion times recorded on status transitions."""

    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class Campaign(BaseModel):
    """One benchmark execution and its lifecycle.

    A campaign moves ``pending -> running -> {completed, failed}`` and is never
    changed after reaching a terminal state.
    """

    campaign_id: str
    target_url: str
    profile: str
    duration_seconds: float
    target_id: Optional[str] = None
    status: CampaignStatus = CampaignStatus.PENDING
    timestamps: CampaignTimestamps = Field(default_factory=CampaignTimestamps)
    result: Optional[Result] = None
    score: Optional[int] = None

    def transition(
        self,
        status: CampaignStatus,
        *,
        result: Optional[Result] = None,
        score: Optional[int] = None,
    ) -> None:
        """Move to ``status``, stamping the timestamps the transition implies.

        Raises
        ------
        InvalidTransitionError
            If the lifecycle does not permit the move.
        """
        if status not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(self.campaign_id, self.status, status)
        now = utcnow()
        if status == CampaignStatus.RUNNING:
            self.timestamps.started_at = now
        if status.is_terminal:
            self.timestamps.completed_at = now
        if status == CampaignStatus.COMPLETED:
            self.result = result
            self.score = score
        self.status = status


class HealthSample(BaseModel):
    """Reliability record derived from a single monitor tick.

    ``uptime`` is binary per tick (0 or 100) and ``outage_count`` is a per-tick
    flag; trends and running totals are left to consumers of the history.
    """

    model_config = ConfigDict(frozen=True)

    online: bool
    response_time: float = 0.0
    uptime: float = 0.0
    sla_compliance: float = 0.0
    outage_count: int = Field(0, ge=0, le=1)
    mttr: float = 0.0
    status_code: Optional[int] = None
    recorded_at: datetime = Field(default_factory=utcnow)


class PerformanceSample(BaseModel):
    """Dashboard-style performance record for a target."""

    model_config = ConfigDict(frozen=True)

    response_time: float = 0.0
    uptime: float = 0.0
    error_rate: float = 0.0
    performance_score: int = Field(0, ge=0, le=100)
    recorded_at: datetime = Field(default_factory=utcnow)


class StatusPageMetrics(BaseModel):
    """Figures advertised on a vendor status page."""

    uptime: Optional[float] = None
    incidents: Optional[int] = None
    last_updated: datetime = Field(default_factory=utcnow)

"""Correlation of probe log records with the work that issued them.

Every probe runs on behalf of either a benchmark campaign or a monitor tick.
The runner and the monitor bind that origin in a ContextVar before probing;
worker tasks spawned by a campaign copy the context, so the probe can tag its
log records without the origin being passed through each call.
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass
from typing import Dict, Optional

CAMPAIGN = "campaign"
MONITOR_TICK = "monitor"


@dataclass(frozen=True)
class Correlation:
    """Origin of the probes issued in the current context.

    Attributes
    ----------
    kind: str
        ``campaign`` or ``monitor``.
    key: str
        Campaign id, or target id for monitor ticks.
    """

    kind: str
    key: str

    @property
    def correlation_id(self) -> str:
        return f"{self.kind}:{self.key}"


_current: ContextVar[Optional[Correlation]] = ContextVar(
    "benchwatch_correlation", default=None
)


def bind_campaign(campaign_id: str) -> Correlation:
    """Mark the current context as executing campaign ``campaign_id``."""
    correlation = Correlation(CAMPAIGN, campaign_id)
    _current.set(correlation)
    return correlation


def bind_monitor_tick(target_id: str) -> Correlation:
    """Mark the current context as a health check of ``target_id``."""
    correlation = Correlation(MONITOR_TICK, target_id)
    _current.set(correlation)
    return correlation


def current_correlation() -> Optional[Correlation]:
    """Return the bound origin, or None outside a campaign or tick."""
    return _current.get()


def correlation_fields() -> Dict[str, str]:
    """Log ``extra`` fields describing the bound origin (empty if unbound)."""
    correlation = _current.get()
    if correlation is None:
        return {}
    return {
        "correlation_id": correlation.correlation_id,
        "correlation_kind": correlation.kind,
    }

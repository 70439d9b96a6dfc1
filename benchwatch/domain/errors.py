"""Engine error taxonomy.

Probe-level failures are never raised (they are counted as failed samples).
The exceptions below cover orchestration errors, which end a campaign in the
``failed`` state, and misuse of the runner API.
"""

from __future__ import annotations

from typing import Any


class EngineError(Exception):
    """Base class for measurement engine errors."""


class UnsupportedProfileError(EngineError, ValueError):
    """Raised when a campaign names a profile the engine does not implement."""

    def __init__(self, profile: Any) -> None:
        super().__init__(f"Unknown benchmark type: {profile!r}")
        self.profile = profile


class InvalidTransitionError(EngineError):
    """Raised on a campaign status change the lifecycle does not allow."""

    def __init__(self, campaign_id: str, current: Any, requested: Any) -> None:
        super().__init__(
            f"Campaign {campaign_id!r} cannot move from "
            f"{getattr(current, 'value', current)} to "
            f"{getattr(requested, 'value', requested)}"
        )
        self.campaign_id = campaign_id
        self.current = current
        self.requested = requested


class CampaignAlreadyRunningError(EngineError):
    """Raised when a campaign id is submitted while it is still executing."""

    def __init__(self, campaign_id: str) -> None:
        super().__init__(f"Campaign {campaign_id!r} is already running")
        self.campaign_id = campaign_id

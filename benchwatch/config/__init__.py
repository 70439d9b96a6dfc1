"""Configuration models for the measurement engine."""

from .models import (
    AppConfig,
    EnvSettings,
    MonitorSettings,
    ProbeSettings,
    ProfileSettings,
    TargetConfig,
)

__all__ = [
    "AppConfig",
    "EnvSettings",
    "MonitorSettings",
    "ProbeSettings",
    "ProfileSettings",
    "TargetConfig",
]

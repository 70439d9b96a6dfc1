"""Benchmark profile dispatch.

Each :class:`~benchwatch.domain.models.ProfileKind` maps to exactly one
handler. The mapping is checked for completeness at import time, so adding a
member without a handler fails immediately instead of at campaign time.
"""

from __future__ import annotations

from typing import Dict

from ..models import ProfileKind
from .base import ProfileContext, ProfileHandler
from .load_test import run_load_test
from .reliability_test import run_reliability_test
from .response_time import adaptive_delay_ms, run_response_time
from .stress_test import run_stress_test, stress_concurrency

PROFILE_HANDLERS: Dict[ProfileKind, ProfileHandler] = {
    ProfileKind.RESPONSE_TIME: run_response_time,
    ProfileKind.LOAD_TEST: run_load_test,
    ProfileKind.STRESS_TEST: run_stress_test,
    ProfileKind.RELIABILITY_TEST: run_reliability_test,
}

_missing = set(ProfileKind) - set(PROFILE_HANDLERS)
if _missing:  # pragma: no cover
    raise RuntimeError(f"No handler for profiles: {sorted(m.value for m in _missing)}")


def get_handler(kind: ProfileKind) -> ProfileHandler:
    """Return the handler of ``kind``."""
    return PROFILE_HANDLERS[kind]


__all__ = [
    "PROFILE_HANDLERS",
    "ProfileContext",
    "ProfileHandler",
    "adaptive_delay_ms",
    "get_handler",
    "stress_concurrency",
]

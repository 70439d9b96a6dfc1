"""
Benchwatch measurement engine.

This package hosts the benchmark runner, the reliability monitor, the shared
HTTP probe primitive, and the sinks they report through.
"""

from .__version__ import __result_schema_version__, __version__

__all__ = ["__version__", "__result_schema_version__"]

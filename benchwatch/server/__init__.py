"""Engine services: benchmark runner, reliability monitor, lifecycle, CLI."""

"""Domain model, scoring rules, and benchmark profiles of the engine."""

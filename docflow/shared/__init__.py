"""Shared kernel: enums, telemetry, utilities (no business rules)."""

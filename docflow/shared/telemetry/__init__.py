"""Logging and tracing helpers."""

from docflow.shared.telemetry.logging import get_logger, setup_logging
from docflow.shared.telemetry.tracing import add_span_attributes, traced

__all__ = ["get_logger", "setup_logging", "traced", "add_span_attributes"]

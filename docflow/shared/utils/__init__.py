"""Shared utilities: datetime and generators."""

from docflow.shared.utils.datetime import (
    ensure_utc,
    start_of_day,
    start_of_month,
    utc_now,
)
from docflow.shared.utils.generators import generate_cuid, generate_stored_name

__all__ = [
    "generate_cuid",
    "generate_stored_name",
    "utc_now",
    "ensure_utc",
    "start_of_day",
    "start_of_month",
]

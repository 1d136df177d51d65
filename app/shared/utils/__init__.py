"""Shared utilities: datetime and generators."""

from app.shared.utils.datetime import (
    current_year,
    ensure_utc,
    parse_date,
    utc_now,
    utc_today,
)
from app.shared.utils.generators import generate_cuid

__all__ = [
    "current_year",
    "ensure_utc",
    "generate_cuid",
    "parse_date",
    "utc_now",
    "utc_today",
]

"""Shared utilities: logging setup and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.utils import (
    current_year,
    ensure_utc,
    generate_cuid,
    parse_date,
    utc_now,
    utc_today,
)

__all__ = [
    "current_year",
    "ensure_utc",
    "generate_cuid",
    "parse_date",
    "utc_now",
    "utc_today",
]

"""Utility helpers for reusable functionality."""

from .datetime import isoformat_utc, parse_timestamp, utc_now, utc_now_iso

__all__ = [
    "isoformat_utc",
    "parse_timestamp",
    "utc_now",
    "utc_now_iso",
]

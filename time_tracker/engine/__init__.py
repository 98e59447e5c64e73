"""Validation and aggregation engines."""
from time_tracker.engine.validator import validate_entry, validate_entry_id
from time_tracker.engine.aggregator import (
    available_months,
    available_years,
    build_history,
    check_daily_cap,
    daily_total,
    remaining_hours,
)

__all__ = [
    "validate_entry",
    "validate_entry_id",
    "available_months",
    "available_years",
    "build_history",
    "check_daily_cap",
    "daily_total",
    "remaining_hours",
]

"""Shape validation for incoming entries.

Runs before any aggregation or persistence and never touches stored data.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from time_tracker.models import EntryCreate, InvalidShape, Project

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
REQUIRED_FIELDS = ("date", "project", "hours", "description")


def validate_entry(payload: Mapping[str, Any]) -> EntryCreate:
    """Validate a creation request and return the normalized candidate.

    Every problem found is collected; a single InvalidShape carrying all
    of them is raised if any field is wrong.
    """
    errors: list[str] = []

    if not isinstance(payload, Mapping):
        raise InvalidShape("Entry must be an object with date, project, hours and description")

    for name in REQUIRED_FIELDS:
        if payload.get(name) is None:
            errors.append(f"{name}: field is required")

    day = _check_date(payload.get("date"), errors)
    project = _check_project(payload.get("project"), errors)
    hours = _check_hours(payload.get("hours"), errors)
    description = _check_description(payload.get("description"), errors)

    if errors:
        raise InvalidShape(errors)

    return EntryCreate(date=day, project=project, hours=hours, description=description)


def validate_entry_id(value: Any) -> int:
    """Deletion targets must be positive integers."""
    if isinstance(value, bool):
        raise InvalidShape("Invalid id")
    if isinstance(value, str):
        value = value.strip()
        if not (value.isascii() and value.isdigit()):
            raise InvalidShape("Invalid id")
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        raise InvalidShape("Invalid id")
    return value


def _check_date(value: Any, errors: list[str]) -> date | None:
    if value is None:
        return None
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        errors.append(f"date: expected YYYY-MM-DD, got {value!r}")
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        errors.append(f"date: {value!r} is not a calendar date")
        return None


def _check_project(value: Any, errors: list[str]) -> Project | None:
    if value is None:
        return None
    if isinstance(value, Project):
        return value
    try:
        return Project(value)
    except ValueError:
        errors.append(
            f"project: {value!r} is not one of {', '.join(Project.labels())}"
        )
        return None


def _check_hours(value: Any, errors: list[str]) -> Decimal | None:
    if value is None:
        return None
    # bool is an int subclass; strings are not numbers on this boundary
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        errors.append(f"hours: expected a number, got {value!r}")
        return None
    try:
        hours = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        errors.append(f"hours: {value!r} is not a number")
        return None
    if not hours.is_finite():
        errors.append(f"hours: must be finite, got {value!r}")
        return None
    if hours <= 0:
        errors.append(f"hours: must be greater than zero, got {value!r}")
        return None
    return hours


def _check_description(value: Any, errors: list[str]) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        errors.append(f"description: expected text, got {value!r}")
        return None
    text = value.strip()
    if not text:
        errors.append("description: must not be empty")
        return None
    return text

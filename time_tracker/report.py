"""JSON export of the history view."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

from time_tracker.models import History, TimeEntry


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal values."""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        return super().default(obj)


def entry_dict(entry: TimeEntry) -> dict:
    return {
        "id": entry.id,
        "date": entry.date.isoformat(),
        "project": entry.project.value,
        "hours": entry.hours,
        "description": entry.description,
        "created_at": entry.created_at.isoformat(),
    }


def generate_history_dict(history: History) -> dict:
    """Build the history dictionary (no file I/O); hours stay Decimal."""
    days = [
        {
            "date": bucket.date.isoformat(),
            "total": bucket.total,
            "entries": [entry_dict(e) for e in bucket.entries],
        }
        for bucket in history.buckets
    ]
    return {
        "filter": {
            "year": history.month_filter.year,
            "month": history.month_filter.month.value,
        } if history.month_filter else None,
        "days": days,
        "summary": {
            "total_days": len(history.buckets),
            "total_entries": history.entry_count,
            "grand_total": history.grand_total,
        },
    }


def write_history_json(history: History, output_path: str | Path) -> Path:
    """Write the history view to a JSON file."""
    output_path = Path(output_path)
    data = generate_history_dict(history)
    output_path.write_text(json.dumps(data, indent=2, cls=DecimalEncoder), encoding='utf-8')
    return output_path

"""Helpers for rendering and saving submitted activity listings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, Mapping

MISSING_DATE = "????-??-??"


def format_activity_line(activity: Mapping[str, Any]) -> str:
    """Return a ``YYYY-MM-DD - title`` summary of an activity."""
    date = activity.get("date")
    day = str(date)[:10] if date else MISSING_DATE
    return f"{day} - {activity.get('title', '')}"


def sort_activities_by_date(
    activities: Iterable[Mapping[str, Any]],
    *,
    descending: bool = False,
) -> List[Mapping[str, Any]]:
    """Sort activities on their ISO ``date`` string; undated ones go last."""
    items = list(activities)
    dated = [activity for activity in items if activity.get("date")]
    undated = [activity for activity in items if not activity.get("date")]
    dated.sort(key=lambda activity: str(activity["date"]), reverse=descending)
    return dated + undated


def write_activities_json(
    activities: Iterable[Mapping[str, Any]],
    path: str | Path,
) -> Path:
    """Persist activities as a JSON array."""
    output_path = Path(path).expanduser()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as handle:
        json.dump(list(activities), handle, indent=2)
        handle.write("\n")
    return output_path

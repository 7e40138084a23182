from __future__ import annotations

import re
from typing import Any, Iterable, List, Mapping

import pandas as pd

from .errors import InvalidStartDate
from .models import Activity

SUCCESSOR_SEPARATORS = r"[;,]"


def _is_missing(value: object) -> bool:
    try:
        return value is None or bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _safe_str(value: object) -> str:
    if _is_missing(value):
        return ""
    return str(value).strip()


def _to_int(value: object) -> object:
    """Convert integral-looking input to int; anything else is returned as is."""
    if isinstance(value, bool):
        return value
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        return value
    if as_float.is_integer():
        return int(as_float)
    return value


def parse_successors(value: Any) -> List[int]:
    """
    Parse successor ids from a list or a string like ``"2;3"`` or ``"2, 3"``.

    Blank entries and ``-`` placeholders are skipped; duplicates are dropped
    keeping the first occurrence.
    """
    items: Iterable[Any]
    if isinstance(value, (list, tuple, set)):
        items = value
    elif _is_missing(value):
        return []
    elif isinstance(value, str):
        parts = [p.strip() for p in re.split(SUCCESSOR_SEPARATORS, value)]
        items = [p for p in parts if p and p not in {"-", "—"}]
    else:
        items = [value]

    successors: List[int] = []
    for item in items:
        succ_id = _to_int(item)
        if not isinstance(succ_id, int) or isinstance(succ_id, bool):
            raise ValueError(f"Invalid successor id '{item}'. Ids must be integers.")
        if succ_id not in successors:
            successors.append(succ_id)
    return successors


def activity_from_record(record: Mapping[str, Any]) -> Activity:
    if "id" not in record:
        raise ValueError(f"Activity record has no 'id': {dict(record)!r}")
    act_id = _to_int(record["id"])
    if not isinstance(act_id, int) or isinstance(act_id, bool):
        raise ValueError(f"Invalid activity id '{record['id']}'. Ids must be integers.")
    # Durations are passed through unchecked; graph build reports InvalidDuration
    duration = record.get("duration", 0)
    return Activity(
        id=act_id,
        name=_safe_str(record.get("name", "")),
        duration=_to_int(duration),
        successors=parse_successors(record.get("successors")),
    )


def activities_from_records(records: Iterable[Mapping[str, Any]]) -> List[Activity]:
    """Build activities from mappings with id, name, duration and successors."""
    activities = [activity_from_record(record) for record in records]
    activities.sort(key=lambda act: act.id)
    return activities


def activities_from_dataframe(df: pd.DataFrame) -> List[Activity]:
    """Build activities from a DataFrame with ID, Name, Duration, Successors columns."""
    missing = [col for col in ("ID", "Duration") if col not in df.columns]
    if missing:
        raise ValueError(f"Activity table is missing required columns: {missing}")

    records = []
    for _, row in df.iterrows():
        records.append(
            {
                "id": row["ID"],
                "name": row.get("Name", ""),
                "duration": row["Duration"],
                "successors": row.get("Successors", ""),
            }
        )
    return activities_from_records(records)


def parse_start_date(text: Any) -> int:
    """Parse the schedule start offset from user input."""
    if isinstance(text, bool):
        raise InvalidStartDate(text)
    if isinstance(text, int):
        return text
    value = _safe_str(text)
    if not re.fullmatch(r"[+-]?\d+", value):
        raise InvalidStartDate(text)
    return int(value)


def next_activity_id(activities: Iterable[Activity]) -> int:
    """Id for a newly added activity: one past the current maximum, or 1."""
    return max((act.id for act in activities), default=0) + 1

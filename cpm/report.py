from __future__ import annotations

from typing import Dict, List, Sequence

import pandas as pd

from .models import ActivityTimes, ScheduleResult

RESULT_COLUMNS = ["ID", "Name", "Duration", "ES", "EF", "LS", "LF", "TF", "FF", "Critical"]


def format_activity_line(times: ActivityTimes) -> str:
    return (
        f"ID: {times.activity_id}, Name: {times.name}, Duration: {times.duration}, "
        f"ES: {times.early_start}, EF: {times.early_finish}, "
        f"LS: {times.late_start}, LF: {times.late_finish}, "
        f"TF: {times.total_float}, Critical: {'Yes' if times.is_critical else 'No'}"
    )


def format_schedule(result: ScheduleResult) -> str:
    """One report section: a header plus one line per activity by (id, name)."""
    lines = [
        f"{result.name} (Start: {result.start_date}, Finish: {result.project_finish}, "
        f"Duration: {result.project_duration})",
        "-" * 50,
    ]
    if result.is_empty:
        lines.append("No activities.")
        return "\n".join(lines)

    lines.extend(format_activity_line(times) for times in result.ordered())
    if result.critical_paths:
        for path in result.critical_paths:
            lines.append(f"Critical Path: {' -> '.join(str(n) for n in path)}")
    return "\n".join(lines)


def format_project(results: Sequence[ScheduleResult]) -> str:
    return "\n\n".join(format_schedule(result) for result in results)


def results_dataframe(result: ScheduleResult) -> pd.DataFrame:
    """Get calculation results as a pandas DataFrame."""
    data = []
    for times in result.ordered():
        data.append(
            {
                "ID": times.activity_id,
                "Name": times.name,
                "Duration": times.duration,
                "ES": times.early_start,
                "EF": times.early_finish,
                "LS": times.late_start,
                "LF": times.late_finish,
                "TF": times.total_float,
                "FF": times.free_float,
                "Critical": "Yes" if times.is_critical else "No",
            }
        )
    return pd.DataFrame(data, columns=RESULT_COLUMNS)


def project_dataframe(results: Sequence[ScheduleResult]) -> pd.DataFrame:
    frames = []
    for result in results:
        df = results_dataframe(result)
        df.insert(0, "Schedule", result.name)
        frames.append(df)
    if not frames:
        return pd.DataFrame(columns=["Schedule"] + RESULT_COLUMNS)
    return pd.concat(frames, ignore_index=True)


def group_by_early_start(result: ScheduleResult, critical_only: bool = False) -> List[List[int]]:
    """
    Group activity ids into rows of equal early start, rows ascending.

    Block-layout presenters draw one row per group; ``critical_only`` keeps
    zero-float activities only.
    """
    grouped: Dict[int, List[int]] = {}
    for times in result.ordered():
        if critical_only and not times.is_critical:
            continue
        grouped.setdefault(times.early_start, []).append(times.activity_id)
    return [grouped[es] for es in sorted(grouped)]

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .engine import CPMScheduler
from .models import ProjectResult, Schedule, ScheduleResult
from .report import format_project

logger = logging.getLogger(__name__)


def schedule_name(schedule: Schedule, index: int) -> str:
    return schedule.name if schedule.name else f"Schedule {index}"


def compute_project(
    schedules: Sequence[Schedule],
    scheduler: Optional[CPMScheduler] = None,
) -> ProjectResult:
    """
    Compute every schedule of a project and compose the report.

    Schedules are independent and computed in the order given. The first
    GraphError aborts the whole computation; nothing partial is returned.
    """
    scheduler = scheduler or CPMScheduler()
    results: List[ScheduleResult] = []
    for index, schedule in enumerate(schedules, start=1):
        name = schedule_name(schedule, index)
        results.append(scheduler.schedule(schedule.activities, schedule.start_date, name))

    logger.info("Computed %d schedule(s)", len(results))
    return ProjectResult(schedules=results, report=format_project(results))


class Project:
    """One or more schedules; ``compute_schedule()`` fills in ``result``."""

    def __init__(self, schedules: Sequence[Schedule], scheduler: Optional[CPMScheduler] = None):
        self.schedules = list(schedules)
        self.scheduler = scheduler
        self.result: Optional[str] = None
        self.schedule_results: List[ScheduleResult] = []

    def compute_schedule(self) -> str:
        """
        Run the calculation and store the text report in ``result``.

        On failure the error propagates and ``result`` stays unset.
        """
        project_result = compute_project(self.schedules, self.scheduler)
        self.schedule_results = project_result.schedules
        self.result = project_result.report
        return self.result

    def apply_results(self) -> None:
        """Write computed fields back onto each schedule's activities."""
        for schedule, result in zip(self.schedules, self.schedule_results):
            result.apply_to(schedule.activities)

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence


@dataclass
class Activity:
    """Represents a project activity with all scheduling attributes."""

    id: int
    name: str = ""
    duration: int = 0
    successors: List[int] = field(default_factory=list)

    # Forward pass results
    early_start: Optional[int] = None
    early_finish: Optional[int] = None

    # Backward pass results
    late_start: Optional[int] = None
    late_finish: Optional[int] = None

    # Float calculations
    total_float: Optional[int] = None  # Total Float (TF)
    free_float: Optional[int] = None   # Free Float (FF)

    # Critical path flag
    is_critical: bool = False

    def reset_calculations(self) -> None:
        """Reset all calculated values."""
        self.early_start = None
        self.early_finish = None
        self.late_start = None
        self.late_finish = None
        self.total_float = None
        self.free_float = None
        self.is_critical = False


@dataclass
class Schedule:
    """A start offset plus the activities it applies to."""

    start_date: int
    activities: List[Activity] = field(default_factory=list)
    name: Optional[str] = None

    @classmethod
    def select(
        cls,
        start_date: int,
        activities: Iterable[Activity],
        activity_ids: Iterable[int],
        name: Optional[str] = None,
    ) -> "Schedule":
        """
        Build a schedule from a descriptor over a larger activity collection.

        Ids in ``activity_ids`` that match no activity are ignored; successor
        links leading outside the selected subset are reported when the
        schedule is built.
        """
        wanted = set(activity_ids)
        chosen = [act for act in activities if act.id in wanted]
        return cls(start_date=start_date, activities=chosen, name=name)


@dataclass(frozen=True)
class ActivityTimes:
    """Computed schedule values for one activity."""

    activity_id: int
    name: str
    duration: int
    early_start: int
    early_finish: int
    late_start: int
    late_finish: int
    total_float: int
    free_float: int
    is_critical: bool


@dataclass(frozen=True)
class ScheduleResult:
    name: str
    start_date: int
    project_finish: int
    activities: Dict[int, ActivityTimes]
    critical_paths: List[List[int]] = field(default_factory=list)
    log: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.activities

    @property
    def project_duration(self) -> int:
        return self.project_finish - self.start_date

    @property
    def critical_activities(self) -> List[int]:
        return sorted(a_id for a_id, times in self.activities.items() if times.is_critical)

    def ordered(self) -> List[ActivityTimes]:
        """Activities ordered by (id, name) ascending."""
        return sorted(self.activities.values(), key=lambda t: (t.activity_id, t.name))

    def apply_to(self, activities: Sequence[Activity]) -> None:
        """Write computed values back onto live activities, matched by id."""
        for act in activities:
            times = self.activities.get(act.id)
            if times is None:
                continue
            act.early_start = times.early_start
            act.early_finish = times.early_finish
            act.late_start = times.late_start
            act.late_finish = times.late_finish
            act.total_float = times.total_float
            act.free_float = times.free_float
            act.is_critical = times.is_critical


@dataclass(frozen=True)
class ProjectResult:
    schedules: List[ScheduleResult]
    report: str

    def schedule(self, name: str) -> ScheduleResult:
        for result in self.schedules:
            if result.name == name:
                return result
        raise KeyError(name)

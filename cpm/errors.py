from __future__ import annotations

from typing import Sequence, Tuple


class CPMError(Exception):
    """Base class for errors raised by the scheduling engine."""


class GraphError(CPMError):
    """The activity set cannot be turned into a valid precedence network."""


class InvalidDuration(GraphError):
    def __init__(self, activity_id: int, duration: object = None):
        self.activity_id = activity_id
        self.duration = duration
        super().__init__(
            f"Activity '{activity_id}' has an invalid duration ({duration!r}). "
            "Duration must be a non-negative integer."
        )


class DanglingReference(GraphError):
    def __init__(self, activity_id: int, missing_id: int):
        self.activity_id = activity_id
        self.missing_id = missing_id
        super().__init__(
            f"Activity '{activity_id}' references undefined successor '{missing_id}'."
        )


class CyclicDependency(GraphError):
    def __init__(self, cycle_members: Sequence[int]):
        self.cycle_members: Tuple[int, ...] = tuple(cycle_members)
        path = list(self.cycle_members)
        if path:
            path.append(path[0])
        super().__init__(
            f"Circular dependency detected: {' -> '.join(str(m) for m in path)}"
        )


class DuplicateActivityId(GraphError):
    def __init__(self, activity_id: int):
        self.activity_id = activity_id
        super().__init__(f"Activity '{activity_id}' already exists.")


class ScheduleConsistencyError(CPMError):
    """Forward and backward pass results disagree for an activity."""

    def __init__(self, activity_id: int, message: str):
        self.activity_id = activity_id
        super().__init__(f"Activity '{activity_id}': {message}")


class InvalidStartDate(CPMError):
    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid start date input: {value!r}. Start date must be an integer.")

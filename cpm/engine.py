from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from .errors import GraphError, ScheduleConsistencyError
from .graph import ActivityGraph, build_graph
from .models import Activity, ActivityTimes, ScheduleResult

logger = logging.getLogger(__name__)

LogFn = Callable[[str], None]


def _no_log(message: str) -> None:
    return None


@dataclass(frozen=True)
class ForwardPass:
    times: Dict[int, Tuple[int, int]]  # id -> (ES, EF)
    project_early_finish: int

    def early_start(self, activity_id: int) -> int:
        return self.times[activity_id][0]

    def early_finish(self, activity_id: int) -> int:
        return self.times[activity_id][1]


def forward_pass(graph: ActivityGraph, start_offset: int, log: Optional[LogFn] = None) -> ForwardPass:
    """
    Forward pass calculation to determine Early Start (ES) and Early Finish (EF).

    An activity starts at ``start_offset`` when it has no predecessors,
    otherwise as soon as its slowest predecessor finishes.
    """
    log = log or _no_log
    times: Dict[int, Tuple[int, int]] = {}

    for act_id in graph.order:
        duration = graph.duration(act_id)
        preds = graph.predecessors(act_id)

        if not preds:
            es = start_offset
            log(f"\n{act_id} (no predecessors):")
            log(f"  ES = Project Start = {es}")
        else:
            log(f"\n{act_id} (predecessors: {', '.join(str(p) for p in preds)}):")
            for pred_id in preds:
                log(f"  From {pred_id}: ES >= EF({pred_id}) = {times[pred_id][1]}")
            es = max(times[pred_id][1] for pred_id in preds)
            log(f"  -> ES = {es}")

        ef = es + duration
        log(f"  EF = ES + Duration = {es} + {duration} = {ef}")
        times[act_id] = (es, ef)

    project_early_finish = max((ef for _, ef in times.values()), default=start_offset)
    log(f"\nProject Finish = max(all EF values) = {project_early_finish}")
    return ForwardPass(times, project_early_finish)


def backward_pass(
    graph: ActivityGraph,
    project_early_finish: int,
    forward: ForwardPass,
    log: Optional[LogFn] = None,
) -> Dict[int, Tuple[int, int]]:
    """
    Backward pass calculation to determine Late Start (LS) and Late Finish (LF).

    An activity must finish by the project finish when it has no successors,
    otherwise before its tightest successor has to start.
    """
    log = log or _no_log
    times: Dict[int, Tuple[int, int]] = {}

    for act_id in graph.reverse_order():
        if act_id not in forward.times:
            raise ScheduleConsistencyError(act_id, "missing forward pass result")
        duration = graph.duration(act_id)
        succs = graph.successors(act_id)

        if not succs:
            lf = project_early_finish
            log(f"\n{act_id} (no successors):")
            log(f"  LF = Project Finish = {lf}")
        else:
            log(f"\n{act_id} (successors: {', '.join(str(s) for s in succs)}):")
            for succ_id in succs:
                log(f"  To {succ_id}: LF <= LS({succ_id}) = {times[succ_id][0]}")
            lf = min(times[succ_id][0] for succ_id in succs)
            log(f"  -> LF = {lf}")

        ls = lf - duration
        log(f"  LS = LF - Duration = {lf} - {duration} = {ls}")
        times[act_id] = (ls, lf)

    return times


def resolve_float(
    forward: ForwardPass,
    backward: Dict[int, Tuple[int, int]],
    log: Optional[LogFn] = None,
) -> Dict[int, Tuple[int, bool]]:
    """
    Calculate Total Float (TF) and the critical flag for every activity.

    Raises:
        ScheduleConsistencyError: LS - ES and LF - EF disagree, or the float
            is negative. Either means the passes were fed inconsistent data.
    """
    log = log or _no_log
    floats: Dict[int, Tuple[int, bool]] = {}

    for act_id in sorted(forward.times):
        if act_id not in backward:
            raise ScheduleConsistencyError(act_id, "missing backward pass result")
        es, ef = forward.times[act_id]
        ls, lf = backward[act_id]
        total_float = ls - es
        if lf - ef != total_float:
            raise ScheduleConsistencyError(
                act_id, f"LS - ES = {total_float} but LF - EF = {lf - ef}"
            )
        if total_float < 0:
            raise ScheduleConsistencyError(act_id, f"negative total float {total_float}")

        is_critical = total_float == 0
        floats[act_id] = (total_float, is_critical)
        log(
            f"{act_id}: TF = LS - ES = {ls} - {es} = {total_float} -> "
            f"{'CRITICAL' if is_critical else 'Not critical'}"
        )

    return floats


def free_float(graph: ActivityGraph, forward: ForwardPass) -> Dict[int, int]:
    """Free Float (FF): delay absorbable without moving any successor's ES."""
    result: Dict[int, int] = {}
    for act_id in graph.order:
        ef = forward.early_finish(act_id)
        succs = graph.successors(act_id)
        if not succs:
            result[act_id] = forward.project_early_finish - ef
        else:
            result[act_id] = min(forward.early_start(s) for s in succs) - ef
    return result


def critical_paths(
    graph: ActivityGraph,
    forward: ForwardPass,
    floats: Dict[int, Tuple[int, bool]],
) -> List[List[int]]:
    """
    One ordered critical chain per critical starting activity.

    A chain starts at a critical activity that no critical activity drives
    (``ES(succ) == EF(pred)``) and follows the smallest-id driving critical
    successor until it reaches an activity with none. Chains are listed by
    the (ES, id) of their first activity.
    """
    driven: Set[int] = set()
    next_link: Dict[int, int] = {}

    for act_id in graph.order:
        if not floats[act_id][1]:
            continue
        finish = forward.early_finish(act_id)
        # successors() is sorted, so the first driving link has the smallest id
        for succ_id in graph.successors(act_id):
            if floats[succ_id][1] and forward.early_start(succ_id) == finish:
                driven.add(succ_id)
                next_link.setdefault(act_id, succ_id)

    starts = [a_id for a_id in graph.order if floats[a_id][1] and a_id not in driven]
    starts.sort(key=lambda a_id: (forward.early_start(a_id), a_id))

    paths: List[List[int]] = []
    for start in starts:
        chain = [start]
        while chain[-1] in next_link:
            chain.append(next_link[chain[-1]])
        paths.append(chain)
    return paths


class CPMScheduler:
    """
    Critical Path Method scheduler for a single schedule.

    Runs graph build, forward pass, backward pass and float resolution, and
    keeps a human-readable trace of every step in ``calculation_log``.
    """

    def __init__(self, project_start: int = 0, log_details: bool = True):
        self.project_start = project_start
        self.log_details = log_details
        self.calculation_log: List[str] = []

    def _log(self, message: str) -> None:
        self.calculation_log.append(message)

    def _detail(self, message: str) -> None:
        if self.log_details:
            self.calculation_log.append(message)

    def schedule(
        self,
        activities: Iterable[Activity],
        start_date: Optional[int] = None,
        name: str = "Schedule",
    ) -> ScheduleResult:
        """
        Perform the full CPM calculation for one set of activities.

        Raises:
            GraphError: the activity set is not a valid precedence network.
        """
        start = self.project_start if start_date is None else start_date
        self.calculation_log.clear()
        self._log("=" * 70)
        self._log(f"CPM CALCULATION: {name}")
        self._log(f"Start Date: {start}")
        self._log("=" * 70)

        try:
            graph = build_graph(activities)
        except GraphError as exc:
            self._log(f"ERROR: {exc}")
            logger.error("Schedule '%s' rejected: %s", name, exc)
            raise

        if not len(graph):
            self._log("Schedule has no activities; nothing to calculate.")
            logger.warning("Schedule '%s' has no activities", name)
            return ScheduleResult(name, start, start, {}, [], list(self.calculation_log))

        self._detail("\nFORWARD PASS (Calculating ES and EF)")
        self._detail("-" * 50)
        forward = forward_pass(graph, start, log=self._detail)

        self._detail("\n\nBACKWARD PASS (Calculating LS and LF)")
        self._detail("-" * 50)
        backward = backward_pass(graph, forward.project_early_finish, forward, log=self._detail)

        self._detail("\n\nFLOAT CALCULATIONS")
        self._detail("-" * 50)
        floats = resolve_float(forward, backward, log=self._detail)
        free = free_float(graph, forward)
        paths = critical_paths(graph, forward, floats)

        times: Dict[int, ActivityTimes] = {}
        for act_id in graph.order:
            act = graph.activities[act_id]
            es, ef = forward.times[act_id]
            ls, lf = backward[act_id]
            total_float, is_critical = floats[act_id]
            times[act_id] = ActivityTimes(
                activity_id=act_id,
                name=act.name,
                duration=graph.duration(act_id),
                early_start=es,
                early_finish=ef,
                late_start=ls,
                late_finish=lf,
                total_float=total_float,
                free_float=free[act_id],
                is_critical=is_critical,
            )

        self._log("")
        self._log("=" * 70)
        self._log("CALCULATION COMPLETE")
        self._log(f"Project Finish: {forward.project_early_finish}")
        if paths:
            self._log(f"Critical Paths: {len(paths)}")
            for idx, path in enumerate(paths, start=1):
                self._log(f"  {idx}. {' -> '.join(str(n) for n in path)}")
        else:
            self._log("Critical Path: (none)")
        self._log("=" * 70)

        logger.info(
            "Scheduled '%s': %d activities, finish %d, %d critical",
            name, len(times), forward.project_early_finish,
            sum(1 for t in times.values() if t.is_critical),
        )
        return ScheduleResult(
            name=name,
            start_date=start,
            project_finish=forward.project_early_finish,
            activities=times,
            critical_paths=paths,
            log=list(self.calculation_log),
        )

from __future__ import annotations

import logging
import numbers
from typing import Dict, Iterable, List

import networkx as nx

from .errors import CyclicDependency, DanglingReference, DuplicateActivityId, InvalidDuration
from .models import Activity

logger = logging.getLogger(__name__)


class ActivityGraph:
    """
    Validated activity-on-node precedence network.

    Nodes are activity ids; an edge ``a -> b`` means ``b`` is a successor of
    ``a``. Predecessors are the inverted edges and are never stored on the
    activities themselves.
    """

    def __init__(self, activities: Dict[int, Activity], digraph: nx.DiGraph, order: List[int]):
        self.activities = activities
        self.digraph = digraph
        self.order = order
        self.sources: List[int] = [n for n in order if digraph.in_degree(n) == 0]
        self.sinks: List[int] = [n for n in order if digraph.out_degree(n) == 0]

    def __len__(self) -> int:
        return len(self.activities)

    def __contains__(self, activity_id: object) -> bool:
        return activity_id in self.activities

    def duration(self, activity_id: int) -> int:
        return int(self.activities[activity_id].duration)

    def successors(self, activity_id: int) -> List[int]:
        return sorted(self.digraph.successors(activity_id))

    def predecessors(self, activity_id: int) -> List[int]:
        return sorted(self.digraph.predecessors(activity_id))

    def reverse_order(self) -> List[int]:
        return list(reversed(self.order))


def _is_valid_duration(duration: object) -> bool:
    if isinstance(duration, bool) or not isinstance(duration, numbers.Integral):
        return False
    return duration >= 0


def build_graph(activities: Iterable[Activity]) -> ActivityGraph:
    """
    Build and validate the precedence network for a set of activities.

    Checks, in order:
    - Duplicate activity ids
    - Invalid durations and undefined successor references, by ascending id
    - Circular dependencies (including self-references)

    Raises:
        GraphError: the first problem found. Inputs are never modified.
    """
    by_id: Dict[int, Activity] = {}
    for act in activities:
        if act.id in by_id:
            logger.error("Duplicate activity id %s", act.id)
            raise DuplicateActivityId(act.id)
        by_id[act.id] = act

    G = nx.DiGraph()
    for act_id in sorted(by_id):
        act = by_id[act_id]
        if not _is_valid_duration(act.duration):
            logger.error("Activity %s has invalid duration %r", act_id, act.duration)
            raise InvalidDuration(act_id, act.duration)
        G.add_node(act_id)
        for succ_id in act.successors:
            if succ_id not in by_id:
                logger.error("Activity %s references undefined successor %s", act_id, succ_id)
                raise DanglingReference(act_id, succ_id)
            G.add_edge(act_id, succ_id)

    try:
        # Kahn's algorithm, ties broken by the smallest id
        order = list(nx.lexicographical_topological_sort(G))
    except nx.NetworkXUnfeasible:
        cycle = nx.find_cycle(G, source=sorted(G.nodes))
        members = [u for u, _ in cycle]
        logger.error("Circular dependency between activities %s", members)
        raise CyclicDependency(members) from None

    logger.debug("Built network with %d activities and %d links", G.number_of_nodes(), G.number_of_edges())
    return ActivityGraph(by_id, G, order)

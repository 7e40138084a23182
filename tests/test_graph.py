import unittest

from cpm.errors import (
    CyclicDependency,
    DanglingReference,
    DuplicateActivityId,
    GraphError,
    InvalidDuration,
)
from cpm.graph import build_graph
from cpm.models import Activity


class TestBuildGraph(unittest.TestCase):
    def test_derives_predecessors(self):
        graph = build_graph([
            Activity(1, "A", 5, [3]),
            Activity(2, "B", 2, [3]),
            Activity(3, "C", 1, []),
        ])

        self.assertEqual(graph.predecessors(3), [1, 2])
        self.assertEqual(graph.successors(1), [3])
        self.assertEqual(graph.sources, [1, 2])
        self.assertEqual(graph.sinks, [3])
        self.assertEqual(len(graph), 3)
        self.assertIn(2, graph)

    def test_topological_order_breaks_ties_by_id(self):
        graph = build_graph([
            Activity(4, "D", 1, []),
            Activity(3, "C", 1, [1]),
            Activity(2, "B", 1, [4]),
            Activity(1, "A", 1, [4]),
        ])
        self.assertEqual(graph.order, [2, 3, 1, 4])
        self.assertEqual(graph.reverse_order(), [4, 1, 3, 2])

    def test_dangling_reference(self):
        with self.assertRaises(DanglingReference) as ctx:
            build_graph([Activity(1, "A", 1, [99]), Activity(2, "B", 1, [])])
        self.assertEqual(ctx.exception.activity_id, 1)
        self.assertEqual(ctx.exception.missing_id, 99)

    def test_validation_failures_are_logged(self):
        with self.assertLogs("cpm.graph", level="ERROR") as logs:
            with self.assertRaises(DanglingReference):
                build_graph([Activity(1, "A", 1, [99])])
            with self.assertRaises(InvalidDuration):
                build_graph([Activity(1, "A", -1, [])])
            with self.assertRaises(DuplicateActivityId):
                build_graph([Activity(1, "A", 1), Activity(1, "B", 1)])
        self.assertEqual(len(logs.output), 3)

    def test_two_node_cycle(self):
        with self.assertRaises(CyclicDependency) as ctx:
            build_graph([Activity(1, "A", 1, [2]), Activity(2, "B", 1, [1])])
        self.assertEqual(set(ctx.exception.cycle_members), {1, 2})
        self.assertIn("Circular dependency", str(ctx.exception))

    def test_cycle_reports_only_members(self):
        with self.assertRaises(CyclicDependency) as ctx:
            build_graph([
                Activity(1, "A", 1, [2]),
                Activity(2, "B", 1, [3]),
                Activity(3, "C", 1, [4]),
                Activity(4, "D", 1, [2]),
            ])
        self.assertEqual(sorted(ctx.exception.cycle_members), [2, 3, 4])

    def test_self_reference_is_a_cycle(self):
        with self.assertRaises(CyclicDependency) as ctx:
            build_graph([Activity(1, "A", 1, [1])])
        self.assertEqual(ctx.exception.cycle_members, (1,))

    def test_negative_duration(self):
        with self.assertRaises(InvalidDuration) as ctx:
            build_graph([Activity(1, "A", 2, [2]), Activity(2, "B", -1, [])])
        self.assertEqual(ctx.exception.activity_id, 2)

    def test_non_integer_duration(self):
        with self.assertRaises(InvalidDuration):
            build_graph([Activity(1, "A", 1.5, [])])
        with self.assertRaises(InvalidDuration):
            build_graph([Activity(1, "A", True, [])])

    def test_duplicate_id(self):
        with self.assertRaises(DuplicateActivityId) as ctx:
            build_graph([Activity(1, "A", 1), Activity(1, "B", 2)])
        self.assertEqual(ctx.exception.activity_id, 1)

    def test_errors_share_base_class(self):
        for bad in (
            [Activity(1, "A", -3)],
            [Activity(1, "A", 1, [7])],
            [Activity(1, "A", 1, [1])],
        ):
            with self.assertRaises(GraphError):
                build_graph(bad)

    def test_first_error_by_ascending_id(self):
        with self.assertRaises(InvalidDuration) as ctx:
            build_graph([Activity(5, "E", 1, [42]), Activity(2, "B", -1, [])])
        self.assertEqual(ctx.exception.activity_id, 2)

    def test_does_not_mutate_input(self):
        activities = [Activity(1, "A", 1, [2, 2]), Activity(2, "B", 1, [])]
        build_graph(activities)
        self.assertEqual(activities[0].successors, [2, 2])
        self.assertIsNone(activities[0].early_start)

    def test_empty(self):
        graph = build_graph([])
        self.assertEqual(graph.order, [])
        self.assertEqual(graph.sources, [])
        self.assertEqual(graph.sinks, [])


if __name__ == "__main__":
    unittest.main()

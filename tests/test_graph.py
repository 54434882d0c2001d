"""Tests for the self-intersection graph and loop extraction."""

import math

import numpy as np
import pytest

from polyoffset import CombinatorialExplosionError, OffsetTolerances, build_raw_offset, split_into_loops
from polyoffset.ops.graph import NodeIndex, build_intersection_graph, half_edge_order
from polyoffset.ops.intersections import candidate_pairs, find_self_intersections


BOWTIE = [(0, 0), (2, 2), (2, 0), (0, 2)]
TOLERANCES = OffsetTolerances.for_extent(10.0)


class TestFindSelfIntersections:
    """Tests for pairwise segment intersection search."""

    def test_bowtie_single_crossing(self):
        """Test the two diagonals of a bowtie cross once at the center."""
        result = find_self_intersections(np.array(BOWTIE, dtype=float), TOLERANCES)

        assert len(result) == 1
        assert (int(result.first[0]), int(result.second[0])) == (0, 2)
        np.testing.assert_allclose(result.points[0], [1, 1])
        assert result.first_param[0] == pytest.approx(0.5)
        assert result.second_param[0] == pytest.approx(0.5)

    def test_simple_polygon_has_none(self):
        """Test a simple polygon has no intersections."""
        square = np.array([(0, 0), (10, 0), (10, 10), (0, 10)], dtype=float)
        result = find_self_intersections(square, TOLERANCES)

        assert len(result) == 0
        assert result.points.shape == (0, 2)

    def test_limit_exceeded(self):
        """Test exceeding max_intersections raises."""
        with pytest.raises(CombinatorialExplosionError) as exc_info:
            find_self_intersections(np.array(BOWTIE, dtype=float), TOLERANCES, max_intersections=0)

        assert exc_info.value.count == 1
        assert exc_info.value.limit == 0
        assert "limit is 0" in str(exc_info.value)

    def test_limit_not_exceeded(self):
        """Test reaching but not exceeding the limit is allowed."""
        result = find_self_intersections(np.array(BOWTIE, dtype=float), TOLERANCES, max_intersections=1)
        assert len(result) == 1


class TestCandidatePairs:
    """Tests for the STRtree candidate search."""

    def test_adjacent_segments_excluded(self):
        """Test segments sharing a vertex are never paired."""
        points = np.array([(0, 0), (1, 0), (1, 1), (0, 1)], dtype=float)
        segments = np.stack([points, np.roll(points, -1, axis=0)], axis=1)
        pairs = candidate_pairs(segments, 2.0)

        assert [tuple(p) for p in pairs] == [(0, 2), (1, 3)]

    def test_pairs_sorted(self):
        """Test pairs come out in lexicographic order."""
        points = np.array(
            [(0, 0), (4, 4), (4, 0), (0, 4), (2, -1), (2, 5)], dtype=float
        )
        segments = np.stack([points, np.roll(points, -1, axis=0)], axis=1)
        pairs = candidate_pairs(segments, 0.0)

        assert [tuple(p) for p in pairs] == sorted(tuple(p) for p in pairs)

    def test_too_few_segments(self):
        """Test a triangle has no non-adjacent segment pairs."""
        points = np.array([(0, 0), (1, 0), (0, 1)], dtype=float)
        segments = np.stack([points, np.roll(points, -1, axis=0)], axis=1)

        assert candidate_pairs(segments, 1.0).shape == (0, 2)


class TestNodeIndex:
    """Tests for node merging."""

    def test_close_points_merge(self):
        """Test points within tolerance share a node."""
        index = NodeIndex(1e-9)
        first = index.add(np.array([0.0, 0.0]))
        second = index.add(np.array([1e-12, -1e-12]))
        third = index.add(np.array([1.0, 0.0]))

        assert first == second
        assert third != first
        assert len(index) == 2

    def test_first_point_is_representative(self):
        """Test the first point of a cluster keeps its coordinates."""
        index = NodeIndex(0.1)
        index.add(np.array([0.05, 0.05]))
        index.add(np.array([0.1, 0.1]))

        np.testing.assert_array_equal(index.points[0], [0.05, 0.05])

    def test_merge_across_cell_boundary(self):
        """Test close points in neighbouring grid cells still merge."""
        index = NodeIndex(1.0)
        assert index.add(np.array([0.99, 0.0])) == index.add(np.array([1.01, 0.0]))

    def test_zero_tolerance(self):
        """Test zero tolerance merges exact duplicates only."""
        index = NodeIndex(0.0)
        assert index.add(np.array([1.0, 2.0])) == index.add(np.array([1.0, 2.0]))
        assert len(index) == 1
        index.add(np.array([1.0, 2.0 + 1e-15]))
        assert len(index) == 2


class TestIntersectionGraph:
    """Tests for graph construction and traversal."""

    def test_bowtie_fragments(self):
        """Test the bowtie is cut into six fragments around five nodes."""
        graph = build_intersection_graph(BOWTIE)

        assert len(graph.nodes) == 5
        assert graph.fragment_count == 6
        assert sorted(graph.fragment_segment.tolist()) == [0, 0, 1, 2, 2, 3]

    def test_every_fragment_in_one_loop(self):
        """Test loops partition the fragments."""
        graph = build_intersection_graph(BOWTIE)
        fragments = [f for loop in graph.loops() for f in loop.fragments]

        assert sorted(fragments) == list(range(graph.fragment_count))

    def test_accepts_raw_curve(self):
        """Test a RawOffsetCurve can be passed directly."""
        raw = build_raw_offset([(0, 0), (10, 0), (10, 10), (0, 10)], 1.0, arc_steps=2)
        graph = build_intersection_graph(raw)

        assert graph.fragment_count == len(raw)
        assert len(graph.intersections) == 0

    def test_half_edge_order_normalizes_angles(self):
        """Test negative angles sort after positive ones."""
        assert half_edge_order((-math.pi / 2, 0, 3)) == pytest.approx((1.5 * math.pi, 0, 3))
        assert half_edge_order((0.5, 1, 2)) < half_edge_order((-0.5, 0, 1))


class TestSplitIntoLoops:
    """Tests for split_into_loops."""

    def test_bowtie_two_lobes(self):
        """Test the bowtie splits into two triangles of opposite orientation."""
        loops = split_into_loops(BOWTIE)

        assert sorted(round(loop.area, 9) for loop in loops) == [-1.0, 1.0]
        for loop in loops:
            assert len(loop) == 3

    def test_left_lobe_is_ccw(self):
        """Test the lobe left of the crossing is the counter-clockwise one."""
        loops = split_into_loops(BOWTIE)
        ccw = [loop for loop in loops if loop.area > 0][0]

        assert set(map(tuple, np.round(ccw.points, 9))) == {(0.0, 0.0), (1.0, 1.0), (0.0, 2.0)}

    def test_simple_curve_single_loop(self):
        """Test a simple curve is a single loop."""
        loops = split_into_loops([(0, 0), (10, 0), (10, 10), (0, 10)])

        assert len(loops) == 1
        assert loops[0].area == pytest.approx(100.0)

    def test_loops_visit_each_node_once(self):
        """Test traced loops never repeat a node."""
        raw = build_raw_offset(
            [(0, 0), (10, 0), (10, 4), (20, 4), (20, 0), (30, 0),
             (30, 10), (20, 10), (20, 6), (10, 6), (10, 10), (0, 10)],
            -1.5,
        )
        loops = split_into_loops(raw)

        assert len(loops) > 1
        for loop in loops:
            assert len(set(loop.nodes)) == len(loop.nodes)

    def test_max_intersections(self):
        """Test the intersection cap is honoured."""
        with pytest.raises(CombinatorialExplosionError):
            split_into_loops(BOWTIE, max_intersections=0)

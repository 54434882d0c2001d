"""Self-intersection graph of the raw offset curve and its loops.

The curve is cut at every self-intersection into directed fragments. Curve
vertices and intersection points within ``merge_distance`` of each other
become one node. Everything is stored as index arrays into a node table.

Loops are traced by pairing, at every node, each incoming fragment with one
outgoing fragment. Half-edges are ordered by angle and paired by a
non-crossing stack matching, so the two fragments of a pair always bound a
common sector. Hence the winding number of the raw curve is the same on the
left of every fragment of a loop, loops never cross each other, and every
fragment ends up in exactly one loop.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np

from ..core.config import OffsetTolerances
from ..core.geometry_utils import ring_extent, signed_area
from .intersections import SegmentIntersections, find_self_intersections

logger = logging.getLogger(__name__)


@dataclass
class Loop:
    """Closed cycle of fragments.

    Attributes:
        fragments: Fragment indices in traversal order
        nodes: Start node of each fragment
        points: Coordinates of ``nodes`` (Kx2), first point not repeated
    """
    fragments: List[int]
    nodes: List[int]
    points: np.ndarray

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def area(self) -> float:
        """Signed area, positive for counter-clockwise loops."""
        return signed_area(self.points)


# Grid cell, or the exact coordinates when merging is disabled
Cell = Union[Tuple[int, int], Tuple[float, float]]


class NodeIndex:
    """Merge points closer than ``tolerance`` into shared nodes.

    Uses a uniform grid with cell size ``tolerance``; a new point is matched
    against the nodes of the 3x3 neighbouring cells. The first point of a
    cluster is its representative.
    """

    def __init__(self, tolerance: float):
        self.tolerance = tolerance
        self.points: List[np.ndarray] = []
        self._grid: Dict[Cell, List[int]] = defaultdict(list)

    def _cell(self, point: np.ndarray) -> Cell:
        if self.tolerance <= 0:
            return (float(point[0]), float(point[1]))
        return (math.floor(point[0] / self.tolerance), math.floor(point[1] / self.tolerance))

    def add(self, point: np.ndarray) -> int:
        """Return the node index for ``point``, creating a node if needed."""
        cell = self._cell(point)
        if self.tolerance > 0:
            cx, cy = cell
            for dx in (-1, 0, 1):
                for dy in (-1, 0, 1):
                    for idx in self._grid.get((cx + dx, cy + dy), ()):
                        other = self.points[idx]
                        if math.hypot(other[0] - point[0], other[1] - point[1]) <= self.tolerance:
                            return idx
        elif self._grid.get(cell):
            return self._grid[cell][0]

        idx = len(self.points)
        self.points.append(np.array(point, dtype=float))
        self._grid[cell].append(idx)
        return idx

    def __len__(self) -> int:
        return len(self.points)


@dataclass
class SelfIntersectionGraph:
    """Planar graph of a closed curve cut at its self-intersections.

    Attributes:
        nodes: Node coordinates (Nx2)
        fragment_start: Start node of each fragment
        fragment_end: End node of each fragment
        fragment_segment: Curve segment each fragment was cut from
        intersections: The intersections used to cut the curve
    """
    nodes: np.ndarray
    fragment_start: np.ndarray
    fragment_end: np.ndarray
    fragment_segment: np.ndarray
    intersections: SegmentIntersections = field(default_factory=SegmentIntersections.empty)

    @property
    def fragment_count(self) -> int:
        return len(self.fragment_start)

    def successors(self) -> np.ndarray:
        """Pair every incoming fragment with an outgoing one at each node.

        Returns:
            Array mapping fragment index to the index of the fragment that
            follows it in its loop
        """
        incident: Dict[int, List[Tuple[float, int, int]]] = defaultdict(list)
        for f in range(self.fragment_count):
            start = int(self.fragment_start[f])
            end = int(self.fragment_end[f])
            incident[start].append((self._angle(start, end), 0, f))
            incident[end].append((self._angle(end, start), 1, f))

        successor = np.full(self.fragment_count, -1, dtype=int)
        for node in sorted(incident):
            stack: List[Tuple[int, int]] = []
            for _, incoming, f in sorted(incident[node], key=half_edge_order):
                if stack and stack[-1][0] != incoming:
                    _, other = stack.pop()
                    if incoming:
                        successor[f] = other
                    else:
                        successor[other] = f
                else:
                    stack.append((incoming, f))
        return successor

    def loops(self) -> List[Loop]:
        """Trace all loops; each fragment belongs to exactly one loop."""
        successor = self.successors()
        visited = np.zeros(self.fragment_count, dtype=bool)
        loops: List[Loop] = []

        for first in range(self.fragment_count):
            if visited[first]:
                continue
            cycle: List[int] = []
            f = first
            while not visited[f]:
                visited[f] = True
                cycle.append(f)
                f = int(successor[f])
            for fragments in self._split_at_repeated_nodes(cycle):
                nodes = [int(self.fragment_start[f]) for f in fragments]
                loops.append(Loop(fragments=fragments, nodes=nodes, points=self.nodes[nodes]))
        return loops

    def _angle(self, origin: int, target: int) -> float:
        delta = self.nodes[target] - self.nodes[origin]
        return math.atan2(delta[1], delta[0])

    def _split_at_repeated_nodes(self, cycle: List[int]) -> List[List[int]]:
        """Cut a cycle into sub-cycles that visit each node at most once."""
        pieces: List[List[int]] = []
        path: List[int] = []
        position: Dict[int, int] = {}

        for f in cycle:
            start = int(self.fragment_start[f])
            if start in position:
                cut = position[start]
                piece = path[cut:]
                del path[cut:]
                for g in piece:
                    position.pop(int(self.fragment_start[g]), None)
                pieces.append(piece)
            position[start] = len(path)
            path.append(f)

        if path:
            pieces.append(path)
        return pieces


def half_edge_order(half_edge: Tuple[float, int, int]) -> Tuple[float, int, int]:
    """Deterministic angular order of the half-edges around a node.

    Sorts by angle in [0, 2*pi), then outgoing before incoming, then fragment
    index, so coincident fragments are always paired the same way.
    """
    angle, incoming, fragment = half_edge
    return (angle % (2.0 * math.pi), incoming, fragment)


def build_intersection_graph(
    points: Any,
    tolerances: Optional[OffsetTolerances] = None,
    max_intersections: Optional[int] = None,
) -> SelfIntersectionGraph:
    """Cut a closed curve at its self-intersections.

    Args:
        points: Closed curve vertices (Mx2) or a ``RawOffsetCurve``
        tolerances: Numeric tolerances (default: scaled to the curve extent)
        max_intersections: Optional cap on the number of intersections

    Returns:
        SelfIntersectionGraph whose fragments cover the curve exactly once

    Raises:
        CombinatorialExplosionError: If ``max_intersections`` is exceeded
    """
    points = np.asarray(getattr(points, 'points', points), dtype=float)
    if tolerances is None:
        tolerances = OffsetTolerances.for_extent(ring_extent(points))

    m = len(points)
    if m < 2:
        return SelfIntersectionGraph(
            nodes=np.empty((0, 2)),
            fragment_start=np.empty(0, dtype=int),
            fragment_end=np.empty(0, dtype=int),
            fragment_segment=np.empty(0, dtype=int),
        )

    intersections = find_self_intersections(points, tolerances, max_intersections)

    index = NodeIndex(tolerances.merge_distance)
    vertex_nodes = [index.add(point) for point in points]
    crossing_nodes = [index.add(point) for point in intersections.points]

    cuts: List[List[Tuple[float, int]]] = [[] for _ in range(m)]
    for i in range(len(intersections)):
        node = crossing_nodes[i]
        cuts[int(intersections.first[i])].append((float(intersections.first_param[i]), node))
        cuts[int(intersections.second[i])].append((float(intersections.second_param[i]), node))

    starts: List[int] = []
    ends: List[int] = []
    segments: List[int] = []
    for k in range(m):
        chain = [vertex_nodes[k]]
        chain.extend(node for _, node in sorted(cuts[k]))
        chain.append(vertex_nodes[(k + 1) % m])
        for a, b in zip(chain, chain[1:]):
            if a != b:
                starts.append(a)
                ends.append(b)
                segments.append(k)

    logger.debug(
        "intersection graph: %d curve points, %d intersections, %d nodes, %d fragments",
        m, len(intersections), len(index), len(starts),
    )
    return SelfIntersectionGraph(
        nodes=np.array(index.points) if len(index) else np.empty((0, 2)),
        fragment_start=np.array(starts, dtype=int),
        fragment_end=np.array(ends, dtype=int),
        fragment_segment=np.array(segments, dtype=int),
        intersections=intersections,
    )


def split_into_loops(
    raw_curve: Any,
    tolerances: Optional[OffsetTolerances] = None,
    max_intersections: Optional[int] = None,
) -> List[Loop]:
    """Split a self-intersecting closed curve into simple, non-crossing loops.

    Args:
        raw_curve: ``RawOffsetCurve`` or closed curve vertices (Mx2)
        tolerances: Numeric tolerances (default: scaled to the curve extent)
        max_intersections: Optional cap on the number of intersections

    Returns:
        Loops that together use every fragment of the curve exactly once

    Examples:
        >>> bowtie = [(0, 0), (2, 2), (2, 0), (0, 2)]
        >>> sorted(round(loop.area, 6) for loop in split_into_loops(bowtie))
        [-1.0, 1.0]
    """
    graph = build_intersection_graph(raw_curve, tolerances, max_intersections)
    loops = graph.loops()
    logger.debug("%d loops traced", len(loops))
    return loops


__all__ = [
    'Loop',
    'NodeIndex',
    'SelfIntersectionGraph',
    'build_intersection_graph',
    'half_edge_order',
    'split_into_loops',
]

"""Raw offset curve construction.

Every edge of the input ring is translated along its outward normal by the
offset distance, and consecutive shifted edges are reconnected at each input
vertex by one of the ``JoinKind`` variants. The result is a closed polyline
that self-intersects wherever the offset exceeds the local feature size;
cleaning that up is the job of :mod:`polyoffset.ops.graph` and
:mod:`polyoffset.ops.classify`.

The builder works on a counter-clockwise copy of the ring. A clockwise input
is reversed (keeping its first vertex first) and the curve records that, so
callers can restore the original orientation on the final rings.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional

import numpy as np

from ..core.config import OffsetTolerances
from ..core.geometry_utils import (
    cross2d,
    dot2d,
    edge_vectors,
    outward_normals,
    ring_extent,
    signed_area,
)
from ..core.types import CornerJoin, JoinKind
from ..core.validation_utils import as_open_ring, check_offset_parameters, check_ring_edges

logger = logging.getLogger(__name__)


@dataclass
class RawOffsetCurve:
    """Closed, possibly self-intersecting offset curve.

    Attributes:
        points: Curve vertices (Mx2), first point not repeated
        joins: One corner join per vertex of the working ring
        distance: Signed offset distance used to build the curve
        ring: Counter-clockwise working copy of the input ring
        reversed_input: True if the input was clockwise and was reversed
    """
    points: np.ndarray
    joins: List[CornerJoin] = field(default_factory=list)
    distance: float = 0.0
    ring: Optional[np.ndarray] = None
    reversed_input: bool = False

    def __len__(self) -> int:
        return len(self.points)

    def segments(self) -> np.ndarray:
        """Return the curve segments as an (Mx2x2) array, closing segment included."""
        return np.stack([self.points, np.roll(self.points, -1, axis=0)], axis=1)


def to_ccw(ring: np.ndarray) -> tuple:
    """Return ``(ccw_ring, reversed)`` with the first vertex kept in place."""
    if signed_area(ring) >= 0:
        return ring, False
    return np.roll(ring[::-1], 1, axis=0), True


def _arc_points(
    vertex: np.ndarray,
    normal_in: np.ndarray,
    sweep: float,
    distance: float,
    arc_steps: int,
    steps_per_circle: Optional[int],
) -> np.ndarray:
    """Interior points of the arc about ``vertex`` starting at the incoming normal."""
    start = math.atan2(normal_in[1], normal_in[0])

    if steps_per_circle is not None:
        increment = 2.0 * math.pi / steps_per_circle
        count = max(math.ceil(abs(sweep) / increment - 1e-9) - 1, 0)
        step = math.copysign(increment, sweep)
        angles = [start + k * step for k in range(1, count + 1)]
    else:
        angles = [start + sweep * k / (arc_steps + 1) for k in range(1, arc_steps + 1)]

    if not angles:
        return np.empty((0, 2))
    angles = np.array(angles)
    return np.column_stack([
        vertex[0] + distance * np.cos(angles),
        vertex[1] + distance * np.sin(angles),
    ])


def _corner_join(
    index: int,
    vertex: np.ndarray,
    dir_in: np.ndarray,
    dir_out: np.ndarray,
    normal_in: np.ndarray,
    normal_out: np.ndarray,
    end_in: np.ndarray,
    start_out: np.ndarray,
    len_in: float,
    len_out: float,
    distance: float,
    arc_steps: int,
    miter_limit: float,
    steps_per_circle: Optional[int],
    tolerances: OffsetTolerances,
) -> CornerJoin:
    theta = math.atan2(float(cross2d(dir_in, dir_out)), float(dot2d(dir_in, dir_out)))

    if abs(theta) <= tolerances.collinear_angle:
        point = 0.5 * (end_in + start_out)
        return CornerJoin(JoinKind.COLLINEAR, index, theta, point[None, :])

    reversal = abs(theta) >= math.pi - tolerances.collinear_angle
    if theta * distance > 0 or reversal:
        # offset sides diverge
        sweep = math.copysign(math.pi, distance) if reversal else theta
        if arc_steps > 0 or steps_per_circle is not None:
            arc = _arc_points(vertex, normal_in, sweep, distance, arc_steps, steps_per_circle)
            points = np.vstack([end_in[None, :], arc, start_out[None, :]])
            return CornerJoin(JoinKind.ARC, index, theta, points)

        half_cos = math.cos(theta / 2.0)
        if half_cos > 0 and 1.0 / half_cos <= miter_limit:
            bisector = normal_in + normal_out
            miter = vertex + distance * bisector / (1.0 + float(dot2d(normal_in, normal_out)))
            return CornerJoin(JoinKind.MITER, index, theta, miter[None, :])
        return CornerJoin(JoinKind.BEVEL, index, theta, np.vstack([end_in, start_out]))

    # offset sides converge: the shifted edges cross before reaching the corner
    backoff = abs(distance) * math.tan(abs(theta) / 2.0)
    if backoff < 0.5 * len_in and backoff < 0.5 * len_out:
        miter = end_in - backoff * dir_in
        return CornerJoin(JoinKind.MITER, index, theta, miter[None, :])
    return CornerJoin(JoinKind.PIVOT, index, theta, np.vstack([end_in, vertex, start_out]))


def drop_repeated_points(points: np.ndarray, tolerance: float) -> np.ndarray:
    """Remove consecutive points closer than ``tolerance``, wrapping around.

    Args:
        points: Closed curve vertices (Nx2), first point not repeated
        tolerance: Distance below which consecutive points are merged

    Returns:
        Curve without repeated consecutive points (first occurrence kept)
    """
    if len(points) < 2:
        return points.copy()

    kept = [points[0]]
    for point in points[1:]:
        if np.hypot(*(point - kept[-1])) > tolerance:
            kept.append(point)
    while len(kept) > 1 and np.hypot(*(kept[-1] - kept[0])) <= tolerance:
        kept.pop()
    return np.array(kept)


def build_raw_offset(
    points: Any,
    distance: float,
    arc_steps: int = 8,
    miter_limit: float = 5.0,
    steps_per_circle: Optional[int] = None,
    tolerances: Optional[OffsetTolerances] = None,
) -> RawOffsetCurve:
    """Build the raw offset curve of a polygon.

    Each edge is shifted by ``distance`` along its outward normal. At a vertex
    where the shifted edges move apart (convex corner when expanding, reflex
    corner when shrinking) an arc of radius ``|distance|`` about the vertex is
    inserted; with ``arc_steps == 0`` the corner is mitered instead (beveled
    beyond ``miter_limit``). Where the shifted edges converge they are cut at
    their intersection, or routed back through the vertex when that
    intersection is too far along either edge.

    Args:
        points: Polygon vertices (sequence of (x, y), Nx2 array or shapely ring)
        distance: Signed offset distance, positive grows the polygon
        arc_steps: Number of interior points per rounded corner (default: 8)
        miter_limit: Maximum miter length / distance ratio for sharp corners
        steps_per_circle: If set, arcs use a fixed angular increment of
            2*pi/steps_per_circle and ``arc_steps`` is ignored
        tolerances: Numeric tolerances (default: scaled to the polygon extent)

    Returns:
        RawOffsetCurve in counter-clockwise frame

    Raises:
        ValidationError: If the polygon or parameters are malformed

    Examples:
        >>> raw = build_raw_offset([(0, 0), (10, 0), (10, 10), (0, 10)], 2.0, 4)
        >>> len(raw)
        24
    """
    check_offset_parameters(distance, arc_steps)
    ring = as_open_ring(points)
    if tolerances is None:
        tolerances = OffsetTolerances.for_extent(ring_extent(ring) + abs(distance))
    check_ring_edges(ring, tolerances.merge_distance)

    ring, reversed_input = to_ccw(ring)
    distance = float(distance)

    edges = edge_vectors(ring)
    lengths = np.hypot(edges[:, 0], edges[:, 1])
    directions = edges / lengths[:, None]
    normals = outward_normals(ring)
    starts = ring + distance * normals
    ends = np.roll(ring, -1, axis=0) + distance * normals

    joins: List[CornerJoin] = []
    for j in range(len(ring)):
        i = j - 1
        joins.append(_corner_join(
            j, ring[j],
            directions[i], directions[j],
            normals[i], normals[j],
            ends[i], starts[j],
            float(lengths[i]), float(lengths[j]),
            distance, arc_steps, miter_limit, steps_per_circle, tolerances,
        ))

    curve = drop_repeated_points(np.vstack([join.points for join in joins]), tolerances.merge_distance)
    logger.debug(
        "raw offset: %d input vertices, %d curve points, joins=%s",
        len(ring), len(curve),
        {kind.value: sum(1 for join in joins if join.kind is kind) for kind in JoinKind},
    )
    return RawOffsetCurve(
        points=curve,
        joins=joins,
        distance=distance,
        ring=ring,
        reversed_input=reversed_input,
    )


__all__ = [
    'RawOffsetCurve',
    'build_raw_offset',
    'drop_repeated_points',
    'to_ccw',
]

"""Pairwise segment intersection search on a closed polyline.

Candidate pairs come from a shapely ``STRtree`` over the segments, queried
with boxes grown by the merge tolerance so that contacts within tolerance
are not lost to floating point. The exact test runs vectorized over all
candidates. Adjacent segments (which share a vertex) are never tested.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import shapely
from shapely.strtree import STRtree

from ..core.config import OffsetTolerances
from ..core.errors import CombinatorialExplosionError
from ..core.geometry_utils import cross2d

logger = logging.getLogger(__name__)


@dataclass
class SegmentIntersections:
    """Intersections between segments of one closed polyline.

    Segment ``k`` runs from vertex ``k`` to vertex ``k + 1`` (wrapping).
    Row ``i`` of every array describes one intersection.

    Attributes:
        first: Index of the lower-numbered segment
        second: Index of the higher-numbered segment
        first_param: Parametric position along ``first`` in [0, 1]
        second_param: Parametric position along ``second`` in [0, 1]
        points: Intersection coordinates (Kx2)
    """
    first: np.ndarray
    second: np.ndarray
    first_param: np.ndarray
    second_param: np.ndarray
    points: np.ndarray

    def __len__(self) -> int:
        return len(self.first)

    @classmethod
    def empty(cls) -> "SegmentIntersections":
        return cls(
            first=np.empty(0, dtype=int),
            second=np.empty(0, dtype=int),
            first_param=np.empty(0),
            second_param=np.empty(0),
            points=np.empty((0, 2)),
        )


def candidate_pairs(segments: np.ndarray, margin: float) -> np.ndarray:
    """Find pairs of non-adjacent segments whose grown bounding boxes overlap.

    Uses STRtree for efficient spatial indexing. Returns unique pairs (i, j)
    with i < j, sorted lexicographically so downstream processing is
    deterministic.

    Args:
        segments: Segment array (Mx2x2)
        margin: Amount by which each bounding box is grown on every side

    Returns:
        Integer array (Kx2) of segment index pairs
    """
    m = len(segments)
    if m < 4:
        return np.empty((0, 2), dtype=int)

    tree = STRtree(shapely.linestrings(segments))
    lower = segments.min(axis=1) - margin
    upper = segments.max(axis=1) + margin
    boxes = shapely.box(lower[:, 0], lower[:, 1], upper[:, 0], upper[:, 1])
    query_idx, tree_idx = tree.query(boxes)

    keep = query_idx < tree_idx
    first, second = query_idx[keep], tree_idx[keep]
    adjacent = (second - first == 1) | ((first == 0) & (second == m - 1))
    first, second = first[~adjacent], second[~adjacent]

    order = np.lexsort((second, first))
    return np.column_stack([first[order], second[order]]).astype(int)


def find_self_intersections(
    points: np.ndarray,
    tolerances: OffsetTolerances,
    max_intersections: Optional[int] = None,
) -> SegmentIntersections:
    """Compute all intersections between non-adjacent segments of a closed curve.

    Segments ``p + t*r`` and ``q + u*s`` intersect where
    ``t = (q - p) x s / (r x s)`` and ``u = (q - p) x r / (r x s)`` both lie in
    [0, 1]. Each range is widened by ``merge_distance`` (in length units) so
    that a vertex touching another segment is reported; parameters are then
    clamped to [0, 1]. Parallel and collinear pairs are skipped.

    Args:
        points: Closed curve vertices (Mx2), first point not repeated
        tolerances: Numeric tolerances
        max_intersections: Raise if more intersections than this are found

    Returns:
        SegmentIntersections ordered by (first, second)

    Raises:
        CombinatorialExplosionError: If ``max_intersections`` is exceeded
    """
    points = np.asarray(points, dtype=float)
    segments = np.stack([points, np.roll(points, -1, axis=0)], axis=1)
    pairs = candidate_pairs(segments, tolerances.merge_distance)
    if len(pairs) == 0:
        return SegmentIntersections.empty()

    first, second = pairs[:, 0], pairs[:, 1]
    p = segments[first, 0]
    r = segments[first, 1] - p
    q = segments[second, 0]
    s = segments[second, 1] - q

    len_r = np.hypot(r[:, 0], r[:, 1])
    len_s = np.hypot(s[:, 0], s[:, 1])
    denom = cross2d(r, s)
    parallel = np.abs(denom) <= tolerances.parallel_sine * len_r * len_s

    qp = q - p
    safe = np.where(parallel, 1.0, denom)
    t = cross2d(qp, s) / safe
    u = cross2d(qp, r) / safe

    slack_t = tolerances.merge_distance / len_r
    slack_u = tolerances.merge_distance / len_s
    hit = (
        ~parallel
        & (t >= -slack_t) & (t <= 1.0 + slack_t)
        & (u >= -slack_u) & (u <= 1.0 + slack_u)
    )

    count = int(np.count_nonzero(hit))
    if max_intersections is not None and count > max_intersections:
        raise CombinatorialExplosionError(count, max_intersections)

    t = np.clip(t[hit], 0.0, 1.0)
    u = np.clip(u[hit], 0.0, 1.0)
    logger.debug("%d candidate pairs, %d intersections", len(pairs), count)
    return SegmentIntersections(
        first=first[hit],
        second=second[hit],
        first_param=t,
        second_param=u,
        points=p[hit] + t[:, None] * r[hit],
    )


__all__ = [
    'SegmentIntersections',
    'candidate_pairs',
    'find_self_intersections',
]

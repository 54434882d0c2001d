"""Winding-number classification of offset loops.

Every loop traced from the raw curve has the same raw-curve winding number
along its whole left side. The valid offset region is where the raw curve
winds exactly once around a point (in the counter-clockwise working frame,
for both growing and shrinking), so its boundary consists of the loops whose
left side has winding number 1: counter-clockwise loops are outer
boundaries, clockwise ones are holes. Loops around self-overlap artifacts
(winding 0, 2, -1, ...) are dropped.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import numpy as np

from ..core.config import OffsetTolerances
from ..core.geometry_utils import edge_vectors, ring_extent
from ..winding import winding_numbers
from .graph import Loop

logger = logging.getLogger(__name__)

# Winding number of the valid region in the counter-clockwise working frame
INSIDE_WINDING = 1


def probe_points(
    points: np.ndarray,
    probe_distance: float,
    count: int = 3,
) -> np.ndarray:
    """Sample points just left of the midpoints of the longest loop edges.

    Args:
        points: Loop vertices (Kx2), first point not repeated
        probe_distance: Distance from the edge; capped at a tenth of the
            edge length
        count: Maximum number of probes

    Returns:
        Probe points (Px2), longest edge first
    """
    edges = edge_vectors(points)
    lengths = np.hypot(edges[:, 0], edges[:, 1])
    order = np.argsort(-lengths, kind='stable')[:count]
    order = order[lengths[order] > 0]
    if len(order) == 0:
        return np.empty((0, 2))

    mids = points[order] + 0.5 * edges[order]
    left = np.column_stack([-edges[order, 1], edges[order, 0]]) / lengths[order, None]
    offsets = np.minimum(probe_distance, 0.1 * lengths[order])
    return mids + offsets[:, None] * left


def loop_winding(
    loop: Loop,
    curve: np.ndarray,
    tolerances: OffsetTolerances,
) -> Optional[int]:
    """Winding number of ``curve`` on the left side of ``loop``.

    The most common value over the probes wins; ties go to the value seen
    first (the probe of the longest edge).

    Returns:
        Winding number, or None if the loop has no usable edge
    """
    probes = probe_points(loop.points, tolerances.probe_distance)
    if len(probes) == 0:
        return None
    numbers = winding_numbers(curve, probes, tolerances.winding_band)
    values, counts = np.unique(numbers, return_counts=True)
    best = set(values[counts == counts.max()].tolist())
    for number in numbers:
        if int(number) in best:
            return int(number)
    return None


def select_output_loops(
    loops: List[Loop],
    raw_curve: Any,
    tolerances: Optional[OffsetTolerances] = None,
) -> List[Loop]:
    """Keep the loops that bound the valid offset region.

    Args:
        loops: Loops from :func:`polyoffset.ops.graph.split_into_loops`
        raw_curve: ``RawOffsetCurve`` or the curve vertices (Mx2) the loops
            were traced from
        tolerances: Numeric tolerances (default: scaled to the curve extent)

    Returns:
        Loops in input order whose left side has winding number 1; may be
        empty when the offset collapses the polygon
    """
    curve = np.asarray(getattr(raw_curve, 'points', raw_curve), dtype=float)
    if tolerances is None:
        tolerances = OffsetTolerances.for_extent(ring_extent(curve))
    min_area = tolerances.merge_distance ** 2

    kept: List[Loop] = []
    for i, loop in enumerate(loops):
        if len(loop) < 3 or abs(loop.area) <= min_area:
            logger.debug("loop %d dropped: degenerate (%d nodes, area %g)", i, len(loop), loop.area)
            continue
        winding = loop_winding(loop, curve, tolerances)
        if winding == INSIDE_WINDING:
            kept.append(loop)
            logger.debug("loop %d kept: area %g", i, loop.area)
        else:
            logger.debug("loop %d dropped: winding %s", i, winding)
    return kept


__all__ = [
    'INSIDE_WINDING',
    'probe_points',
    'loop_winding',
    'select_output_loops',
]

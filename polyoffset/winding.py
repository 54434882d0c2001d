"""Winding number of a closed curve about a point.

The curve may self-intersect and need not repeat its first point; it is
always treated as closed. The crossing rules follow Dan Sunday's
"inclusion of a point in a polygon": an edge whose start is at or below the
query and whose end is strictly above it is an upward crossing, the reverse
is a downward crossing, so a vertex shared by two edges is counted once.

Offset geometry produces many near-horizontal and near-collinear edges, so
the left/right decision uses a band of half-width ``tolerance`` around each
edge line. A point inside the band counts as left of the edge whether the
edge goes up or down, which is the same as nudging the point slightly to the
left of the boundary. The band is a distance in coordinate units and must be
chosen for the coordinate scale at hand (see ``OffsetTolerances``).
"""

from typing import Any

import numpy as np

from .core.geometry_utils import cross2d


def is_left(p0: Any, p1: Any, point: Any) -> float:
    """Orientation of ``point`` relative to the directed line ``p0 -> p1``.

    Returns:
        Twice the signed area of triangle (p0, p1, point): positive if the
        point is left of the line, negative if right, zero if collinear

    Examples:
        >>> is_left((0, 0), (1, 0), (0.5, 1))
        1.0
    """
    return float(
        (p1[0] - p0[0]) * (point[1] - p0[1]) - (point[0] - p0[0]) * (p1[1] - p0[1])
    )


def winding_numbers(curve: Any, points: Any, tolerance: float = 0.0) -> np.ndarray:
    """Winding number of ``curve`` about each of ``points``.

    Args:
        curve: Closed point sequence (Nx2), closing point optional
        points: Query points (Kx2)
        tolerance: Half-width of the band around each edge inside which a
            query counts as left of that edge

    Returns:
        Integer array of length K
    """
    ring = np.asarray(curve, dtype=float)
    queries = np.atleast_2d(np.asarray(points, dtype=float))
    if len(ring) < 2 or len(queries) == 0:
        return np.zeros(len(queries), dtype=int)

    p0 = ring[None, :, :]
    p1 = np.roll(ring, -1, axis=0)[None, :, :]
    q = queries[:, None, :]
    qy = q[..., 1]

    upward = (p0[..., 1] <= qy) & (p1[..., 1] > qy)
    downward = (p0[..., 1] > qy) & (p1[..., 1] <= qy)

    edges = p1 - p0
    side = cross2d(edges, q - p0)
    band = tolerance * np.hypot(edges[..., 0], edges[..., 1])
    left = side >= -band

    up_count = np.count_nonzero(upward & left, axis=1)
    down_count = np.count_nonzero(downward & ~left, axis=1)
    return (up_count - down_count).astype(int)


def winding_number(curve: Any, point: Any, tolerance: float = 0.0) -> int:
    """Winding number of a closed curve about a single point.

    Args:
        curve: Closed point sequence (Nx2), possibly self-intersecting,
            closing point optional
        point: Query ``(x, y)``; must not lie on the curve (the result is
            deterministic but meaningless there)
        tolerance: Half-width of the left-of-edge band (coordinate units)

    Returns:
        Signed number of times the curve winds counter-clockwise around the
        point

    Examples:
        >>> square = [(0, 0), (1, 0), (1, 1), (0, 1)]
        >>> winding_number(square, (0.5, 0.5))
        1
        >>> winding_number(square[::-1], (0.5, 0.5))
        -1
        >>> winding_number(square, (2, 2))
        0
    """
    return int(winding_numbers(curve, [point], tolerance)[0])


__all__ = [
    'is_left',
    'winding_number',
    'winding_numbers',
]

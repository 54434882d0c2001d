"""Common geometry utilities.

Vector arithmetic on ``(N, 2)`` coordinate arrays, ring orientation and the
conversions between shapely geometries and plain coordinate rings used by
the offset pipeline.
"""

from typing import List

import numpy as np
from shapely.geometry import Polygon, MultiPolygon, GeometryCollection
from shapely.geometry.base import BaseGeometry


def cross2d(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Z component of the cross product of 2D vectors (broadcasts over rows).

    Examples:
        >>> float(cross2d(np.array([1.0, 0.0]), np.array([0.0, 1.0])))
        1.0
    """
    return a[..., 0] * b[..., 1] - a[..., 1] * b[..., 0]


def dot2d(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Dot product of 2D vectors (broadcasts over rows)."""
    return a[..., 0] * b[..., 0] + a[..., 1] * b[..., 1]


def edge_vectors(ring: np.ndarray) -> np.ndarray:
    """Return the edge vectors of an open ring, including the closing edge.

    Args:
        ring: Open ring coordinates (Nx2), first point not repeated

    Returns:
        Array (Nx2) where row i is ``ring[i + 1] - ring[i]`` (wrapping)
    """
    return np.roll(ring, -1, axis=0) - ring


def outward_normals(ring: np.ndarray) -> np.ndarray:
    """Unit normals pointing to the right of each edge.

    For a counter-clockwise ring the right-hand side is the exterior, so a
    positive offset along these normals grows the polygon.

    Args:
        ring: Open ring coordinates (Nx2)

    Returns:
        Array (Nx2) of unit normals, one per edge
    """
    edges = edge_vectors(ring)
    lengths = np.hypot(edges[:, 0], edges[:, 1])
    normals = np.column_stack([edges[:, 1], -edges[:, 0]])
    return normals / lengths[:, None]


def signed_area(ring: np.ndarray) -> float:
    """Shoelace area of an open ring, positive for counter-clockwise order.

    Examples:
        >>> signed_area(np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=float))
        1.0
    """
    if len(ring) < 3:
        return 0.0
    shifted = np.roll(ring, -1, axis=0)
    return float(0.5 * np.sum(cross2d(ring, shifted)))


def is_ccw(ring: np.ndarray) -> bool:
    """True if the open ring is ordered counter-clockwise."""
    return signed_area(ring) > 0


def ring_extent(ring: np.ndarray) -> float:
    """Diagonal of the axis-aligned bounding box of ``ring``."""
    if len(ring) == 0:
        return 0.0
    span = ring.max(axis=0) - ring.min(axis=0)
    return float(np.hypot(span[0], span[1]))


def ring_to_tuples(ring: np.ndarray) -> List[tuple]:
    """Convert an (Nx2) array into a list of ``(x, y)`` float tuples."""
    return [(float(x), float(y)) for x, y in ring]


def polygon_parts(geometry: BaseGeometry) -> List[Polygon]:
    """Extract the non-empty polygons contained in ``geometry``.

    Polygons are returned as-is, MultiPolygons and GeometryCollections are
    flattened. Other geometry types contribute nothing.

    Args:
        geometry: Input geometry

    Returns:
        List of Polygons in the order they appear

    Examples:
        >>> from shapely.geometry import box
        >>> len(polygon_parts(MultiPolygon([box(0, 0, 1, 1), box(2, 0, 3, 1)])))
        2
    """
    if geometry.is_empty:
        return []
    if isinstance(geometry, Polygon):
        return [geometry]
    if isinstance(geometry, (MultiPolygon, GeometryCollection)):
        parts: List[Polygon] = []
        for geom in geometry.geoms:
            parts.extend(polygon_parts(geom))
        return parts
    return []


__all__ = [
    'cross2d',
    'dot2d',
    'edge_vectors',
    'outward_normals',
    'signed_area',
    'is_ccw',
    'ring_extent',
    'ring_to_tuples',
    'polygon_parts',
]

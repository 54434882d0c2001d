"""Input validation for offset operations.

Every check here runs before any offset computation. Failures raise
``ValidationError``; nothing downstream re-validates.
"""

import math
from typing import Any

import numpy as np

from .errors import ValidationError
from .geometry_utils import edge_vectors, signed_area


def is_ring_closed(
    coords: np.ndarray,
    tolerance: float = 0.0
) -> bool:
    """Check if coordinate ring is closed (first == last).

    Args:
        coords: Coordinate array (Nx2)
        tolerance: Tolerance for coordinate comparison

    Returns:
        True if ring is closed (first point equals last point within tolerance)

    Examples:
        >>> is_ring_closed(np.array([[0, 0], [1, 0], [1, 1], [0, 0]]))
        True
        >>> is_ring_closed(np.array([[0, 0], [1, 0], [1, 1]]))
        False
    """
    if len(coords) < 2:
        return False
    return bool(np.allclose(coords[0], coords[-1], rtol=0.0, atol=tolerance))


def as_open_ring(points: Any) -> np.ndarray:
    """Convert polygon input into an open (Nx2) float ring.

    Accepts a sequence of ``(x, y)`` pairs, an (Nx2) array, a shapely
    ``LinearRing`` or a shapely ``Polygon`` without holes (its exterior). A
    closing point equal to the first point is dropped. Z values are not supported.

    Args:
        points: Polygon vertices

    Returns:
        Open ring as a new float array

    Raises:
        ValidationError: If the input is not an (Nx2) array of finite numbers
            with at least 3 points, or a Polygon with interior rings
    """
    if hasattr(points, 'interiors') and len(points.interiors):
        raise ValidationError("polygons with holes are not supported as input")
    if hasattr(points, 'exterior'):
        points = points.exterior.coords
    if hasattr(points, 'coords'):
        points = points.coords

    try:
        ring = np.array(points, dtype=float)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"polygon points must be numeric (x, y) pairs: {exc}") from exc

    if ring.size == 0:
        raise ValidationError("polygon needs at least 3 distinct points, got 0")
    if ring.ndim != 2 or ring.shape[1] != 2:
        raise ValidationError(f"polygon points must have shape (N, 2), got {ring.shape}")
    if not np.all(np.isfinite(ring)):
        raise ValidationError("polygon coordinates must be finite")

    if len(ring) > 1 and is_ring_closed(ring):
        ring = ring[:-1]

    if len(ring) < 3:
        raise ValidationError(f"polygon needs at least 3 distinct points, got {len(ring)}")

    return ring


def check_ring_edges(ring: np.ndarray, min_length: float) -> None:
    """Reject rings with zero-length edges or zero area.

    Args:
        ring: Open ring (Nx2)
        min_length: Edges not longer than this count as zero-length

    Raises:
        ValidationError: On the first zero-length edge, or if the ring
            encloses no area (orientation cannot be determined)
    """
    edges = edge_vectors(ring)
    lengths = np.hypot(edges[:, 0], edges[:, 1])
    short = np.flatnonzero(lengths <= min_length)
    if len(short):
        i = int(short[0])
        raise ValidationError(
            f"zero-length edge between vertex {i} and vertex {(i + 1) % len(ring)}"
        )

    if abs(signed_area(ring)) <= min_length * min_length:
        raise ValidationError("polygon has zero area, orientation is undefined")


def check_offset_parameters(distance: float, arc_steps: int) -> None:
    """Validate the scalar parameters of an offset call.

    Raises:
        ValidationError: If ``distance`` is not finite or ``arc_steps`` is not
            a non-negative integer
    """
    if isinstance(distance, bool) or not isinstance(distance, (int, float, np.floating, np.integer)):
        raise ValidationError(f"distance must be a real number, got {distance!r}")
    if not math.isfinite(distance):
        raise ValidationError(f"distance must be finite, got {distance}")
    if isinstance(arc_steps, bool) or not isinstance(arc_steps, (int, np.integer)):
        raise ValidationError(f"arc_steps must be an integer, got {arc_steps!r}")
    if arc_steps < 0:
        raise ValidationError(f"arc_steps must be non-negative, got {arc_steps}")


__all__ = [
    'is_ring_closed',
    'as_open_ring',
    'check_ring_edges',
    'check_offset_parameters',
]

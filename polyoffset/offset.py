"""Polygon offsetting.

Public entry points for growing or shrinking a polygon by a signed distance.
``offset_polygon`` works on plain coordinate rings; ``offset_geometry``
accepts and returns shapely geometries.

Pipeline: validate -> raw offset curve -> self-intersection loops ->
winding classification -> rings in the caller's orientation.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

import numpy as np
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from .core.config import OffsetConfig
from .core.errors import ValidationError
from .core.geometry_utils import is_ccw, polygon_parts, ring_extent, ring_to_tuples, signed_area
from .core.validation_utils import as_open_ring, check_offset_parameters, check_ring_edges
from .ops.classify import select_output_loops
from .ops.graph import split_into_loops
from .ops.raw_offset import build_raw_offset

logger = logging.getLogger(__name__)

Ring = List[Tuple[float, float]]


def _offset_loops(
    points: Any,
    distance: float,
    arc_steps: int,
    config: OffsetConfig,
) -> Tuple[List[np.ndarray], bool]:
    """Run the pipeline and return the kept loops in counter-clockwise frame.

    Returns:
        ``(loops, reversed_input)``; outer loops are counter-clockwise and
        holes clockwise. For ``distance == 0`` the working ring itself is the
        only loop.
    """
    config.validate()
    check_offset_parameters(distance, arc_steps)
    ring = as_open_ring(points)
    tolerances = config.resolve_tolerances(ring_extent(ring) + abs(distance))
    check_ring_edges(ring, tolerances.merge_distance)

    if distance == 0:
        reversed_input = not is_ccw(ring)
        return [ring[::-1] if reversed_input else ring], reversed_input

    raw = build_raw_offset(
        ring,
        distance,
        arc_steps,
        miter_limit=config.miter_limit,
        steps_per_circle=config.steps_per_circle,
        tolerances=tolerances,
    )
    loops = split_into_loops(raw, tolerances, config.max_intersections)
    kept = select_output_loops(loops, raw, tolerances)
    logger.debug(
        "offset %g: %d raw points, %d loops, %d kept",
        distance, len(raw), len(loops), len(kept),
    )
    return [loop.points for loop in kept], raw.reversed_input


def offset_polygon(
    points: Any,
    distance: float,
    arc_steps: int = 8,
    config: Optional[OffsetConfig] = None,
) -> List[Ring]:
    """Offset a simple polygon by a signed distance.

    Every edge moves ``distance`` along its outward normal. Corners where the
    boundary opens up are rounded with ``arc_steps`` interior points on a
    circle of radius ``|distance|`` (``arc_steps=0`` gives sharp miters).
    Self-intersections of the shifted boundary are resolved, so the result
    is always a set of simple rings: shrinking may split the polygon into
    several pieces or make it vanish, growing may close gaps and leave holes.

    Args:
        points: Polygon vertices as (x, y) pairs, an Nx2 array, a shapely
            LinearRing or a Polygon without holes. Closing point optional, either
            orientation.
        distance: Positive grows the polygon, negative shrinks it, zero
            returns the input ring
        arc_steps: Interior points per rounded corner (default: 8)
        config: Optional OffsetConfig (miter limit, angular arc resolution,
            intersection cap, tolerances)

    Returns:
        List of rings, each a list of (x, y) tuples without a repeated
        closing point. Outer rings keep the input orientation; hole rings
        have the opposite orientation. Empty if the polygon collapses.

    Raises:
        ValidationError: If the polygon or parameters are malformed
        CombinatorialExplosionError: If ``config.max_intersections`` is exceeded

    Examples:
        >>> square = [(0, 0), (10, 0), (10, 10), (0, 10)]
        >>> rings = offset_polygon(square, -1.0)
        >>> sorted((round(x, 9), round(y, 9)) for x, y in rings[0])
        [(1.0, 1.0), (1.0, 9.0), (9.0, 1.0), (9.0, 9.0)]

        >>> offset_polygon(square, -6.0)
        []
    """
    loops, reversed_input = _offset_loops(points, distance, arc_steps, config or OffsetConfig())
    if reversed_input:
        loops = [loop[::-1] for loop in loops]
    return [ring_to_tuples(loop) for loop in loops]


def _assemble_polygons(loops: List[np.ndarray]) -> List[Polygon]:
    """Attach clockwise hole loops to the smallest counter-clockwise loop containing them."""
    shells = [Polygon(loop) for loop in loops if signed_area(loop) > 0]
    holes = [loop for loop in loops if signed_area(loop) < 0]
    assigned: List[List[np.ndarray]] = [[] for _ in shells]

    for hole in holes:
        probe = Polygon(hole).representative_point()
        containing = [i for i, shell in enumerate(shells) if shell.contains(probe)]
        if not containing:
            logger.debug("hole with area %g has no containing shell, dropped", -signed_area(hole))
            continue
        smallest = min(containing, key=lambda i: shells[i].area)
        assigned[smallest].append(hole)

    return [
        Polygon(shell.exterior.coords, shell_holes)
        for shell, shell_holes in zip(shells, assigned)
    ]


def offset_geometry(
    geometry: BaseGeometry,
    distance: float,
    arc_steps: int = 8,
    config: Optional[OffsetConfig] = None,
) -> BaseGeometry:
    """Offset a shapely Polygon or MultiPolygon by a signed distance.

    Each polygon part is offset on its own with :func:`offset_polygon`;
    hole loops created by growing are attached to their enclosing ring and
    parts that grow into each other are merged with ``unary_union``.

    Args:
        geometry: Polygon or MultiPolygon without interior rings
        distance: Positive grows, negative shrinks
        arc_steps: Interior points per rounded corner (default: 8)
        config: Optional OffsetConfig

    Returns:
        Polygon or MultiPolygon; an empty Polygon if everything collapses

    Raises:
        ValidationError: If the geometry is not polygonal or has holes

    Examples:
        >>> from shapely.geometry import box
        >>> offset_geometry(box(0, 0, 10, 10), 1.0, arc_steps=0).area
        144.0
    """
    if not isinstance(geometry, (Polygon, MultiPolygon)):
        raise ValidationError(
            f"expected a Polygon or MultiPolygon, got {type(geometry).__name__}"
        )
    parts = polygon_parts(geometry)
    if any(len(part.interiors) for part in parts):
        raise ValidationError("polygons with holes are not supported as input")

    config = config or OffsetConfig()
    polygons: List[Polygon] = []
    for part in parts:
        loops, _ = _offset_loops(part.exterior.coords, distance, arc_steps, config)
        polygons.extend(_assemble_polygons(loops))

    if not polygons:
        return Polygon()
    if len(parts) > 1:
        return unary_union(polygons)
    if len(polygons) == 1:
        return polygons[0]
    return MultiPolygon(polygons)


__all__ = [
    'offset_polygon',
    'offset_geometry',
]

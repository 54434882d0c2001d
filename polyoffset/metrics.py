"""Measurement helpers for offset results.

Offset rings come back as plain coordinate lists; these helpers turn them
into the few scalar numbers callers and tests compare: total area, ring
count, validity and area change against the input.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import numpy as np
from shapely.geometry import LinearRing

from .core.geometry_utils import signed_area


def _ring_is_valid(ring: Sequence) -> bool:
    if len(ring) < 3:
        return False
    return bool(LinearRing(ring).is_valid)


def measure_offset(
    rings: Sequence[Sequence],
    original: Optional[Sequence] = None,
) -> Dict[str, Any]:
    """Return core metrics for the rings produced by ``offset_polygon``.

    Outer rings and holes have opposite orientation, so the magnitude of the
    summed signed areas is the area of the offset region.

    Args:
        rings: Output rings, each a sequence of (x, y) pairs
        original: Optional input ring to compute ``area_ratio`` against

    Returns:
        Dictionary with ``area``, ``ring_count``, ``is_valid`` and
        ``area_ratio`` (None without a usable original)

    Examples:
        >>> measure_offset([[(0, 0), (2, 0), (2, 2), (0, 2)]], [(0, 0), (1, 0), (1, 1), (0, 1)])
        {'area': 4.0, 'ring_count': 1, 'is_valid': True, 'area_ratio': 4.0}
    """
    area = abs(sum(signed_area(np.asarray(ring, dtype=float)) for ring in rings))
    area_ratio: Optional[float] = None
    if original is not None:
        original_area = abs(signed_area(np.asarray(original, dtype=float)))
        if original_area > 0:
            area_ratio = area / original_area

    return {
        "area": area,
        "ring_count": len(rings),
        "is_valid": all(_ring_is_valid(ring) for ring in rings),
        "area_ratio": area_ratio,
    }


__all__ = [
    "measure_offset",
]

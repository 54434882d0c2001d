"""Type definitions for offset operations.

The way two shifted edges are reconnected at a polygon vertex is a small,
closed set of cases. Each case is a ``JoinKind`` member and a ``CornerJoin``
record carries the points emitted for that vertex.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np


class JoinKind(Enum):
    """How the raw offset curve is routed around one input vertex.

    Attributes:
        ARC: Diverging corner rounded by points on a circle about the vertex
        MITER: Single point where both shifted edges meet
        BEVEL: Diverging corner cut straight across (miter limit exceeded)
        PIVOT: Converging corner routed back through the original vertex
        COLLINEAR: Parallel edges, the shared shifted endpoint is emitted once

    Examples:
        >>> from polyoffset import build_raw_offset, JoinKind
        >>> raw = build_raw_offset([(0, 0), (10, 0), (10, 10), (0, 10)], 1.0, 4)
        >>> {join.kind for join in raw.joins} == {JoinKind.ARC}
        True
    """
    ARC = 'arc'
    MITER = 'miter'
    BEVEL = 'bevel'
    PIVOT = 'pivot'
    COLLINEAR = 'collinear'


@dataclass(frozen=True, eq=False)
class CornerJoin:
    """Points emitted for the corner at input vertex ``vertex``.

    Attributes:
        kind: Join variant
        vertex: Index of the input vertex (in the working ring)
        turn: Signed turn angle in radians from the incoming to the outgoing edge
        points: Array (Kx2) appended to the raw curve for this corner
    """
    kind: JoinKind
    vertex: int
    turn: float
    points: np.ndarray


__all__ = [
    'JoinKind',
    'CornerJoin',
]

"""Polyoffset - Polygon offsetting library.

This library grows and shrinks simple polygons by a signed distance, with
rounded or mitered corners, resolving the self-intersections of the shifted
boundary into simple rings. Geometry I/O and spatial indexing use Shapely.
"""


# Offsetting
from .offset import (
    offset_polygon,
    offset_geometry,
)

# Pipeline stages
from .ops import (
    RawOffsetCurve,
    build_raw_offset,
    Loop,
    split_into_loops,
    select_output_loops,
)

# Winding numbers
from .winding import (
    is_left,
    winding_number,
    winding_numbers,
)

# Metrics
from .metrics import measure_offset

# Core types and configuration
from .core import (
    JoinKind,
    CornerJoin,
    OffsetTolerances,
    OffsetConfig,
)

# Core exceptions
from .core import (
    OffsetError,
    ValidationError,
    CombinatorialExplosionError,
)

__all__ = [

    # Offsetting
    'offset_polygon',
    'offset_geometry',

    # Pipeline stages
    'RawOffsetCurve',
    'build_raw_offset',
    'Loop',
    'split_into_loops',
    'select_output_loops',

    # Winding numbers
    'is_left',
    'winding_number',
    'winding_numbers',

    # Metrics
    'measure_offset',

    # Types and configuration
    'JoinKind',
    'CornerJoin',
    'OffsetTolerances',
    'OffsetConfig',

    # Exceptions
    'OffsetError',
    'ValidationError',
    'CombinatorialExplosionError',
]

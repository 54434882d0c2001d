"""Stages of the offset pipeline.

raw curve (``raw_offset``) -> self-intersection graph and loops (``graph``,
``intersections``) -> winding classification (``classify``).
"""

from .raw_offset import RawOffsetCurve, build_raw_offset
from .intersections import SegmentIntersections, find_self_intersections
from .graph import Loop, SelfIntersectionGraph, build_intersection_graph, split_into_loops
from .classify import select_output_loops

__all__ = [
    'RawOffsetCurve',
    'build_raw_offset',
    'SegmentIntersections',
    'find_self_intersections',
    'Loop',
    'SelfIntersectionGraph',
    'build_intersection_graph',
    'split_into_loops',
    'select_output_loops',
]

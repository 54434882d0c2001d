"""Configuration dataclasses for the offset pipeline.

Every numeric threshold used by the pipeline lives here. Length tolerances
are absolute values in the caller's coordinate units. The defaults produced
by :meth:`OffsetTolerances.for_extent` are tuned for double precision
coordinates and scale with the size of the geometry; they are a calibration,
not a universal constant. Callers working at unusual scales (or with noisy
input) should pass their own ``OffsetTolerances``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .errors import ValidationError

# Relative factors applied to the geometry extent by OffsetTolerances.for_extent
RELATIVE_MERGE_DISTANCE = 1e-9
RELATIVE_WINDING_BAND = 1e-10
RELATIVE_PROBE_DISTANCE = 1e-6


@dataclass(frozen=True)
class OffsetTolerances:
    """Numeric tolerances used while building and repairing the raw curve.

    Attributes:
        merge_distance: Points closer than this are one graph node; also the
            minimum edge length of a valid input ring
        winding_band: Half-width of the band around an edge inside which a
            query point counts as lying left of it
        probe_distance: Distance from a loop edge at which its left side is
            sampled during classification
        parallel_sine: Segments whose direction sine is below this never
            intersect
        collinear_angle: Turn angle (radians) below which a vertex is
            treated as collinear

    Examples:
        >>> tol = OffsetTolerances.for_extent(1000.0)
        >>> tol.winding_band < tol.merge_distance < tol.probe_distance
        True
    """
    merge_distance: float = RELATIVE_MERGE_DISTANCE
    winding_band: float = RELATIVE_WINDING_BAND
    probe_distance: float = RELATIVE_PROBE_DISTANCE
    parallel_sine: float = 1e-12
    collinear_angle: float = 1e-9

    @classmethod
    def for_extent(cls, extent: float) -> "OffsetTolerances":
        """Build tolerances scaled to a geometry of the given extent.

        Args:
            extent: Characteristic size of the geometry (e.g. bounding box
                diagonal). Non-positive extents fall back to 1.0.

        Returns:
            OffsetTolerances with length tolerances proportional to ``extent``
        """
        scale = extent if extent > 0 and math.isfinite(extent) else 1.0
        return cls(
            merge_distance=RELATIVE_MERGE_DISTANCE * scale,
            winding_band=RELATIVE_WINDING_BAND * scale,
            probe_distance=RELATIVE_PROBE_DISTANCE * scale,
        )

    def validate(self) -> None:
        """Raise ``ValidationError`` if any tolerance is unusable."""
        for name in ('merge_distance', 'winding_band', 'probe_distance',
                     'parallel_sine', 'collinear_angle'):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValidationError(f"{name} must be a finite non-negative number, got {value}")
        if self.probe_distance <= self.winding_band:
            raise ValidationError("probe_distance must be larger than winding_band")


@dataclass
class OffsetConfig:
    """Optional settings for :func:`polyoffset.offset_polygon`.

    Attributes:
        miter_limit: Maximum ratio of miter length to offset distance for
            sharp corners when ``arc_steps == 0``; longer miters are beveled
        steps_per_circle: If set, arcs use a fixed angular step of
            ``2*pi / steps_per_circle`` instead of ``arc_steps`` points per
            corner, so sharper corners get more points
        max_intersections: Abort with ``CombinatorialExplosionError`` when the
            raw curve has more self-intersections than this (None = no limit)
        tolerances: Explicit tolerances; None derives them from the extent of
            the input and the offset distance

    Examples:
        >>> from polyoffset import offset_polygon
        >>> config = OffsetConfig(steps_per_circle=32)
        >>> rings = offset_polygon([(0, 0), (4, 0), (4, 4), (0, 4)], 1.0, config=config)
        >>> len(rings)
        1
    """
    miter_limit: float = 5.0
    steps_per_circle: Optional[int] = None
    max_intersections: Optional[int] = None
    tolerances: Optional[OffsetTolerances] = None

    def validate(self) -> None:
        """Raise ``ValidationError`` if any setting is out of range."""
        if not math.isfinite(self.miter_limit) or self.miter_limit < 1.0:
            raise ValidationError(f"miter_limit must be >= 1.0, got {self.miter_limit}")
        if self.steps_per_circle is not None and (
            isinstance(self.steps_per_circle, bool)
            or not isinstance(self.steps_per_circle, int)
            or self.steps_per_circle < 3
        ):
            raise ValidationError(
                f"steps_per_circle must be an integer >= 3, got {self.steps_per_circle!r}"
            )
        if self.max_intersections is not None and self.max_intersections < 0:
            raise ValidationError(
                f"max_intersections must be non-negative, got {self.max_intersections}"
            )
        if self.tolerances is not None:
            self.tolerances.validate()

    def resolve_tolerances(self, extent: float) -> OffsetTolerances:
        """Return the explicit tolerances or defaults scaled to ``extent``."""
        if self.tolerances is not None:
            return self.tolerances
        return OffsetTolerances.for_extent(extent)


__all__ = [
    'OffsetTolerances',
    'OffsetConfig',
]

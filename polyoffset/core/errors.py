"""Exception types raised by polyoffset.

Only malformed input and runaway intersection counts are reported as
exceptions. Geometric degeneracies are resolved internally and an offset that
collapses the polygon simply yields an empty result.
"""


class OffsetError(Exception):
    """Base class for all polyoffset errors."""
    pass


class ValidationError(OffsetError, ValueError):
    """Raised when input geometry or parameters are malformed.

    Examples:
        >>> from polyoffset import offset_polygon, ValidationError
        >>> try:
        ...     offset_polygon([(0, 0), (1, 0)], 1.0)
        ... except ValidationError as exc:
        ...     print(exc)
        polygon needs at least 3 distinct points, got 2
    """
    pass


class CombinatorialExplosionError(OffsetError):
    """Raised when the raw offset curve has more self-intersections than allowed.

    Only raised if ``OffsetConfig.max_intersections`` is set.
    """

    def __init__(self, count: int, limit: int):
        self.count = count
        self.limit = limit
        super().__init__(
            f"raw offset curve has {count} self-intersections, limit is {limit}"
        )


__all__ = [
    'OffsetError',
    'ValidationError',
    'CombinatorialExplosionError',
]

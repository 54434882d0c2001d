"""Core types and utilities for polyoffset.

This module provides type definitions, configuration, exceptions, and core
utilities used throughout the library.
"""

from .types import (
    JoinKind,
    CornerJoin,
)

from .config import (
    OffsetTolerances,
    OffsetConfig,
)

from .errors import (
    OffsetError,
    ValidationError,
    CombinatorialExplosionError,
)

__all__ = [
    # Corner joins
    'JoinKind',
    'CornerJoin',

    # Configuration
    'OffsetTolerances',
    'OffsetConfig',

    # Exceptions
    'OffsetError',
    'ValidationError',
    'CombinatorialExplosionError',
]

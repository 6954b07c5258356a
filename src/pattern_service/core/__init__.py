"""
Core shared types and utilities for the pattern service.

This module provides foundational components used across multiple submodules,
keeping the IRT item models, the pattern generator and the simulation layer
decoupled from one another.
"""

from pattern_service.core.exceptions import (
    DataIntegrityError,
    InvalidInputError,
    PatternGenerationError,
    UnsupportedShapeError,
)
from pattern_service.core.utils import get_rng, logistic, softmax

__all__ = [
    "DataIntegrityError",
    "InvalidInputError",
    "PatternGenerationError",
    "UnsupportedShapeError",
    "get_rng",
    "logistic",
    "softmax",
]

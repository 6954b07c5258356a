"""
Core utility functions shared across pattern service modules.

This module provides foundational numeric helpers used by the IRT item
models, the pattern sampler and the simulation layer.
"""

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray

from pattern_service.core.constants import (
    EXPONENT_CLIP_MAX,
    EXPONENT_CLIP_MIN,
)


def get_rng(seed: int | None = None) -> Generator:
    """
    Create a numpy random Generator with optional seed.

    Args:
        seed: Random seed for reproducibility. If None, uses entropy.

    Returns:
        A numpy random Generator instance.
    """
    return np.random.default_rng(seed)


def softmax(
    logits: NDArray[np.floating], axis: int = -1
) -> NDArray[np.float64]:
    """
    Compute softmax probabilities from logits.

    Numerically stable implementation.

    Args:
        logits: Array of logits.
        axis: Axis along which to compute softmax.

    Returns:
        Array of probabilities that sum to 1 along the specified axis.
    """
    # Subtract max for numerical stability
    shifted = logits - np.max(logits, axis=axis, keepdims=True)
    exp_logits = np.exp(shifted)
    result: NDArray[np.float64] = exp_logits / np.sum(
        exp_logits, axis=axis, keepdims=True
    )
    return result


def logistic(z: NDArray[np.floating]) -> NDArray[np.float64]:
    """Logistic function with clipped input."""
    clipped = np.clip(z, EXPONENT_CLIP_MIN, EXPONENT_CLIP_MAX)
    result: NDArray[np.float64] = 1.0 / (1.0 + np.exp(-clipped))
    return result

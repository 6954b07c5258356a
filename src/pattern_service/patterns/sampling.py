"""
Categorical sampling of item responses.

Every item is handled on its own: its response function is evaluated at all
theta rows and one category is drawn per row from the resulting
probabilities. Draws are independent across items and rows given theta
(local independence).
"""

import logging

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray

from pattern_service.core.utils import get_rng
from pattern_service.irt.models import ItemResponseModel

logger = logging.getLogger(__name__)


def sample_categories(
    probabilities: NDArray[np.float64],
    rng: Generator,
) -> NDArray[np.int64]:
    """
    Draw one category per row of a probability matrix.

    Uses the cumulative distribution with one uniform draw per row. Results
    are clamped to the last category so rows summing to slightly less than 1
    stay valid.

    Args:
        probabilities: Array of shape (n_rows, n_categories), rows sum to 1.
        rng: Random number generator.

    Returns:
        Array of shape (n_rows,) with zero-based category indices.
    """
    n_rows, n_categories = probabilities.shape
    cumprobs = np.cumsum(probabilities, axis=1)
    u = rng.random(n_rows)

    # Count how many cumulative probabilities fall below u
    sampled: NDArray[np.int64] = np.minimum(
        (cumprobs < u[:, np.newaxis]).sum(axis=1), n_categories - 1
    ).astype(np.int64)
    return sampled


def compute_item_probabilities(
    model: ItemResponseModel,
    theta: NDArray[np.float64],
) -> list[NDArray[np.float64]]:
    """
    Evaluate every item's response function at the trait matrix.

    Errors raised by the model propagate to the caller unchanged.

    Args:
        model: Fitted item response model.
        theta: Trait matrix, shape (n_respondents, n_dimensions).

    Returns:
        One (n_respondents, n_categories_i) array per item, in item order.
    """
    return [
        np.asarray(model.response_function(i)(theta), dtype=np.float64)
        for i in range(model.item_count())
    ]


def sample_from_probabilities(
    item_probabilities: list[NDArray[np.float64]],
    n_respondents: int,
    rng: Generator,
) -> NDArray[np.int64]:
    """
    Sample a zero-based pattern from precomputed per-item probabilities.

    Args:
        item_probabilities: One (n_respondents, n_categories_i) array per item.
        n_respondents: Number of theta rows the probabilities were computed at.
        rng: Random number generator.

    Returns:
        Array of shape (n_respondents, n_items).
    """
    n_items = len(item_probabilities)

    pattern = np.empty((n_respondents, n_items), dtype=np.int64)
    for j, probs in enumerate(item_probabilities):
        pattern[:, j] = sample_categories(probs, rng)

    logger.debug(
        "Sampled pattern for %d respondents and %d items",
        n_respondents,
        n_items,
    )
    return pattern


def sample_pattern(
    model: ItemResponseModel,
    theta: NDArray[np.float64],
    rng: Generator | None = None,
) -> NDArray[np.int64]:
    """
    Sample zero-based response categories for all respondents and items.

    Args:
        model: Fitted item response model.
        theta: Trait matrix, shape (n_respondents, n_dimensions).
        rng: Random number generator.

    Returns:
        Array of shape (n_respondents, n_items); entry (n, i) lies in
        [0, n_categories_i - 1].
    """
    if rng is None:
        rng = get_rng()

    item_probabilities = compute_item_probabilities(model, theta)
    return sample_from_probabilities(
        item_probabilities, theta.shape[0], rng
    )

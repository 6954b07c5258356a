"""
Diagnostic utilities for generated response patterns.

Provides functions to compare how often each category is generated at a
fixed theta against the probability the model assigns to it.
"""

from dataclasses import dataclass

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray
from scipy import stats

from pattern_service.core.exceptions import ValidationError
from pattern_service.core.utils import get_rng
from pattern_service.irt.models import ItemResponseModel
from pattern_service.patterns.generator import ResponsePattern, generate_pattern
from pattern_service.patterns.sampling import compute_item_probabilities
from pattern_service.patterns.theta import ThetaLike, as_theta_matrix


@dataclass
class CategoryFrequencyComparison:
    """Empirical vs model category probabilities at one theta.

    Stores category as a zero-based index, in long format (one entry per
    item/category pair).
    """

    item_id: NDArray[np.int64]
    category: NDArray[np.int64]
    empirical_prob: NDArray[np.float64]
    model_prob: NDArray[np.float64]
    difference: NDArray[np.float64]
    n_draws: int


def compute_category_frequency_comparison(
    model: ItemResponseModel,
    theta: ThetaLike,
    n_draws: int,
    rng: Generator | None = None,
) -> CategoryFrequencyComparison:
    """Repeatedly generate patterns at one theta and tabulate categories.

    Args:
        model: Fitted item response model.
        theta: A single respondent's trait vector.
        n_draws: Number of independent patterns to generate.
        rng: Random number generator.

    Returns:
        CategoryFrequencyComparison for every item and category.

    Raises:
        ValueError: If theta has more than one row or n_draws < 1.
    """
    theta_row = as_theta_matrix(theta)
    if theta_row.shape[0] != 1:
        raise ValueError(
            f"theta must describe one respondent, got {theta_row.shape[0]} rows"
        )
    if n_draws < 1:
        raise ValueError(f"n_draws must be >= 1, got {n_draws}")
    if rng is None:
        rng = get_rng()

    repeated = np.repeat(theta_row, n_draws, axis=0)
    pattern = generate_pattern(model, repeated, rng=rng)
    assert isinstance(pattern, ResponsePattern)

    item_probabilities = compute_item_probabilities(model, theta_row)

    item_ids: list[int] = []
    categories: list[int] = []
    empirical_probs: list[float] = []
    model_probs: list[float] = []

    for item_idx, probs in enumerate(item_probabilities):
        zero_based = pattern.responses[:, item_idx] - model.min_offset(item_idx)
        n_categories = probs.shape[1]
        counts = np.bincount(zero_based, minlength=n_categories)

        for cat in range(n_categories):
            item_ids.append(item_idx)
            categories.append(cat)
            empirical_probs.append(counts[cat] / n_draws)
            model_probs.append(float(probs[0, cat]))

    empirical_arr = np.array(empirical_probs, dtype=np.float64)
    model_arr = np.array(model_probs, dtype=np.float64)

    return CategoryFrequencyComparison(
        item_id=np.array(item_ids, dtype=np.int64),
        category=np.array(categories, dtype=np.int64),
        empirical_prob=empirical_arr,
        model_prob=model_arr,
        difference=empirical_arr - model_arr,
        n_draws=n_draws,
    )


def category_goodness_of_fit(
    comparison: CategoryFrequencyComparison,
) -> NDArray[np.float64]:
    """
    Chi-square goodness-of-fit p-value for each item.

    Categories the model gives zero probability are left out of the test.

    Args:
        comparison: Output of compute_category_frequency_comparison.

    Returns:
        Array of shape (n_items,) with p-values.
    """
    item_ids = np.unique(comparison.item_id)
    p_values = np.empty(len(item_ids), dtype=np.float64)

    for i, item_idx in enumerate(item_ids):
        mask = (comparison.item_id == item_idx) & (comparison.model_prob > 0)
        observed = comparison.empirical_prob[mask] * comparison.n_draws
        expected = comparison.model_prob[mask]
        expected = expected / expected.sum() * observed.sum()

        if len(observed) < 2:
            p_values[i] = 1.0
            continue
        p_values[i] = stats.chisquare(observed, expected).pvalue

    return p_values


def validate_category_frequencies(
    comparison: CategoryFrequencyComparison,
    tolerance: float = 0.02,
) -> None:
    """
    Validate that generated category frequencies track the model.

    Args:
        comparison: Output of compute_category_frequency_comparison.
        tolerance: Largest allowed absolute difference in probability.

    Raises:
        ValidationError: If any category deviates by more than tolerance.
    """
    worst = int(np.argmax(np.abs(comparison.difference)))
    if abs(comparison.difference[worst]) > tolerance:
        raise ValidationError(
            f"Item {comparison.item_id[worst]} category "
            f"{comparison.category[worst]}: empirical probability "
            f"{comparison.empirical_prob[worst]:.4f} differs from model "
            f"probability {comparison.model_prob[worst]:.4f} by more than "
            f"tolerance {tolerance}"
        )

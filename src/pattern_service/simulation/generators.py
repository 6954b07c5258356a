"""
Orchestration layer for Monte Carlo pattern simulation.

This module draws respondents' latent traits from a configured distribution
and generates one independent response pattern per respondent.
"""

import logging

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray

from pattern_service.core.utils import get_rng
from pattern_service.irt.models import ItemResponseModel
from pattern_service.patterns.generator import ResponsePattern, generate_pattern
from pattern_service.simulation.config import SimulationConfig
from pattern_service.simulation.distributions import sample_theta

logger = logging.getLogger(__name__)


def draw_theta(
    config: SimulationConfig,
    rng: Generator | None = None,
) -> NDArray[np.float64]:
    """
    Draw a trait matrix for the simulated respondents.

    Args:
        config: Simulation configuration.
        rng: Random number generator.

    Returns:
        Array of shape (n_respondents, n_dimensions).

    Raises:
        ValueError: If the margin is unknown or the correlation is not
            valid for the number of dimensions.
    """
    if rng is None:
        rng = get_rng(config.random_seed)

    return sample_theta(
        n=config.n_respondents,
        n_dimensions=config.n_dimensions,
        distribution_name=config.theta.distribution,
        distribution_params=config.theta.params,
        correlation=config.correlation,
        rng=rng,
    )


def simulate_patterns(
    model: ItemResponseModel,
    config: SimulationConfig,
) -> ResponsePattern:
    """
    Generate response patterns for a simulated population.

    This is the main entry point for Monte Carlo studies:
        1. Draw respondent traits
        2. Generate one numeric pattern per respondent

    Args:
        model: Fitted item response model.
        config: Simulation configuration; its seed drives every draw.

    Returns:
        ResponsePattern with the drawn theta attached.
    """
    rng = get_rng(config.random_seed)

    theta = draw_theta(config, rng)
    logger.info(
        "Simulating %d respondents over %d items",
        config.n_respondents,
        model.item_count(),
    )

    pattern = generate_pattern(model, theta, rng=rng)
    assert isinstance(pattern, ResponsePattern)
    return pattern

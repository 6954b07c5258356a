"""
Latent trait populations for Monte Carlo simulation.

Respondents' theta vectors are drawn in two steps:
    1. Correlated standard normal scores z ~ MVN(0, R), where R is an
       exchangeable correlation matrix across latent dimensions.
    2. A marginal transform maps each score onto the configured trait scale
       (Gaussian copula), so dimensions keep their correlation structure
       whatever the marginal shape.

Available margins: normal, truncated_normal, uniform, bimodal.
"""

from collections.abc import Callable, Mapping

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray
from scipy import stats

from pattern_service.core.utils import get_rng

MarginParams = Mapping[str, float | None]
MarginTransform = Callable[
    [NDArray[np.float64], MarginParams, Generator], NDArray[np.float64]
]


def build_correlation_matrix(
    correlation: float, n_dimensions: int
) -> NDArray[np.float64]:
    """
    Build an exchangeable correlation matrix between latent dimensions.

    Args:
        correlation: Correlation shared by every pair of dimensions.
        n_dimensions: Number of latent dimensions.

    Returns:
        Array of shape (n_dimensions, n_dimensions).

    Raises:
        ValueError: If the matrix is not positive semi-definite.
    """
    R = np.full((n_dimensions, n_dimensions), correlation, dtype=np.float64)
    np.fill_diagonal(R, 1.0)

    eigenvalues = np.linalg.eigvalsh(R)
    if not np.all(eigenvalues >= -1e-10):
        raise ValueError(
            f"correlation {correlation} does not give a valid correlation "
            f"matrix for {n_dimensions} dimensions"
        )
    return R


def correlated_normal_scores(
    n: int,
    correlation_matrix: NDArray[np.float64],
    rng: Generator,
) -> NDArray[np.float64]:
    """Draw (n, d) standard normal scores with the given correlation."""
    n_dimensions = correlation_matrix.shape[0]
    mvn = stats.multivariate_normal(
        mean=np.zeros(n_dimensions), cov=correlation_matrix, allow_singular=True
    )
    scores: NDArray[np.float64] = np.asarray(
        mvn.rvs(size=n, random_state=rng), dtype=np.float64
    ).reshape(n, n_dimensions)
    return scores


####################################################################
# Marginal transforms
####################################################################


def _param(params: MarginParams, key: str, default: float) -> float:
    value = params.get(key)
    return default if value is None else value


def _normal(
    z: NDArray[np.float64], params: MarginParams, rng: Generator
) -> NDArray[np.float64]:
    mean = _param(params, "mean", 0.0)
    std = _param(params, "std", 1.0)
    return mean + std * z


def _truncated_normal(
    z: NDArray[np.float64], params: MarginParams, rng: Generator
) -> NDArray[np.float64]:
    mean = _param(params, "mean", 0.0)
    std = _param(params, "std", 1.0)
    lower = params.get("lower")
    upper = params.get("upper")
    # truncnorm takes bounds on the standardized scale
    a = (lower - mean) / std if lower is not None else -np.inf
    b = (upper - mean) / std if upper is not None else np.inf
    margin = stats.truncnorm(a, b, loc=mean, scale=std)
    result: NDArray[np.float64] = margin.ppf(stats.norm.cdf(z))
    return result


def _uniform(
    z: NDArray[np.float64], params: MarginParams, rng: Generator
) -> NDArray[np.float64]:
    low = _param(params, "low", -1.0)
    high = _param(params, "high", 1.0)
    result: NDArray[np.float64] = low + (high - low) * stats.norm.cdf(z)
    return result


def _bimodal(
    z: NDArray[np.float64], params: MarginParams, rng: Generator
) -> NDArray[np.float64]:
    """Two normal subpopulations; each respondent belongs to one of them."""
    weight1 = params["weight1"]
    assert weight1 is not None
    if not (0.0 <= weight1 <= 1.0):
        raise ValueError(f"weight1 must be in [0, 1], got {weight1}")

    in_first = rng.random(z.shape[0]) < weight1
    loc = np.where(in_first, params["loc1"], params["loc2"])
    scale = np.where(in_first, params["scale1"], params["scale2"])
    return loc[:, np.newaxis] + scale[:, np.newaxis] * z


MARGINS: dict[str, MarginTransform] = {
    "normal": _normal,
    "truncated_normal": _truncated_normal,
    "uniform": _uniform,
    "bimodal": _bimodal,
}


def sample_theta(
    n: int,
    n_dimensions: int,
    distribution_name: str = "normal",
    distribution_params: MarginParams | None = None,
    correlation: float = 0.0,
    rng: Generator | None = None,
) -> NDArray[np.float64]:
    """
    Sample a trait matrix for a simulated population.

    Args:
        n: Number of respondents.
        n_dimensions: Number of latent dimensions.
        distribution_name: Marginal distribution of every dimension.
        distribution_params: Parameters of the marginal distribution.
        correlation: Correlation between each pair of dimensions.
        rng: Random number generator.

    Returns:
        Array of shape (n, n_dimensions).

    Raises:
        ValueError: If the margin is unknown or the correlation is invalid.
    """
    if distribution_name not in MARGINS:
        raise ValueError(
            f"Unknown theta distribution {distribution_name}, "
            f"expected one of {sorted(MARGINS)}"
        )
    if rng is None:
        rng = get_rng()
    if distribution_params is None:
        distribution_params = {}

    R = build_correlation_matrix(correlation, n_dimensions)
    z = correlated_normal_scores(n, R, rng)
    return MARGINS[distribution_name](z, distribution_params, rng)

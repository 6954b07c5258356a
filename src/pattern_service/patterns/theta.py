"""
Normalisation of latent trait input into an N×d trait matrix.
"""

from collections.abc import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pattern_service.core.exceptions import UnsupportedShapeError

ThetaLike = ArrayLike | Sequence[float]


def as_theta_matrix(theta: ThetaLike) -> NDArray[np.float64]:
    """
    Coerce latent trait input into an (n_respondents, n_dimensions) matrix.

    A matrix is returned with its shape unchanged. A flat sequence is one
    respondent, so a length-d vector becomes a 1×d row; a scalar becomes 1×1.
    The number of columns is not checked against any model here; item
    response functions reject a mismatched dimensionality themselves.

    Args:
        theta: Scalar, flat sequence, or 2D array of trait values.

    Returns:
        Float64 array of shape (n_respondents, n_dimensions).

    Raises:
        UnsupportedShapeError: If theta has more than two dimensions.
    """
    matrix = np.asarray(theta, dtype=np.float64)
    if matrix.ndim > 2:
        raise UnsupportedShapeError(
            f"theta must be a vector or a matrix, got shape {matrix.shape}"
        )
    if matrix.ndim < 2:
        matrix = matrix.reshape(1, -1)
    return matrix

"""
Multidimensional item parameter representations.

Each item type maps an N×d matrix of latent traits to an N×K matrix of
category probabilities. Categories are zero-indexed.

Supported item types:
    - dichotomous: multidimensional 4PL
        P(1 | θ) = g + (u - g) / (1 + exp(-(a·θ + d)))
    - graded: multidimensional graded response model (Samejima, 1969)
        P*(k | θ) = 1 / (1 + exp(-(a·θ + d_k))),  d_1 > d_2 > ... > d_{K-1}
        P(k | θ) = P*(k) - P*(k + 1)
    - nominal: multidimensional nominal response model (Bock, 1972)
        P(k | θ) = exp(s_k * (a·θ) + c_k) / Σ_h exp(s_h * (a·θ) + c_h)
"""

from abc import ABC, abstractmethod
from typing import Literal

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, model_validator

from pattern_service.core.constants import (
    EXPONENT_CLIP_MAX,
    EXPONENT_CLIP_MIN,
)
from pattern_service.core.utils import logistic, softmax


class ItemParameters(BaseModel, ABC):
    """
    Abstract base for one item's parameters.

    Attributes:
        slopes: Slope (discrimination) for each latent dimension. The number
            of slopes fixes the dimensionality d the item accepts.
    """

    model_config = ConfigDict(frozen=True)

    slopes: tuple[float, ...]

    @model_validator(mode="after")
    def _validate_slopes(self) -> "ItemParameters":
        if len(self.slopes) == 0:
            raise ValueError("slopes must have at least one dimension")
        return self

    @property
    def n_dimensions(self) -> int:
        """Number of latent dimensions."""
        return len(self.slopes)

    @property
    @abstractmethod
    def n_categories(self) -> int:
        """Number of response categories (K)."""
        ...

    @abstractmethod
    def _probabilities(
        self, theta: NDArray[np.float64]
    ) -> NDArray[np.float64]: ...

    def compute_probabilities(
        self, theta: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """
        Compute category probabilities at the given trait values.

        Args:
            theta: Trait matrix, shape (n_theta, n_dimensions).

        Returns:
            Probabilities, shape (n_theta, n_categories). Rows sum to 1.

        Raises:
            ValueError: If theta is not 2D or its column count does not match
                the item's dimensionality.
        """
        theta = np.asarray(theta, dtype=np.float64)
        if theta.ndim != 2:
            raise ValueError(f"theta must be 2D, got shape {theta.shape}")
        if theta.shape[1] != self.n_dimensions:
            raise ValueError(
                f"theta has {theta.shape[1]} dimensions but item expects "
                f"{self.n_dimensions}"
            )
        return self._probabilities(theta)

    def _linear_predictor(
        self, theta: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """a·θ for every row of theta, shape (n_theta,)."""
        result: NDArray[np.float64] = theta @ np.array(
            self.slopes, dtype=np.float64
        )
        return result


class DichotomousItemParameters(ItemParameters):
    """
    Multidimensional four-parameter logistic item.

    Attributes:
        intercept: Intercept d.
        guessing: Lower asymptote g.
        upper: Upper asymptote u.
    """

    item_type: Literal["dichotomous"] = "dichotomous"
    intercept: float = 0.0
    guessing: float = 0.0
    upper: float = 1.0

    @model_validator(mode="after")
    def _validate_asymptotes(self) -> "DichotomousItemParameters":
        if not (0.0 <= self.guessing < self.upper <= 1.0):
            raise ValueError(
                f"Need 0 <= guessing < upper <= 1, got guessing="
                f"{self.guessing}, upper={self.upper}"
            )
        return self

    @property
    def n_categories(self) -> int:
        return 2

    def _probabilities(
        self, theta: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        z = self._linear_predictor(theta) + self.intercept
        p_correct = self.guessing + (self.upper - self.guessing) * logistic(z)
        return np.column_stack([1.0 - p_correct, p_correct])


class GradedItemParameters(ItemParameters):
    """
    Multidimensional graded response item.

    Attributes:
        intercepts: Boundary intercepts d_1..d_{K-1}, strictly decreasing.
    """

    item_type: Literal["graded"] = "graded"
    intercepts: tuple[float, ...]

    @model_validator(mode="after")
    def _validate_intercepts(self) -> "GradedItemParameters":
        if len(self.intercepts) == 0:
            raise ValueError("graded items need at least one intercept")
        diffs = np.diff(np.array(self.intercepts, dtype=np.float64))
        if np.any(diffs >= 0):
            raise ValueError(
                f"intercepts must be strictly decreasing, got {self.intercepts}"
            )
        return self

    @property
    def n_categories(self) -> int:
        return len(self.intercepts) + 1

    def _probabilities(
        self, theta: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        n_theta = theta.shape[0]
        eta = self._linear_predictor(theta)
        intercepts = np.array(self.intercepts, dtype=np.float64)

        # Boundary curves P*(k), padded with P*(0) = 1 and P*(K) = 0
        p_star = logistic(eta[:, np.newaxis] + intercepts[np.newaxis, :])
        cumulative = np.hstack(
            [np.ones((n_theta, 1)), p_star, np.zeros((n_theta, 1))]
        )
        probs: NDArray[np.float64] = np.clip(
            cumulative[:, :-1] - cumulative[:, 1:], 0.0, 1.0
        )
        return probs


class NominalItemParameters(ItemParameters):
    """
    Multidimensional nominal response item.

    Attributes:
        scores: Scoring function s_k per category.
        intercepts: Intercepts c_k per category.
    """

    item_type: Literal["nominal"] = "nominal"
    scores: tuple[float, ...]
    intercepts: tuple[float, ...]

    @model_validator(mode="after")
    def _validate_categories(self) -> "NominalItemParameters":
        if len(self.scores) != len(self.intercepts):
            raise ValueError(
                f"scores and intercepts must have same length, "
                f"got {len(self.scores)} and {len(self.intercepts)}"
            )
        if len(self.scores) < 2:
            raise ValueError(
                f"Must have at least 2 categories, got {len(self.scores)}"
            )
        return self

    @property
    def n_categories(self) -> int:
        return len(self.scores)

    def _probabilities(
        self, theta: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        eta = self._linear_predictor(theta)
        scores = np.array(self.scores, dtype=np.float64)
        intercepts = np.array(self.intercepts, dtype=np.float64)

        # Shape: (n_theta, n_categories)
        logits = np.outer(eta, scores) + intercepts[np.newaxis, :]
        logits = np.clip(logits, EXPONENT_CLIP_MIN, EXPONENT_CLIP_MAX)
        return softmax(logits, axis=1)

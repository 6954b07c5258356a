"""Shared fixtures for pattern service tests."""

from collections.abc import Sequence

import numpy as np
import pytest
from numpy.random import Generator
from numpy.typing import NDArray

from pattern_service.core.utils import get_rng
from pattern_service.irt import (
    DichotomousItemParameters,
    FittedModel,
    GradedItemParameters,
    ItemResponseFunction,
    NominalItemParameters,
)


class FixedProbabilityModel:
    """Item response model whose probabilities do not depend on theta."""

    def __init__(
        self,
        item_probabilities: Sequence[Sequence[float]],
        min_offsets: Sequence[int] | None = None,
    ) -> None:
        self.item_probabilities = [
            np.asarray(p, dtype=np.float64) for p in item_probabilities
        ]
        self.min_offsets = (
            list(min_offsets)
            if min_offsets is not None
            else [0] * len(self.item_probabilities)
        )
        self.calls = 0

    def item_count(self) -> int:
        return len(self.item_probabilities)

    def response_function(self, item_index: int) -> ItemResponseFunction:
        probs = self.item_probabilities[item_index]

        def compute(theta: NDArray[np.float64]) -> NDArray[np.float64]:
            self.calls += 1
            n_theta = np.asarray(theta).shape[0]
            return np.tile(probs, (n_theta, 1))

        return compute

    def min_offset(self, item_index: int) -> int:
        return self.min_offsets[item_index]


class ExplodingModel:
    """Model that fails as soon as any item is evaluated."""

    def __init__(self, n_items: int) -> None:
        self.n_items = n_items

    def item_count(self) -> int:
        return self.n_items

    def response_function(self, item_index: int) -> ItemResponseFunction:
        raise AssertionError("model should not have been evaluated")

    def min_offset(self, item_index: int) -> int:
        return 0


@pytest.fixture
def fixed_model() -> type[FixedProbabilityModel]:
    return FixedProbabilityModel


@pytest.fixture
def exploding_model() -> type[ExplodingModel]:
    return ExplodingModel


@pytest.fixture
def rng() -> Generator:
    """Reproducible random number generator."""
    return get_rng(42)


@pytest.fixture
def mixed_model() -> FittedModel:
    """One-dimensional model with one item of each type.

    Native codings: dichotomous 0..1, graded 1..4, nominal 0..2.
    """
    return FittedModel(
        items=[
            DichotomousItemParameters(
                slopes=(1.2,), intercept=-0.3, guessing=0.2
            ),
            GradedItemParameters(slopes=(0.9,), intercepts=(1.5, 0.0, -1.5)),
            NominalItemParameters(
                slopes=(1.0,),
                scores=(0.0, 1.0, 2.0),
                intercepts=(0.0, 0.5, -0.5),
            ),
        ],
        min_offsets=(0, 1, 0),
    )


@pytest.fixture
def two_dimensional_model() -> FittedModel:
    return FittedModel(
        items=[
            DichotomousItemParameters(slopes=(1.0, 0.5), intercept=0.0),
            DichotomousItemParameters(slopes=(0.2, 1.4), intercept=0.5),
            GradedItemParameters(slopes=(0.8, 0.8), intercepts=(1.0, -1.0)),
        ]
    )

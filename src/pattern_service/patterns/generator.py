"""
Response pattern generation from a fitted IRT model.

Given a fitted model and one or more latent trait vectors, this module
samples a response to every item and returns either:
    - a numeric pattern matrix in the model's native category coding, with
      the generating theta attached (for Monte Carlo adaptive-test studies), or
    - a list of option labels resolved against an answer key (for replaying
      a realistic single test session).
"""

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd
from numpy.random import Generator
from numpy.typing import NDArray

from pattern_service.core.constants import CORRECT_CATEGORY
from pattern_service.core.exceptions import (
    InvalidInputError,
    UnsupportedShapeError,
)
from pattern_service.core.utils import get_rng
from pattern_service.irt.models import ItemResponseModel
from pattern_service.patterns.answer_key import AnswerKey
from pattern_service.patterns.sampling import (
    compute_item_probabilities,
    sample_from_probabilities,
)
from pattern_service.patterns.theta import ThetaLike, as_theta_matrix

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResponsePattern:
    """
    Numeric response patterns with the theta that generated them.

    Attributes:
        responses: Array of shape (n_respondents, n_items) in the model's
            native category coding.
        theta: Read-only trait matrix, shape (n_respondents, n_dimensions).
            Row n generated row n of responses.
    """

    responses: NDArray[np.int64]
    theta: NDArray[np.float64]

    def __post_init__(self) -> None:
        if self.responses.ndim != 2:
            raise ValueError(
                f"responses must be 2D, got shape {self.responses.shape}"
            )
        if self.theta.shape[0] != self.responses.shape[0]:
            raise ValueError(
                f"theta has {self.theta.shape[0]} rows but responses has "
                f"{self.responses.shape[0]}"
            )

    def __array__(
        self, dtype: Any = None, copy: bool | None = None
    ) -> NDArray[Any]:
        return self.responses.astype(
            dtype or self.responses.dtype, copy=bool(copy)
        )

    @property
    def shape(self) -> tuple[int, int]:
        n_respondents, n_items = self.responses.shape
        return n_respondents, n_items

    @property
    def n_respondents(self) -> int:
        """Number of independent respondents (rows)."""
        return self.responses.shape[0]

    @property
    def n_items(self) -> int:
        """Number of items (columns)."""
        return self.responses.shape[1]


def generate_pattern(
    model: ItemResponseModel,
    theta: ThetaLike,
    table: pd.DataFrame | AnswerKey | None = None,
    rng: Generator | None = None,
) -> ResponsePattern | list[str]:
    """
    Generate response patterns from a fitted model at given trait values.

    Without a table, every theta row is an independent respondent and the
    result is a ResponsePattern whose entries are the sampled category plus
    the item's minimum category. With a table, theta must be a single
    respondent and the result is one option label per item.

    All input checks run before the first random draw.

    Args:
        model: Fitted item response model.
        theta: Flat sequence (one respondent) or (n_respondents, n_dimensions)
            matrix of trait values.
        table: Optional answer key, as a DataFrame with option/answer columns
            or an AnswerKey.
        rng: Random number generator. Defaults to a fresh unseeded generator.

    Returns:
        ResponsePattern of shape (n_respondents, n_items) without a table,
        otherwise a list of n_items labels.

    Raises:
        UnsupportedShapeError: If a table is given with more than one theta
            row, or the table has more than one answer column.
        InvalidInputError: If the table is not usable.
        DataIntegrityError: If categorical table columns do not convert to
            text cleanly.
    """
    theta_matrix = as_theta_matrix(theta)

    if table is None:
        if rng is None:
            rng = get_rng()
        return _generate_numeric(model, theta_matrix, rng)

    if theta_matrix.shape[0] > 1:
        raise UnsupportedShapeError(
            "An answer key can only be used to generate a single response "
            f"pattern, but theta has {theta_matrix.shape[0]} rows"
        )
    answer_key = _as_answer_key(table)
    if rng is None:
        rng = get_rng()
    return _generate_labeled(model, theta_matrix, answer_key, rng)


def _as_answer_key(table: Any) -> AnswerKey:
    if isinstance(table, AnswerKey):
        return table
    return AnswerKey.from_dataframe(table)


def _generate_numeric(
    model: ItemResponseModel,
    theta: NDArray[np.float64],
    rng: Generator,
) -> ResponsePattern:
    item_probabilities = compute_item_probabilities(model, theta)
    sampled = sample_from_probabilities(item_probabilities, theta.shape[0], rng)

    mins = np.array(
        [model.min_offset(i) for i in range(model.item_count())],
        dtype=np.int64,
    )
    responses = sampled + mins[np.newaxis, :]
    responses.flags.writeable = False

    attached_theta = theta.copy()
    attached_theta.flags.writeable = False
    return ResponsePattern(responses=responses, theta=attached_theta)


def _generate_labeled(
    model: ItemResponseModel,
    theta: NDArray[np.float64],
    answer_key: AnswerKey,
    rng: Generator,
) -> list[str]:
    n_items = model.item_count()
    if len(answer_key) != n_items:
        raise InvalidInputError(
            f"Answer key has {len(answer_key)} items but model has {n_items}"
        )

    item_probabilities = compute_item_probabilities(model, theta)
    _check_answer_key_fits(answer_key, item_probabilities)

    sampled = sample_from_probabilities(item_probabilities, 1, rng)[0]
    return resolve_labels(sampled, answer_key, rng)


def _check_answer_key_fits(
    answer_key: AnswerKey,
    item_probabilities: list[NDArray[np.float64]],
) -> None:
    """Ensure every possible draw maps to a label before sampling."""
    for i, (item_key, probs) in enumerate(
        zip(answer_key.items, item_probabilities, strict=True)
    ):
        n_categories = probs.shape[1]
        if item_key.is_scored:
            if len(item_key.distractors) == 0:
                raise InvalidInputError(
                    f"Item {i} has no incorrect options to choose from"
                )
            if n_categories > 2:
                logger.warning(
                    "Item %d has %d categories but is scored as "
                    "correct/incorrect; only category %d maps to the answer",
                    i,
                    n_categories,
                    CORRECT_CATEGORY,
                )
        elif len(item_key.options) < n_categories:
            raise InvalidInputError(
                f"Item {i} has {n_categories} categories but only "
                f"{len(item_key.options)} options"
            )


def resolve_labels(
    sampled: NDArray[np.int64],
    answer_key: AnswerKey,
    rng: Generator,
) -> list[str]:
    """
    Turn zero-based sampled categories into option labels.

    Scored items are treated as correct/incorrect: sampling CORRECT_CATEGORY
    yields the answer text, anything else yields a uniformly chosen distractor.
    This only models dichotomous scoring; for polytomous scored items every
    category other than CORRECT_CATEGORY collapses to "incorrect".
    Unscored items yield the option at the sampled position.

    Args:
        sampled: Array of shape (n_items,) with zero-based categories.
        answer_key: Options and answers for each item.
        rng: Random number generator used to pick distractors.

    Returns:
        One label per item, in item order.
    """
    labels: list[str] = []
    for category, item_key in zip(sampled, answer_key.items, strict=True):
        if item_key.answer is not None:
            if category == CORRECT_CATEGORY:
                labels.append(item_key.answer)
            else:
                distractors = item_key.distractors
                labels.append(distractors[int(rng.integers(len(distractors)))])
        else:
            labels.append(item_key.options[int(category)])
    return labels

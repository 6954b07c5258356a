"""
Fitted item response models.

The pattern generator only needs three capabilities from a model: how many
items it has, a response function per item, and the minimum category of each
item in the model's native coding. `ItemResponseModel` names that contract;
`FittedModel` is the concrete implementation backed by item parameters.
"""

from collections.abc import Callable
from typing import Annotated, Protocol

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, Field, model_validator

from pattern_service.irt.items import (
    DichotomousItemParameters,
    GradedItemParameters,
    NominalItemParameters,
)

# Maps an (n_theta, n_dimensions) trait matrix to (n_theta, n_categories)
ItemResponseFunction = Callable[[NDArray[np.float64]], NDArray[np.float64]]


class ItemResponseModel(Protocol):
    def item_count(self) -> int: ...
    def response_function(self, item_index: int) -> ItemResponseFunction: ...
    def min_offset(self, item_index: int) -> int: ...


Item = Annotated[
    DichotomousItemParameters | GradedItemParameters | NominalItemParameters,
    Field(discriminator="item_type"),
]


class FittedModel(BaseModel):
    """
    A fitted multidimensional IRT model over an ordered set of items.

    Attributes:
        items: Item parameters in test order.
        min_offsets: Lowest category of each item in the native coding of the
            data the model was fitted to. None means all items start at 0.
    """

    model_config = ConfigDict(frozen=True)

    items: list[Item]
    min_offsets: tuple[int, ...] | None = None

    @model_validator(mode="after")
    def _validate_items(self) -> "FittedModel":
        if len(self.items) == 0:
            raise ValueError("A fitted model needs at least one item")
        dims = {item.n_dimensions for item in self.items}
        if len(dims) != 1:
            raise ValueError(
                f"All items must share the same dimensionality, got {sorted(dims)}"
            )
        return self

    @model_validator(mode="after")
    def _validate_min_offsets(self) -> "FittedModel":
        if self.min_offsets is not None and len(self.min_offsets) != len(
            self.items
        ):
            raise ValueError(
                f"min_offsets has {len(self.min_offsets)} entries but model "
                f"has {len(self.items)} items"
            )
        return self

    @property
    def n_dimensions(self) -> int:
        """Latent dimensionality shared by every item."""
        return self.items[0].n_dimensions

    def item_count(self) -> int:
        return len(self.items)

    def response_function(self, item_index: int) -> ItemResponseFunction:
        return self.items[item_index].compute_probabilities

    def min_offset(self, item_index: int) -> int:
        if self.min_offsets is None:
            return 0
        return self.min_offsets[item_index]


def min_offsets_from_responses(
    responses: NDArray[np.floating],
) -> tuple[int, ...]:
    """
    Recover the native minimum category of each item from raw data.

    Args:
        responses: Raw response matrix, shape (n_respondents, n_items).
            Missing responses may be NaN.

    Returns:
        Observed column minima as integers.

    Raises:
        ValueError: If responses is not 2D or an item has no observed response.
    """
    responses = np.asarray(responses, dtype=np.float64)
    if responses.ndim != 2:
        raise ValueError(
            f"responses must be 2D, got shape {responses.shape}"
        )
    observed = ~np.isnan(responses)
    empty = np.flatnonzero(~observed.any(axis=0))
    if len(empty) > 0:
        raise ValueError(f"Items with no observed responses: {empty.tolist()}")
    return tuple(int(m) for m in np.nanmin(responses, axis=0))

"""
Answer-key schema for labeled response patterns.

An answer key lists, for every item, the option texts a respondent can pick
and optionally the single correct option. Tables are converted into this
schema once, at the boundary, so pattern generation never has to guess which
columns hold options or answers.
"""

import logging
from typing import Any

import pandas as pd
from pydantic import BaseModel, ConfigDict, model_validator

from pattern_service.core.constants import (
    ANSWER_COLUMN_PATTERN,
    OPTION_COLUMN_PATTERN,
)
from pattern_service.core.exceptions import (
    DataIntegrityError,
    InvalidInputError,
    UnsupportedShapeError,
)

logger = logging.getLogger(__name__)


class ItemKey(BaseModel):
    """
    Options and scoring key for one item.

    Attributes:
        options: Option texts in column order.
        answer: Text of the correct option, or None for an unscored item.
    """

    model_config = ConfigDict(frozen=True)

    options: tuple[str, ...]
    answer: str | None = None

    @model_validator(mode="after")
    def _validate_options(self) -> "ItemKey":
        if len(self.options) == 0:
            raise ValueError("An item needs at least one option")
        return self

    @property
    def is_scored(self) -> bool:
        """Whether this item has a correct answer."""
        return self.answer is not None

    @property
    def distractors(self) -> tuple[str, ...]:
        """Options other than the correct answer."""
        return tuple(opt for opt in self.options if opt != self.answer)


class AnswerKey(BaseModel):
    """Ordered answer keys, one per item."""

    model_config = ConfigDict(frozen=True)

    items: tuple[ItemKey, ...]

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> ItemKey:
        return self.items[index]

    @classmethod
    def from_dataframe(
        cls,
        table: Any,
        option_pattern: str = OPTION_COLUMN_PATTERN,
        answer_pattern: str = ANSWER_COLUMN_PATTERN,
    ) -> "AnswerKey":
        """
        Build an answer key from a table with one row per item.

        Columns whose name contains `option_pattern` are option columns, in
        their table order. At most one column may contain `answer_pattern`.
        Empty or missing cells are dropped from an item's options; a missing
        answer cell marks the item as unscored.

        Args:
            table: pandas DataFrame with option and answer columns.
            option_pattern: Substring identifying option columns.
            answer_pattern: Substring identifying the answer column.

        Returns:
            AnswerKey with one ItemKey per row.

        Raises:
            InvalidInputError: If table is not a DataFrame, has no option
                columns, or a row has no options.
            DataIntegrityError: If categorical columns cannot be turned into
                text without changing a value.
            UnsupportedShapeError: If more than one answer column is present.
        """
        if not isinstance(table, pd.DataFrame):
            raise InvalidInputError(
                f"Answer key must be a pandas DataFrame, got {type(table).__name__}"
            )

        table = coerce_categorical_columns(table)

        columns = [str(c) for c in table.columns]
        option_columns = [c for c in columns if option_pattern in c]
        answer_columns = [c for c in columns if answer_pattern in c]

        if len(answer_columns) > 1:
            raise UnsupportedShapeError(
                "Multiple correct answers are not supported, found answer "
                f"columns {answer_columns}"
            )
        if len(option_columns) == 0:
            raise InvalidInputError(
                f"Answer key has no columns matching '{option_pattern}'"
            )

        table = table.set_axis(columns, axis=1)
        items: list[ItemKey] = []
        for row_ix, (_, row) in enumerate(table.iterrows()):
            options = tuple(
                str(row[c]) for c in option_columns if not _is_blank(row[c])
            )
            if len(options) == 0:
                raise InvalidInputError(f"Item {row_ix} has no options")
            answer = None
            if answer_columns and not _is_blank(row[answer_columns[0]]):
                answer = str(row[answer_columns[0]])
            items.append(ItemKey(options=options, answer=answer))

        logger.debug(
            "Built answer key with %d items (%d option columns, %s answer column)",
            len(items),
            len(option_columns),
            "one" if answer_columns else "no",
        )
        return cls(items=tuple(items))


def coerce_categorical_columns(table: pd.DataFrame) -> pd.DataFrame:
    """
    Convert categorical columns to plain text.

    Values must survive the conversion unchanged: a category stored as the
    integer 1 would silently turn into the text "1" and stop matching, so any
    such change is rejected.

    Args:
        table: Answer-key table.

    Returns:
        A copy with categorical columns as object columns of str, or the
        input itself when it has no categorical columns.

    Raises:
        DataIntegrityError: If coercion altered any value.
    """
    categorical = [
        c
        for c in table.columns
        if isinstance(table[c].dtype, pd.CategoricalDtype)
    ]
    if not categorical:
        return table

    coerced = table.copy()
    for col in categorical:
        original = table[col].astype(object)
        missing = original.isna()
        as_text = original.where(missing, original.map(str))
        altered = ~(missing | (as_text == original))
        if altered.any():
            raise DataIntegrityError(
                f"Coercing column '{col}' to text modified "
                f"{int(altered.sum())} value(s). Build the table with text "
                "values instead of categorical codes"
            )
        coerced[col] = as_text
    return coerced


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return bool(pd.isna(value))

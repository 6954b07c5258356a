"""
File loading and export utilities for models, traits and patterns.
"""

from pathlib import Path

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from pattern_service.core.constants import (
    ANSWER_COLUMN_PATTERN,
    OPTION_COLUMN_PATTERN,
)
from pattern_service.irt.models import FittedModel
from pattern_service.patterns.answer_key import AnswerKey
from pattern_service.patterns.generator import ResponsePattern


def load_fitted_model(path: Path) -> FittedModel:
    """Load a fitted model saved with FittedModel.model_dump_json."""
    return FittedModel.model_validate_json(path.read_text())


def save_fitted_model(model: FittedModel, path: Path) -> None:
    """Save a fitted model to a JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write(model.model_dump_json(indent=4))


def load_answer_key_csv(
    path: Path,
    option_pattern: str = OPTION_COLUMN_PATTERN,
    answer_pattern: str = ANSWER_COLUMN_PATTERN,
) -> AnswerKey:
    """Load an answer key from a CSV file with one row per item.

    Every cell is read as text so option labels such as "01" survive intact.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    return AnswerKey.from_dataframe(
        df, option_pattern=option_pattern, answer_pattern=answer_pattern
    )


def load_theta_csv(path: Path) -> NDArray[np.float64]:
    """Load a trait matrix from a headerless CSV, one respondent per row.

    Raises:
        ValueError: If the file contains non-numeric values.
    """
    df = pd.read_csv(path, header=None)
    try:
        theta = df.to_numpy(dtype=np.float64)
    except ValueError as e:
        raise ValueError(f"theta file {path} must be numeric: {e}") from e
    return theta


def pattern_to_dataframe(pattern: ResponsePattern) -> pd.DataFrame:
    """
    Convert a ResponsePattern to a pandas DataFrame.

    Columns: theta_1..theta_d followed by item_1..item_n.
    """
    theta_columns = {
        f"theta_{d + 1}": pattern.theta[:, d]
        for d in range(pattern.theta.shape[1])
    }
    item_columns = {
        f"item_{i + 1}": pattern.responses[:, i] for i in range(pattern.n_items)
    }
    return pd.DataFrame({**theta_columns, **item_columns})


def labels_to_dataframe(labels: list[str]) -> pd.DataFrame:
    """Convert a labeled pattern to a DataFrame with item and response columns."""
    return pd.DataFrame(
        {"item": np.arange(1, len(labels) + 1), "response": labels}
    )

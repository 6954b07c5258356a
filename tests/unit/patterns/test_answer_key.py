import numpy as np
import pandas as pd
import pytest

from pattern_service.core.exceptions import (
    DataIntegrityError,
    InvalidInputError,
    UnsupportedShapeError,
)
from pattern_service.patterns import AnswerKey, ItemKey


@pytest.fixture
def quiz_table() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Question": ["2 + 2 = ?", "Capital of France?", "Favourite colour?"],
            "Option.1": ["3", "Paris", "Red"],
            "Option.2": ["4", "Lyon", "Blue"],
            "Option.3": ["5", "Nice", "Green"],
            "Answer": ["4", "Paris", np.nan],
        }
    )


class TestFromDataframe:
    def test_builds_one_key_per_row(self, quiz_table: pd.DataFrame) -> None:
        key = AnswerKey.from_dataframe(quiz_table)

        assert len(key) == 3
        assert key[0] == ItemKey(options=("3", "4", "5"), answer="4")
        assert key[1].distractors == ("Lyon", "Nice")

    def test_missing_answer_marks_item_unscored(
        self, quiz_table: pd.DataFrame
    ) -> None:
        key = AnswerKey.from_dataframe(quiz_table)

        assert not key[2].is_scored
        assert key[2].options == ("Red", "Blue", "Green")

    def test_blank_option_cells_are_dropped(self) -> None:
        table = pd.DataFrame(
            {
                "Option.1": ["yes", "A"],
                "Option.2": ["no", "B"],
                "Option.3": ["", "C"],
            }
        )
        key = AnswerKey.from_dataframe(table)

        assert key[0].options == ("yes", "no")
        assert key[1].options == ("A", "B", "C")

    def test_table_without_answer_column(self) -> None:
        table = pd.DataFrame({"Option.1": ["A"], "Option.2": ["B"]})
        key = AnswerKey.from_dataframe(table)

        assert not key[0].is_scored

    def test_custom_column_patterns(self) -> None:
        table = pd.DataFrame(
            {"choice_a": ["x"], "choice_b": ["y"], "key": ["y"]}
        )
        key = AnswerKey.from_dataframe(
            table, option_pattern="choice", answer_pattern="key"
        )

        assert key[0] == ItemKey(options=("x", "y"), answer="y")


class TestTableValidation:
    def test_non_dataframe_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="DataFrame"):
            AnswerKey.from_dataframe({"Option.1": ["A"], "Answer": ["A"]})

    def test_multiple_answer_columns_rejected(
        self, quiz_table: pd.DataFrame
    ) -> None:
        quiz_table["Answer.2"] = ["3", "Lyon", np.nan]

        with pytest.raises(UnsupportedShapeError, match="Multiple correct"):
            AnswerKey.from_dataframe(quiz_table)

    def test_no_option_columns_rejected(self) -> None:
        table = pd.DataFrame({"Question": ["?"], "Answer": ["A"]})

        with pytest.raises(InvalidInputError, match="no columns"):
            AnswerKey.from_dataframe(table)

    def test_row_without_options_rejected(self) -> None:
        table = pd.DataFrame({"Option.1": ["A", ""], "Option.2": ["B", ""]})

        with pytest.raises(InvalidInputError, match="Item 1 has no options"):
            AnswerKey.from_dataframe(table)


class TestCategoricalCoercion:
    def test_text_categories_are_accepted(
        self, quiz_table: pd.DataFrame
    ) -> None:
        categorical = quiz_table.astype("category")

        key = AnswerKey.from_dataframe(categorical)

        assert key[1] == ItemKey(
            options=("Paris", "Lyon", "Nice"), answer="Paris"
        )
        assert not key[2].is_scored

    def test_numeric_categories_rejected(self) -> None:
        table = pd.DataFrame(
            {
                "Option.1": pd.Categorical([1, 2]),
                "Option.2": pd.Categorical([3, 4]),
                "Answer": pd.Categorical([1, 4]),
            }
        )

        with pytest.raises(DataIntegrityError, match="Option.1"):
            AnswerKey.from_dataframe(table)

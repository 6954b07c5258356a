import numpy as np
import pytest

from pattern_service.core.exceptions import UnsupportedShapeError
from pattern_service.patterns import as_theta_matrix


def test_flat_sequence_is_one_respondent() -> None:
    theta = as_theta_matrix([0.5, -1.0, 2.0])

    assert theta.shape == (1, 3)
    np.testing.assert_array_equal(theta, [[0.5, -1.0, 2.0]])


def test_scalar_becomes_one_by_one() -> None:
    assert as_theta_matrix(0.0).shape == (1, 1)


def test_matrix_shape_is_unchanged() -> None:
    raw = np.array([[0.0], [2.0], [-2.0]])
    theta = as_theta_matrix(raw)

    assert theta.shape == (3, 1)
    assert theta.dtype == np.float64
    np.testing.assert_array_equal(theta, raw)


def test_integer_input_is_converted_to_float() -> None:
    theta = as_theta_matrix([[1, 2], [3, 4]])

    assert theta.dtype == np.float64


def test_three_dimensional_input_rejected() -> None:
    with pytest.raises(UnsupportedShapeError):
        as_theta_matrix(np.zeros((2, 2, 2)))

import numpy as np
import pytest

from pattern_service.core.utils import get_rng
from pattern_service.simulation.distributions import (
    build_correlation_matrix,
    correlated_normal_scores,
    sample_theta,
)


class TestCorrelationMatrix:
    def test_exchangeable_structure(self) -> None:
        R = build_correlation_matrix(0.3, 3)

        np.testing.assert_allclose(np.diag(R), 1.0)
        off_diagonal = R[~np.eye(3, dtype=bool)]
        np.testing.assert_allclose(off_diagonal, 0.3)

    def test_single_dimension_ignores_correlation(self) -> None:
        np.testing.assert_array_equal(
            build_correlation_matrix(0.8, 1), np.ones((1, 1))
        )

    def test_not_positive_semi_definite_rejected(self) -> None:
        # eigenvalue 1 + 2 * (-0.9) is negative
        with pytest.raises(ValueError, match="valid correlation"):
            build_correlation_matrix(-0.9, 3)


class TestCorrelatedNormalScores:
    @pytest.mark.parametrize(("n", "d"), [(1, 1), (1, 3), (5, 1), (5, 3)])
    def test_always_two_dimensional(self, n: int, d: int) -> None:
        scores = correlated_normal_scores(n, np.eye(d), get_rng(42))

        assert scores.shape == (n, d)
        assert scores.dtype == np.float64


class TestSampleTheta:
    def test_empirical_correlation_matches_config(self) -> None:
        theta = sample_theta(
            5000, 2, "normal", {"mean": 0.0, "std": 1.0}, 0.6, get_rng(42)
        )

        assert theta.shape == (5000, 2)
        assert np.corrcoef(theta.T)[0, 1] == pytest.approx(0.6, abs=0.05)

    def test_zero_correlation_gives_uncorrelated_dimensions(self) -> None:
        theta = sample_theta(5000, 3, rng=get_rng(42))

        corr = np.corrcoef(theta.T)
        assert np.max(np.abs(corr[~np.eye(3, dtype=bool)])) < 0.05

    def test_normal_margin_respects_params(self) -> None:
        theta = sample_theta(
            2000, 1, "normal", {"mean": 100.0, "std": 0.1}, rng=get_rng(42)
        )

        assert np.mean(theta) == pytest.approx(100.0, abs=0.1)

    def test_truncated_normal_stays_in_bounds_and_keeps_correlation(
        self,
    ) -> None:
        theta = sample_theta(
            4000,
            2,
            "truncated_normal",
            {"mean": 0.0, "std": 1.0, "lower": -1.0, "upper": 1.0},
            0.7,
            get_rng(42),
        )

        assert np.all(theta >= -1.0)
        assert np.all(theta <= 1.0)
        assert np.corrcoef(theta.T)[0, 1] > 0.5

    def test_uniform_margin_bounds(self) -> None:
        theta = sample_theta(
            1000, 2, "uniform", {"low": 2.0, "high": 3.0}, rng=get_rng(42)
        )

        assert np.all((theta >= 2.0) & (theta <= 3.0))

    def test_bimodal_respects_weight(self) -> None:
        theta = sample_theta(
            4000,
            2,
            "bimodal",
            {
                "loc1": -10.0,
                "scale1": 0.1,
                "loc2": 10.0,
                "scale2": 0.1,
                "weight1": 0.25,
            },
            rng=get_rng(42),
        )

        assert np.mean(theta[:, 0] < 0) == pytest.approx(0.25, abs=0.03)
        # a respondent belongs to one subpopulation on every dimension
        np.testing.assert_array_equal(theta[:, 0] < 0, theta[:, 1] < 0)

    def test_bimodal_weight_out_of_range_rejected(self) -> None:
        params = {
            "loc1": 0.0,
            "scale1": 1.0,
            "loc2": 0.0,
            "scale2": 1.0,
            "weight1": 1.5,
        }
        with pytest.raises(ValueError, match="weight1"):
            sample_theta(10, 1, "bimodal", params, rng=get_rng(42))

    def test_unknown_margin_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown theta distribution"):
            sample_theta(10, 1, "student_t", {}, rng=get_rng(42))

    def test_reproducible_with_same_seed(self) -> None:
        first = sample_theta(50, 2, correlation=0.4, rng=get_rng(7))
        second = sample_theta(50, 2, correlation=0.4, rng=get_rng(7))

        np.testing.assert_array_equal(first, second)

from pathlib import Path

import pytest

from pattern_service.simulation.config import SimulationConfig, load_config
from pattern_service.simulation.presets import (
    get_available_presets,
    get_preset,
)


def test_presets_are_discovered() -> None:
    presets = get_available_presets()

    assert "baseline" in presets
    assert "two_dimensional" in presets


def test_baseline_preset_loads() -> None:
    config = get_preset("baseline")

    assert isinstance(config, SimulationConfig)
    assert config.n_dimensions == 1
    assert config.theta.distribution == "normal"


def test_unknown_preset_raises() -> None:
    with pytest.raises(ValueError, match="Unknown preset"):
        get_preset("does_not_exist")


def test_yaml_overrides_defaults(tmp_path: Path) -> None:
    path = tmp_path / "study.yaml"
    path.write_text("n_respondents: 25\nrandom_seed: 3\n")

    config = load_config(path)

    assert config.n_respondents == 25
    assert config.n_dimensions == 1
    assert config.theta.params == {"mean": 0.0, "std": 1.0}


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_invalid_respondent_count_rejected() -> None:
    with pytest.raises(ValueError, match="at least 1 respondent"):
        SimulationConfig(n_respondents=0, random_seed=1)


def test_two_dimensional_preset_is_correlated() -> None:
    config = get_preset("two_dimensional")

    assert config.n_dimensions == 2
    assert config.correlation == pytest.approx(0.4)


def test_correlation_out_of_range_rejected() -> None:
    with pytest.raises(ValueError, match="correlation"):
        SimulationConfig(n_respondents=5, correlation=1.5, random_seed=1)

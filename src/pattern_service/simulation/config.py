from dataclasses import dataclass, field
from pathlib import Path

from omegaconf import MISSING, OmegaConf


@dataclass
class DistributionConfig:
    """Marginal distribution shared by every latent dimension.

    Attributes:
        distribution: Margin name ("normal", "truncated_normal", "uniform",
            "bimodal")
        params: Distribution parameters (mean, std, lower, upper, etc.)
    """

    distribution: str = MISSING
    params: dict[str, float | None] = MISSING


def _default_theta() -> DistributionConfig:
    return DistributionConfig(
        distribution="normal", params={"mean": 0.0, "std": 1.0}
    )


@dataclass
class SimulationConfig:
    """Configuration for a Monte Carlo pattern simulation.

    Each respondent's theta is drawn with `theta` as the margin of every
    dimension and `correlation` between each pair of dimensions, then one
    response pattern is generated per respondent.
    """

    n_respondents: int
    n_dimensions: int = 1

    theta: DistributionConfig = field(default_factory=_default_theta)
    correlation: float = 0.0

    # Reproducibility
    random_seed: int = MISSING

    def __post_init__(self) -> None:
        if self.n_respondents <= 0:
            raise ValueError("Must have at least 1 respondent")
        if self.n_dimensions <= 0:
            raise ValueError("Must have at least 1 latent dimension")
        if not (-1.0 <= self.correlation <= 1.0):
            raise ValueError(
                f"correlation must be in [-1, 1], got {self.correlation}"
            )


def load_config(yaml_path: Path) -> SimulationConfig:
    """Load and validate a simulation configuration from YAML.

    Args:
        yaml_path: Path to YAML config file

    Returns:
        Validated SimulationConfig

    Raises:
        FileNotFoundError: If yaml_path doesn't exist
    """
    schema = OmegaConf.structured(SimulationConfig)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    user_config = OmegaConf.load(yaml_path)
    config = OmegaConf.merge(schema, user_config)

    # Convert to typed dataclass
    result = OmegaConf.to_object(config)
    assert isinstance(result, SimulationConfig)

    return result

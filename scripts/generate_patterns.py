#!/usr/bin/env python
"""
Generate response patterns from a fitted IRT model saved as JSON.
"""

import logging
from pathlib import Path

import numpy as np
import typer
from rich.console import Console
from rich.panel import Panel

from pattern_service.core.data import (
    labels_to_dataframe,
    load_answer_key_csv,
    load_fitted_model,
    load_theta_csv,
    pattern_to_dataframe,
)
from pattern_service.core.exceptions import PatternGenerationError
from pattern_service.core.utils import get_rng
from pattern_service.irt.models import FittedModel
from pattern_service.patterns.diagnostics import (
    category_goodness_of_fit,
    compute_category_frequency_comparison,
)
from pattern_service.patterns.generator import ResponsePattern, generate_pattern
from pattern_service.settings import PatternSettings
from pattern_service.simulation.generators import simulate_patterns
from pattern_service.simulation.presets import (
    get_available_presets,
    get_preset,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("generate_patterns")

console = Console(force_terminal=True, legacy_windows=True)
app = typer.Typer()


def _load_model(model_path: Path) -> FittedModel:
    if not model_path.exists():
        console.print(f"[red]File not found: {model_path}[/red]")
        raise typer.Exit(1)
    try:
        return load_fitted_model(model_path)
    except ValueError as e:
        console.print(f"[red]Error loading model: {e}[/red]")
        raise typer.Exit(1) from e


@app.command()
def generate(
    model_path: Path = typer.Argument(
        ..., help="Path to a fitted model JSON file"
    ),
    theta: list[float] = typer.Option(
        None,
        "-t",
        "--theta",
        help="Trait value for one respondent; repeat once per dimension",
    ),
    theta_csv: Path | None = typer.Option(
        None,
        "--theta-csv",
        help="Headerless CSV with one respondent's traits per row",
    ),
    answer_key: Path | None = typer.Option(
        None,
        "-k",
        "--answer-key",
        help="CSV with Option/Answer columns, one row per item",
    ),
    output_path: Path | None = typer.Option(
        None, "-o", "--output", help="Write the pattern to this CSV file"
    ),
    seed: int | None = typer.Option(
        None, "-s", "--seed", help="Random seed for reproducibility"
    ),
) -> None:
    """Generate one or more response patterns at given trait values."""
    settings = PatternSettings()
    model = _load_model(model_path)

    if theta_csv is not None:
        theta_values = load_theta_csv(theta_csv)
    elif theta:
        theta_values = np.array(theta, dtype=np.float64)
    else:
        console.print("[red]Provide --theta or --theta-csv[/red]")
        raise typer.Exit(1)

    if np.atleast_2d(theta_values).shape[0] > settings.max_respondents:
        console.print(
            f"[red]At most {settings.max_respondents} respondents allowed[/red]"
        )
        raise typer.Exit(1)

    rng = get_rng(seed if seed is not None else settings.default_seed)

    try:
        table = (
            load_answer_key_csv(
                answer_key,
                option_pattern=settings.option_column_pattern,
                answer_pattern=settings.answer_column_pattern,
            )
            if answer_key is not None
            else None
        )
        result = generate_pattern(model, theta_values, table=table, rng=rng)
    except PatternGenerationError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    if isinstance(result, ResponsePattern):
        df = pattern_to_dataframe(result)
    else:
        df = labels_to_dataframe(result)

    if output_path is None:
        console.print(df.to_string(index=False))
    else:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(output_path, index=False)
        console.print(
            Panel(
                f"[bold green]Pattern saved[/bold green]\n\n"
                f"Output: [cyan]{output_path}[/cyan]",
                title="Done",
            )
        )


@app.command()
def simulate(
    model_path: Path = typer.Argument(
        ..., help="Path to a fitted model JSON file"
    ),
    preset: str = typer.Option(
        "baseline",
        "-p",
        "--preset",
        help=f"Simulation preset, one of {get_available_presets()}",
    ),
    output_path: Path = typer.Option(
        ..., "-o", "--output", help="Output CSV file"
    ),
) -> None:
    """Simulate a population from a preset and save its response patterns."""
    model = _load_model(model_path)
    try:
        config = get_preset(preset)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    console.print(
        Panel(
            f"[bold]Simulate Patterns[/bold]\n\n"
            f"Preset: [cyan]{preset}[/cyan]\n"
            f"Respondents: [cyan]{config.n_respondents}[/cyan]\n"
            f"Dimensions: [cyan]{config.n_dimensions}[/cyan]\n"
            f"Items: [cyan]{model.item_count()}[/cyan]",
            title="Configuration",
        )
    )

    pattern = simulate_patterns(model, config)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    pattern_to_dataframe(pattern).to_csv(output_path, index=False)
    logger.info("Wrote %d patterns to %s", pattern.n_respondents, output_path)


@app.command()
def check(
    model_path: Path = typer.Argument(
        ..., help="Path to a fitted model JSON file"
    ),
    theta: list[float] = typer.Option(
        ..., "-t", "--theta", help="Trait value; repeat once per dimension"
    ),
    n_draws: int = typer.Option(
        10000, "-n", "--n-draws", help="Number of patterns to generate"
    ),
    seed: int | None = typer.Option(
        None, "-s", "--seed", help="Random seed for reproducibility"
    ),
) -> None:
    """Compare generated category frequencies with model probabilities."""
    model = _load_model(model_path)

    console.print("[dim]Generating patterns...[/dim]")
    comparison = compute_category_frequency_comparison(
        model, theta, n_draws, rng=get_rng(seed)
    )
    p_values = category_goodness_of_fit(comparison)

    max_abs_diff = float(np.max(np.abs(comparison.difference)))
    console.print("Pattern Diagnostics:")
    console.print(f"  Max |diff| = {max_abs_diff:.4f}")
    console.print(f"  Min chi-square p-value = {float(p_values.min()):.4f}")
    for item_idx, p in enumerate(p_values):
        console.print(f"  item {item_idx + 1}: p = {p:.4f}")


if __name__ == "__main__":
    app()

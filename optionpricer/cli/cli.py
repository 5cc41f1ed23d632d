"""
Command-Line Interface for the Option Pricer

Provides CLI commands for pricing option books, recognizing the structures
they contain, exporting payoff profiles, inverting implied volatility and
simulating delta hedging.

Usage:
    option-pricer price book.yaml --method mc --seed 42
    option-pricer detect book.yaml
    option-pricer payoff book.yaml --output payoff.csv
    option-pricer implied-vol --type call --spot 100 --strike 100 --maturity 1 --price 10.45
    option-pricer hedge --type call --spot 100 --strike 100 --maturity 1 --volatility 0.2
    option-pricer objectives
    option-pricer env
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click

from optionpricer.analytics.analyzer import summarize
from optionpricer.analytics.hedging import simulate_delta_hedging
from optionpricer.analytics.implied_vol import solve_implied_volatility
from optionpricer.analytics.payoff import breakeven_points, export_csv, generate_grid
from optionpricer.cli.config_loader import Book, ConfigValidationError, load_book
from optionpricer.cli.environment import (
    Environment,
    configure_logging,
    get_settings,
    set_environment,
)
from optionpricer.core.monte_carlo import MonteCarloPricer
from optionpricer.core.option import Option, OptionError, OptionType
from optionpricer.core.pricing import BlackScholesPricer, PricingError, PricingMethod
from optionpricer.structures.detector import detect_structures
from optionpricer.structures.strategy import OBJECTIVES


def echo(message: str = "", err: bool = False) -> None:
    click.echo(message, err=err)


def echo_error(message: str) -> None:
    """Output error message."""
    echo(f"Error: {message}", err=True)


def echo_success(message: str) -> None:
    echo(message)


def _load_or_exit(path: Path) -> Book:
    try:
        return load_book(path)
    except ConfigValidationError as e:
        echo_error(str(e))
        for error in e.errors:
            echo(f"  - {error}", err=True)
        sys.exit(1)
    except (FileNotFoundError, ValueError) as e:
        echo_error(str(e))
        sys.exit(1)


def _make_method(method: str, simulations: Optional[int], seed: Optional[int]) -> PricingMethod:
    if method == "bs":
        return BlackScholesPricer()
    settings = get_settings()
    return MonteCarloPricer(
        simulations=simulations or settings.mc_simulations,
        seed=seed if seed is not None else settings.mc_seed,
    )


def _contract_options(func):
    """Shared options describing a single European contract."""
    decorators = [
        click.option("--type", "option_type", type=click.Choice(["call", "put"]),
                     default="call", show_default=True, help="Option type"),
        click.option("--spot", type=float, required=True, help="Spot price of the underlying"),
        click.option("--strike", type=float, required=True, help="Strike price"),
        click.option("--rate", type=float, default=0.0, show_default=True, help="Risk-free rate"),
        click.option("--dividend-yield", type=float, default=0.0, show_default=True,
                     help="Continuous dividend yield"),
        click.option("--maturity", type=float, required=True, help="Time to expiry in years"),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


@click.group()
@click.option(
    "--env",
    "-e",
    type=click.Choice(["development", "staging", "production", "test"]),
    default="development",
    help="Environment to use",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.version_option(version="1.0.0", prog_name="Option Pricer")
@click.pass_context
def cli(ctx: click.Context, env: str, verbose: bool) -> None:
    """Option Pricer CLI - Price option books and analyze their risk."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    set_environment(Environment(env))
    if verbose:
        configure_logging()


@cli.command()
@click.argument("book", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--method",
    "-m",
    type=click.Choice(["bs", "mc"]),
    default="bs",
    show_default=True,
    help="Pricing method: Black-Scholes or Monte Carlo",
)
@click.option("--simulations", "-n", type=int, help="Monte Carlo simulations (overrides settings)")
@click.option("--seed", type=int, help="Monte Carlo seed (overrides settings)")
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
@click.pass_context
def price(
    ctx: click.Context,
    book: Path,
    method: str,
    simulations: Optional[int],
    seed: Optional[int],
    as_json: bool,
) -> None:
    """Price a book and show its Greeks."""
    verbose = ctx.obj.get("verbose", False)
    loaded = _load_or_exit(book)

    try:
        pricer = _make_method(method, simulations, seed)
        summary = summarize(loaded.portfolio, pricer, get_settings().margin_pct)
    except PricingError as e:
        echo_error(str(e))
        sys.exit(1)

    if as_json:
        echo(json.dumps(summary, indent=2))
        return

    echo(f"\nBook: {loaded.name} ({pricer.name})")
    echo("-" * 40)
    for key, value in summary["greeks"].items():
        echo(f"  {key:<8} {value:>14.6f}")
    echo(f"  {'capital':<8} {summary['capital_required']:>14.2f}")
    echo("")
    for key, text in summary["interpretation"].items():
        echo(f"  {key}: {text}")

    if verbose:
        echo("")
        echo(loaded.portfolio.risk_table(pricer).to_string(index=False))


@cli.command()
@click.argument("book", type=click.Path(exists=True, path_type=Path))
def detect(book: Path) -> None:
    """Recognize the strategies contained in a book."""
    loaded = _load_or_exit(book)
    matches = detect_structures(loaded.portfolio.flatten_legs())

    if not matches:
        echo("No known structure detected.")
        return

    echo(f"Detected {len(matches)} structure(s):")
    for match in matches:
        echo(f"  {match.name}: {match.detail}")
        echo(f"    {match.objective}")


@cli.command()
@click.argument("book", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    required=True,
    help="Destination CSV file",
)
@click.option("--premium", type=float, help="Initial premium (defaults to the Black-Scholes book value)")
def payoff(book: Path, output: Path, premium: Optional[float]) -> None:
    """Export the payoff profile of a book to CSV."""
    loaded = _load_or_exit(book)
    settings = get_settings()

    if premium is None:
        premium = loaded.portfolio.price(BlackScholesPricer())

    grid = generate_grid(
        loaded.market.spot,
        settings.grid_min_pct,
        settings.grid_max_pct,
        settings.grid_points,
    )
    legs = list(loaded.portfolio.flatten_legs())
    export_csv(output, legs, grid, premium)

    echo_success(f"Payoff profile written to {output}")
    breakevens = breakeven_points(legs, grid, premium)
    if breakevens:
        echo("Breakeven: " + ", ".join(f"{x:.2f}" for x in breakevens))


@cli.command(name="implied-vol")
@_contract_options
@click.option("--price", "target_price", type=float, required=True, help="Observed option price")
@click.option("--guess", type=float, default=0.20, show_default=True, help="Initial volatility guess")
def implied_vol(
    option_type: str,
    spot: float,
    strike: float,
    rate: float,
    dividend_yield: float,
    maturity: float,
    target_price: float,
    guess: float,
) -> None:
    """Solve the Black-Scholes implied volatility of an observed price."""
    try:
        option = Option(OptionType.parse(option_type), spot, strike, rate,
                        dividend_yield, maturity, guess)
        sigma = solve_implied_volatility(option, target_price)
    except (OptionError, PricingError) as e:
        echo_error(str(e))
        sys.exit(1)

    echo(f"Implied volatility: {sigma:.6f}")


@cli.command()
@_contract_options
@click.option("--volatility", type=float, required=True, help="Annualized volatility")
@click.option("--steps", type=int, help="Rebalancing dates (overrides settings)")
@click.option("--paths", type=int, help="Simulated paths (overrides settings)")
@click.option("--cost", type=float, help="Proportional transaction cost (overrides settings)")
@click.option("--seed", type=int, help="Random seed")
def hedge(
    option_type: str,
    spot: float,
    strike: float,
    rate: float,
    dividend_yield: float,
    maturity: float,
    volatility: float,
    steps: Optional[int],
    paths: Optional[int],
    cost: Optional[float],
    seed: Optional[int],
) -> None:
    """Simulate discrete delta hedging of a single option."""
    settings = get_settings()

    try:
        option = Option(OptionType.parse(option_type), spot, strike, rate,
                        dividend_yield, maturity, volatility)
        result = simulate_delta_hedging(
            option,
            BlackScholesPricer(),
            steps=steps if steps is not None else settings.hedge_steps,
            paths=paths if paths is not None else settings.hedge_paths,
            cost=cost if cost is not None else settings.transaction_cost,
            seed=seed if seed is not None else settings.mc_seed,
        )
    except (OptionError, PricingError) as e:
        echo_error(str(e))
        sys.exit(1)

    echo(f"\nDelta hedging: {option}")
    echo("-" * 40)
    for key, value in result.to_dict().items():
        echo(f"  {key}: {value}")


@cli.command()
def objectives() -> None:
    """List investor objectives and the strategy for each."""
    echo("Investor objectives:")
    echo("-" * 40)
    for objective in OBJECTIVES:
        echo(f"  {objective.number}. {objective.title} -> {objective.strategy.value}")
        echo(f"     {objective.description}")


@cli.command()
def env() -> None:
    """Show current environment configuration."""
    settings = get_settings()

    echo(f"\nEnvironment: {settings.name.value}")
    echo("-" * 40)
    echo(f"  Log Level: {settings.log_level}")
    echo(f"  Output: {settings.output_directory}")
    echo(f"  MC Simulations: {settings.mc_simulations}")
    echo(f"  MC Seed: {settings.mc_seed if settings.mc_seed is not None else 'random'}")
    echo(f"  Hedge Steps/Paths: {settings.hedge_steps}/{settings.hedge_paths}")
    echo(f"  Transaction Cost: {settings.transaction_cost}")
    echo(f"  Margin: {settings.margin_pct:.0%}")
    echo(
        f"  Payoff Grid: {settings.grid_min_pct:.0%}-{settings.grid_max_pct:.0%} "
        f"of spot, {settings.grid_points} points"
    )


def main() -> None:
    """Main entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()

"""
Payoff Analysis Module

Terminal payoff profiles of option books over a grid of underlying prices,
and their CSV export for downstream tooling.

CSV Format:
    Header:   S_T;Payoff;Profit;PremiumInitiale
    Rows:     one per grid point, ';'-separated
    Numbers:  '.' decimal separator, no thousands separator, integral values
              written without decimals (100;0;-5;5)

Usage:
    from optionpricer.analytics.payoff import generate_grid, payoff_table, export_csv

    grid = generate_grid(spot=100.0)                   # 20% .. 200% of spot
    table = payoff_table(strategy.legs, grid, premium=4.2)
    export_csv("payoff.csv", strategy.legs, grid, premium=4.2)
"""

import logging
from pathlib import Path
from typing import Iterable, List, Tuple, Union

import numpy as np
import pandas as pd

from optionpricer.core.option import Leg, Option

# Configure module logger
logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEFAULT_MIN_PCT = 0.20
DEFAULT_MAX_PCT = 2.00
DEFAULT_POINTS = 201

CSV_HEADER = "S_T;Payoff;Profit;PremiumInitiale"
CSV_COLUMNS = ['S_T', 'Payoff', 'Profit', 'PremiumInitiale']


# =============================================================================
# Grid and Payoffs
# =============================================================================

def generate_grid(
    spot: float,
    min_pct: float = DEFAULT_MIN_PCT,
    max_pct: float = DEFAULT_MAX_PCT,
    points: int = DEFAULT_POINTS
) -> np.ndarray:
    """
    Evenly spaced grid of terminal prices between min_pct and max_pct of spot.

    Fewer than 2 points are raised to 2; the lower bound is floored at 0 and
    the upper bound kept strictly above it.
    """
    points = max(int(points), 2)
    lower = max(0.0, min_pct * spot)
    upper = max(lower + 1e-8, max_pct * spot)
    step = (upper - lower) / (points - 1)
    return lower + step * np.arange(points, dtype=np.float64)


def leg_payoff(option: Option, spot_at_expiry):
    """Payoff of one unit of an option at expiry."""
    return option.payoff(spot_at_expiry)


def total_payoff(legs: Iterable[Tuple[Option, int]], spot_at_expiry):
    """Quantity-weighted payoff of all legs (scalar or numpy array)."""
    total = 0.0
    for option, quantity in legs:
        total = total + quantity * option.payoff(spot_at_expiry)
    if np.ndim(total) == 0:
        return float(total)
    return total


def payoff_table(
    legs: Iterable[Tuple[Option, int]],
    grid: Iterable[float],
    premium: float
) -> pd.DataFrame:
    """
    Payoff and profit over a grid.

    Returns:
        DataFrame with columns S_T, Payoff, Profit (payoff - premium) and
        PremiumInitiale (the premium, repeated)
    """
    legs = [Leg(option, int(quantity)) for option, quantity in legs]
    prices = np.asarray(list(grid), dtype=np.float64)
    payoff = np.zeros_like(prices) + total_payoff(legs, prices)

    return pd.DataFrame({
        'S_T': prices,
        'Payoff': payoff,
        'Profit': payoff - premium,
        'PremiumInitiale': np.full_like(prices, float(premium)),
    }, columns=CSV_COLUMNS)


def breakeven_points(
    legs: Iterable[Tuple[Option, int]],
    grid: Iterable[float],
    premium: float
) -> List[float]:
    """
    Terminal prices where the profit curve crosses zero.

    Crossings between grid points are located by linear interpolation;
    grid points with exactly zero profit are reported as is.
    """
    table = payoff_table(legs, grid, premium)
    prices = table['S_T'].to_numpy()
    profit = table['Profit'].to_numpy()

    points: List[float] = []
    for i in range(len(prices)):
        if profit[i] == 0.0:
            points.append(float(prices[i]))
        elif i > 0 and profit[i - 1] * profit[i] < 0:
            x0, x1 = prices[i - 1], prices[i]
            y0, y1 = profit[i - 1], profit[i]
            points.append(float(x0 - y0 * (x1 - x0) / (y1 - y0)))
    return points


# =============================================================================
# Export
# =============================================================================

def format_invariant(value: float) -> str:
    """
    Format a number with '.' as decimal separator and no grouping.

    Integral values below 1e15 are written without a fractional part. Other
    values use the shortest representation that round-trips, switching to
    exponent notation below 1e-4 and from 1e15 upwards with an upper-case
    'E' and a signed two-digit exponent ("1E-05", "1.5E+15"). Non-finite
    values are written as NaN, Infinity and -Infinity.
    """
    value = float(value)
    if np.isnan(value):
        return "NaN"
    if np.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))

    text = repr(value)
    if "e" not in text and abs(value) >= 1e15:
        text = np.format_float_scientific(value, unique=True, trim='-', exp_digits=2)
    return text.replace("e", "E")


def export_csv(
    path: Union[str, Path],
    legs: Iterable[Tuple[Option, int]],
    grid: Iterable[float],
    premium: float
) -> Path:
    """
    Write the payoff profile to a ';'-separated CSV file.

    Args:
        path: Destination file (overwritten)
        legs: Legs of the book
        grid: Terminal prices
        premium: Initial premium paid (negative for a net credit)

    Returns:
        The path written
    """
    path = Path(path)
    table = payoff_table(legs, grid, premium)

    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(CSV_HEADER + "\n")
        for row in table.itertuples(index=False):
            f.write(";".join(format_invariant(value) for value in row) + "\n")

    logger.info(f"Exported payoff profile ({len(table)} rows) to {path}")
    return path

"""
Portfolio Aggregation for the Option Pricer

A Portfolio holds two kinds of lines: raw option positions and strategy
positions. Every portfolio figure (price and Greeks) is the signed,
quantity-weighted sum over the flattened legs, valued with a pricing method
supplied by the caller.

Flattening:
    - Raw lines are yielded first, in insertion order
    - Strategy lines follow, each expanded into its legs with the leg
      quantity multiplied by the strategy line quantity
    - Flattening never mutates the portfolio and can be repeated freely

Quantities must be signed integers (int or numpy integer). Floats and bools
are rejected with PortfolioValidationError rather than truncated.

Usage:
    from optionpricer.core.portfolio import Portfolio
    from optionpricer.core.pricing import BlackScholesPricer
    from optionpricer.core.monte_carlo import MonteCarloPricer
    from optionpricer.structures.strategy import straddle

    book = Portfolio()
    book.add_option(call, 2)
    book.add_strategy(straddle(100, 0.02, 0.0, 1.0, 0.2, 100), -1)

    bs_value = book.price(BlackScholesPricer())
    mc_value = book.price(MonteCarloPricer(seed=7))
    risk = book.risk_table(BlackScholesPricer())
"""

import logging
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Tuple

import numpy as np
import pandas as pd

from optionpricer.core.option import Leg, Option
from optionpricer.core.pricing import GREEK_NAMES, PricingMethod

if TYPE_CHECKING:
    from optionpricer.structures.strategy import Strategy

# Configure module logger
logger = logging.getLogger(__name__)


class PortfolioError(Exception):
    """Base exception for portfolio errors."""
    pass


class PortfolioValidationError(PortfolioError, ValueError):
    """Exception raised when a line quantity is not a signed integer."""
    pass


def validate_quantity(quantity) -> int:
    """Return quantity as an int, rejecting bools, floats and other non-integers."""
    if isinstance(quantity, bool) or not isinstance(quantity, (int, np.integer)):
        raise PortfolioValidationError(
            f"quantity must be an integer, got {quantity!r} ({type(quantity).__name__})"
        )
    return int(quantity)


class Portfolio:
    """
    Mutable container of option lines and strategy lines.

    Zero-quantity additions are dropped, so no stored line ever has a
    quantity of zero. A Portfolio is owned by its caller and is not
    synchronized for concurrent mutation.
    """

    def __init__(self, name: str = "portfolio") -> None:
        self.name = name
        self._option_lines: List[Tuple[Option, int]] = []
        self._strategy_lines: List[Tuple["Strategy", int]] = []

    # =========================================================================
    # Lines
    # =========================================================================

    def add_option(self, option: Option, quantity: int = 1) -> None:
        """Add a raw option position (quantity > 0 long, < 0 short)."""
        quantity = validate_quantity(quantity)
        if quantity == 0:
            return
        self._option_lines.append((option, quantity))
        logger.debug(f"{self.name}: added {quantity:+d} x {option}")

    def add_strategy(self, strategy: "Strategy", quantity: int = 1) -> None:
        """Add a strategy position (quantity > 0 long, < 0 short)."""
        quantity = validate_quantity(quantity)
        if quantity == 0:
            return
        self._strategy_lines.append((strategy, quantity))
        logger.debug(f"{self.name}: added {quantity:+d} x {strategy.name}")

    @property
    def option_lines(self) -> Tuple[Tuple[Option, int], ...]:
        return tuple(self._option_lines)

    @property
    def strategy_lines(self) -> Tuple[Tuple["Strategy", int], ...]:
        return tuple(self._strategy_lines)

    def flatten_legs(self) -> Iterator[Leg]:
        """Yield every unit leg of the portfolio with its effective quantity."""
        for option, quantity in self._option_lines:
            yield Leg(option, quantity)

        for strategy, quantity in self._strategy_lines:
            for leg in strategy.legs:
                yield Leg(leg.option, leg.quantity * quantity)

    def __len__(self) -> int:
        return len(self._option_lines) + len(self._strategy_lines)

    def __iter__(self) -> Iterator[Leg]:
        return self.flatten_legs()

    # =========================================================================
    # Valuation
    # =========================================================================

    def _weighted(self, measure: Callable[[Option], float]) -> float:
        total = 0.0
        for leg in self.flatten_legs():
            total += leg.quantity * measure(leg.option)
        return total

    def price(self, method: PricingMethod) -> float:
        return self._weighted(method.price)

    def delta(self, method: PricingMethod) -> float:
        return self._weighted(method.delta)

    def gamma(self, method: PricingMethod) -> float:
        return self._weighted(method.gamma)

    def vega(self, method: PricingMethod) -> float:
        return self._weighted(method.vega)

    def theta(self, method: PricingMethod) -> float:
        return self._weighted(method.theta)

    def rho(self, method: PricingMethod) -> float:
        return self._weighted(method.rho)

    def greeks(self, method: PricingMethod) -> Dict[str, float]:
        """Net price and Greeks of the whole portfolio."""
        return {
            'price': self.price(method),
            'delta': self.delta(method),
            'gamma': self.gamma(method),
            'vega': self.vega(method),
            'theta': self.theta(method),
            'rho': self.rho(method),
        }

    def risk_table(self, method: PricingMethod) -> pd.DataFrame:
        """
        Per-leg valuation table.

        Columns: type, strike, maturity, quantity, unit_price, price and the
        quantity-weighted Greeks. Empty portfolios give an empty frame with
        the same columns.
        """
        columns = ['type', 'strike', 'maturity', 'quantity', 'unit_price', 'price', *GREEK_NAMES]
        rows = []
        for leg in self.flatten_legs():
            option = leg.option
            unit_price = method.price(option)
            greeks = method.greeks(option)
            row = {
                'type': option.option_type.value,
                'strike': option.strike,
                'maturity': option.maturity,
                'quantity': leg.quantity,
                'unit_price': unit_price,
                'price': leg.quantity * unit_price,
            }
            for greek in GREEK_NAMES:
                row[greek] = leg.quantity * greeks[greek]
            rows.append(row)

        return pd.DataFrame(rows, columns=columns)

    def __repr__(self) -> str:
        return (
            f"Portfolio(name={self.name!r}, options={len(self._option_lines)}, "
            f"strategies={len(self._strategy_lines)})"
        )

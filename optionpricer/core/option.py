"""
Option Contract Model for the Option Pricer

This module defines the European option contract used by every pricing
engine, strategy template and analytical tool in the package. An Option is
an immutable bundle of market and contract parameters tagged with its
type (call or put).

Key Features:
    - Tagged option type (OptionType.CALL / OptionType.PUT)
    - Validation of contract parameters at construction
    - Clone helpers for bump-and-revalue (with_spot, with_volatility, ...)
    - Terminal payoff for scalars and numpy arrays
    - Year fraction helper using the 365-day convention

Usage:
    from optionpricer.core.option import Option, OptionType, create_call

    call = create_call(spot=100.0, strike=105.0, rate=0.02,
                       dividend_yield=0.01, maturity=0.5, volatility=0.25)

    # Calibration never mutates the contract; it produces a new one
    recalibrated = call.with_volatility(0.22)

    payoff = call.payoff(120.0)   # 15.0

Conventions:
    - maturity is expressed in years (0 means at expiry)
    - rate and dividend_yield are continuously compounded annual rates
    - volatility is annualized (0.20 for 20%)
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import NamedTuple, Union

import numpy as np

# Configure module logger
logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DAYS_PER_YEAR = 365

VALID_OPTION_TYPES = {'call': 'call', 'c': 'call', 'put': 'put', 'p': 'put'}


# =============================================================================
# Exceptions
# =============================================================================

class OptionError(Exception):
    """Base exception for Option errors."""
    pass


class OptionValidationError(OptionError, ValueError):
    """Exception raised when option parameters are invalid."""
    pass


# =============================================================================
# Option Type
# =============================================================================

class OptionType(str, Enum):
    """European option type."""

    CALL = "call"
    PUT = "put"

    @classmethod
    def parse(cls, value: Union[str, "OptionType"]) -> "OptionType":
        """
        Parse an option type from a string ('call', 'c', 'put', 'p').

        Raises:
            OptionValidationError: If the value is not a recognised type
        """
        if isinstance(value, OptionType):
            return value
        if not value or not isinstance(value, str):
            raise OptionValidationError("option_type must be a non-empty string")
        normalized = VALID_OPTION_TYPES.get(value.lower().strip())
        if normalized is None:
            raise OptionValidationError(
                f"option_type must be 'call' or 'put', got '{value}'"
            )
        return cls(normalized)


# =============================================================================
# Option
# =============================================================================

@dataclass(frozen=True)
class Option:
    """
    European option contract (call or put).

    All fields are fixed at construction. Volatility is the calibration
    channel of the contract: solvers and scenario tools obtain a recalibrated
    instrument through with_volatility() instead of mutating this one.

    Attributes:
        option_type (OptionType): CALL or PUT
        spot (float): Spot price of the underlying (S0)
        strike (float): Strike price (K)
        rate (float): Risk-free rate (r), continuously compounded
        dividend_yield (float): Continuous dividend yield (q)
        maturity (float): Time to expiry in years (T)
        volatility (float): Annualized volatility (sigma)

    Example:
        >>> opt = Option(OptionType.PUT, spot=100, strike=95, rate=0.02,
        ...              dividend_yield=0.0, maturity=1.0, volatility=0.2)
        >>> opt.payoff(80.0)
        15.0
    """

    option_type: OptionType
    spot: float
    strike: float
    rate: float
    dividend_yield: float
    maturity: float
    volatility: float

    def __post_init__(self) -> None:
        object.__setattr__(self, 'option_type', OptionType.parse(self.option_type))

        for name in ('spot', 'strike', 'rate', 'dividend_yield', 'maturity', 'volatility'):
            value = getattr(self, name)
            if value is None:
                raise OptionValidationError(f"{name} cannot be None")
            if not np.isfinite(value):
                raise OptionValidationError(f"{name} must be finite, got {value}")
            object.__setattr__(self, name, float(value))

        if self.spot <= 0:
            raise OptionValidationError(f"spot must be positive, got {self.spot}")
        if self.strike <= 0:
            raise OptionValidationError(f"strike must be positive, got {self.strike}")
        if self.maturity < 0:
            raise OptionValidationError(
                f"maturity must be non-negative, got {self.maturity}"
            )
        if self.volatility < 0:
            raise OptionValidationError(
                f"volatility must be non-negative, got {self.volatility}"
            )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def is_call(self) -> bool:
        """True if this is a call option."""
        return self.option_type is OptionType.CALL

    @property
    def is_put(self) -> bool:
        """True if this is a put option."""
        return self.option_type is OptionType.PUT

    # =========================================================================
    # Clones
    # =========================================================================

    def with_spot(self, spot: float) -> "Option":
        """Return a copy with a different spot price."""
        return replace(self, spot=spot)

    def with_volatility(self, volatility: float) -> "Option":
        """Return a copy with a different volatility."""
        return replace(self, volatility=volatility)

    def with_maturity(self, maturity: float) -> "Option":
        """Return a copy with a different time to expiry."""
        return replace(self, maturity=maturity)

    def with_rate(self, rate: float) -> "Option":
        """Return a copy with a different risk-free rate."""
        return replace(self, rate=rate)

    # =========================================================================
    # Payoff
    # =========================================================================

    def payoff(self, spot_at_expiry):
        """
        Terminal payoff of one unit of the option.

        Call: max(S_T - K, 0)
        Put:  max(K - S_T, 0)

        Args:
            spot_at_expiry: Underlying price at expiry (float or numpy array)

        Returns:
            Payoff with the same shape as the input
        """
        if np.ndim(spot_at_expiry) == 0:
            if self.is_call:
                return max(float(spot_at_expiry) - self.strike, 0.0)
            return max(self.strike - float(spot_at_expiry), 0.0)

        prices = np.asarray(spot_at_expiry, dtype=np.float64)
        if self.is_call:
            return np.maximum(prices - self.strike, 0.0)
        return np.maximum(self.strike - prices, 0.0)

    def __str__(self) -> str:
        return (
            f"{self.option_type.value.upper()} K={self.strike:g} T={self.maturity:g} "
            f"(S0={self.spot:g}, sigma={self.volatility:g})"
        )


class Leg(NamedTuple):
    """One option position: instrument plus signed quantity (+ long, - short)."""

    option: Option
    quantity: int


# =============================================================================
# Factory Functions
# =============================================================================

def create_call(
    spot: float,
    strike: float,
    rate: float,
    dividend_yield: float,
    maturity: float,
    volatility: float
) -> Option:
    """Create a European call option."""
    return Option(OptionType.CALL, spot, strike, rate, dividend_yield, maturity, volatility)


def create_put(
    spot: float,
    strike: float,
    rate: float,
    dividend_yield: float,
    maturity: float,
    volatility: float
) -> Option:
    """Create a European put option."""
    return Option(OptionType.PUT, spot, strike, rate, dividend_yield, maturity, volatility)


def years_between(today: Union[date, datetime], maturity_date: Union[date, datetime]) -> float:
    """
    Year fraction between two dates using the 365-day convention.

    Dates in the past give 0.0 (the option is at or beyond expiry).

    Example:
        >>> years_between(date(2024, 1, 1), date(2024, 7, 1))
        0.4986...
    """
    delta = maturity_date - today
    days = delta.total_seconds() / 86400.0
    return max(0.0, days / DAYS_PER_YEAR)

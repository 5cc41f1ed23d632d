"""
Option Strategy Templates

This module builds the canonical multi-leg strategies from plain market
inputs. Each template is a builder function returning an immutable
Strategy: a name plus a fixed, ordered recipe of signed option legs.

Available Templates (quantity, type, strike):
    - Bull Call Spread (K1 < K2):  +1 Call(K1), -1 Call(K2)
    - Bear Put Spread (K1 < K2):   +1 Put(K2),  -1 Put(K1)
    - Butterfly (K, dK):           +1 Call(K-dK), -2 Call(K), +1 Call(K+dK)
    - Straddle (K):                +1 Call(K), +1 Put(K)
    - Strangle (K1 < K2):          +1 Put(K1), +1 Call(K2)
    - Calendar Spread (K, Ts < Tl): +1 Call(K, Tl), -1 Call(K, Ts)
    - Iron Condor (K1<K2<K3<K4):   +1 Put(K1), -1 Put(K2), -1 Call(K3), +1 Call(K4)

All legs share (S0, r, q, sigma); only the calendar spread varies maturity.

Usage:
    from optionpricer.structures.strategy import butterfly, build_strategy

    fly = butterfly(spot=100, rate=0.02, dividend_yield=0.0, maturity=1.0,
                    volatility=0.2, strike=100, width=10)
    print(fly.describe())
    # Long 1C(K=90, T=1) + Short 2C(K=100, T=1) + Long 1C(K=110, T=1)

    condor = build_strategy('iron_condor', spot=100, rate=0.02,
                            dividend_yield=0.0, maturity=1.0, volatility=0.2,
                            k1=80, k2=90, k3=110, k4=120)

References:
    - CBOE Strategy Guide: https://www.cboe.com/strategies/
    - Hull, J. C. (2018). Options, Futures, and Other Derivatives, Chapter 12.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Tuple, Union

from optionpricer.core.option import Leg, Option, create_call, create_put
from optionpricer.core.pricing import PricingMethod

# Configure module logger
logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class StrategyError(Exception):
    """Base exception for strategy errors."""
    pass


class StrategyValidationError(StrategyError, ValueError):
    """Exception raised when template inputs are inconsistent."""
    pass


# =============================================================================
# Names
# =============================================================================

class StrategyName(str, Enum):
    """Canonical strategy labels, shared by templates and the detector."""

    BULL_CALL_SPREAD = "Bull Call Spread"
    BEAR_PUT_SPREAD = "Bear Put Spread"
    BUTTERFLY = "Butterfly"
    STRADDLE = "Straddle"
    STRANGLE = "Strangle"
    CALENDAR_SPREAD = "Calendar Spread"
    IRON_CONDOR = "Iron Condor"

    @property
    def key(self) -> str:
        """snake_case identifier used in configuration files."""
        return self.name.lower()

    @classmethod
    def parse(cls, value: Union[str, "StrategyName"]) -> "StrategyName":
        """Accept 'iron_condor', 'Iron Condor', 'IRON_CONDOR' or an enum member."""
        if isinstance(value, StrategyName):
            return value
        text = str(value).strip()
        for member in cls:
            if text == member.value or text.lower() == member.key:
                return member
        raise StrategyValidationError(f"Unknown strategy '{value}'")


# =============================================================================
# Strategy
# =============================================================================

@dataclass(frozen=True)
class Strategy:
    """
    Named, immutable collection of signed option legs.

    Attributes:
        name (StrategyName): Canonical label
        legs (Tuple[Leg, ...]): Ordered legs (order is fixed per template)
    """

    name: StrategyName
    legs: Tuple[Leg, ...]

    def _weighted(self, measure: Callable[[Option], float]) -> float:
        total = 0.0
        for leg in self.legs:
            total += leg.quantity * measure(leg.option)
        return total

    def price(self, method: PricingMethod) -> float:
        """Net premium: quantity-weighted sum of leg prices."""
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

    def payoff(self, spot_at_expiry):
        """Terminal payoff of the whole strategy (scalar or numpy array)."""
        total = 0.0
        for leg in self.legs:
            total = total + leg.quantity * leg.option.payoff(spot_at_expiry)
        return total

    def describe(self) -> str:
        """
        Text description of the legs.

        Format: "Long 1C(K=100, T=0.25) + Short 1C(K=110, T=0.25)"
        """
        parts = []
        for leg in self.legs:
            side = "Long" if leg.quantity >= 0 else "Short"
            kind = "C" if leg.option.is_call else "P"
            parts.append(
                f"{side} {abs(leg.quantity)}{kind}"
                f"(K={_format_number(leg.option.strike, 2)}, T={_format_number(leg.option.maturity, 4)})"
            )
        return " + ".join(parts)

    def __str__(self) -> str:
        return f"{self.name.value}: {self.describe()}"


def _format_number(value: float, decimals: int) -> str:
    text = f"{value:.{decimals}f}".rstrip('0').rstrip('.')
    return text if text not in ('', '-0') else '0'


def _make(name: StrategyName, legs: Iterable[Tuple[Option, int]]) -> Strategy:
    strategy = Strategy(name, tuple(Leg(option, int(quantity)) for option, quantity in legs))
    logger.debug(f"Built {strategy}")
    return strategy


def _require_increasing(name: StrategyName, *strikes: float) -> None:
    for lower, upper in zip(strikes, strikes[1:]):
        if not lower < upper:
            raise StrategyValidationError(
                f"{name.value} requires strictly increasing strikes, got {list(strikes)}"
            )


# =============================================================================
# Templates
# =============================================================================

def bull_call_spread(
    spot: float,
    rate: float,
    dividend_yield: float,
    maturity: float,
    volatility: float,
    k1: float,
    k2: float
) -> Strategy:
    """Bull Call Spread: long call K1, short call K2 (K1 < K2). Moderate rise."""
    _require_increasing(StrategyName.BULL_CALL_SPREAD, k1, k2)
    return _make(StrategyName.BULL_CALL_SPREAD, [
        (create_call(spot, k1, rate, dividend_yield, maturity, volatility), +1),
        (create_call(spot, k2, rate, dividend_yield, maturity, volatility), -1),
    ])


def bear_put_spread(
    spot: float,
    rate: float,
    dividend_yield: float,
    maturity: float,
    volatility: float,
    k1: float,
    k2: float
) -> Strategy:
    """Bear Put Spread: long put K2, short put K1 (K1 < K2). Moderate fall."""
    _require_increasing(StrategyName.BEAR_PUT_SPREAD, k1, k2)
    return _make(StrategyName.BEAR_PUT_SPREAD, [
        (create_put(spot, k2, rate, dividend_yield, maturity, volatility), +1),
        (create_put(spot, k1, rate, dividend_yield, maturity, volatility), -1),
    ])


def butterfly(
    spot: float,
    rate: float,
    dividend_yield: float,
    maturity: float,
    volatility: float,
    strike: float,
    width: float
) -> Strategy:
    """
    Call Butterfly centred on strike with wings at strike -/+ width.

    Maximum payoff (= width) when the underlying expires exactly at strike.
    """
    if not width > 0:
        raise StrategyValidationError(f"Butterfly width must be positive, got {width}")
    if not strike - width > 0:
        raise StrategyValidationError(
            f"Butterfly lower wing must be positive, got {strike - width}"
        )
    return _make(StrategyName.BUTTERFLY, [
        (create_call(spot, strike - width, rate, dividend_yield, maturity, volatility), +1),
        (create_call(spot, strike, rate, dividend_yield, maturity, volatility), -2),
        (create_call(spot, strike + width, rate, dividend_yield, maturity, volatility), +1),
    ])


def straddle(
    spot: float,
    rate: float,
    dividend_yield: float,
    maturity: float,
    volatility: float,
    strike: float
) -> Strategy:
    """Long Straddle: long call and long put at the same strike."""
    return _make(StrategyName.STRADDLE, [
        (create_call(spot, strike, rate, dividend_yield, maturity, volatility), +1),
        (create_put(spot, strike, rate, dividend_yield, maturity, volatility), +1),
    ])


def strangle(
    spot: float,
    rate: float,
    dividend_yield: float,
    maturity: float,
    volatility: float,
    k1: float,
    k2: float
) -> Strategy:
    """Long Strangle: long put K1, long call K2 (K1 < K2)."""
    _require_increasing(StrategyName.STRANGLE, k1, k2)
    return _make(StrategyName.STRANGLE, [
        (create_put(spot, k1, rate, dividend_yield, maturity, volatility), +1),
        (create_call(spot, k2, rate, dividend_yield, maturity, volatility), +1),
    ])


def calendar_spread(
    spot: float,
    rate: float,
    dividend_yield: float,
    short_maturity: float,
    long_maturity: float,
    volatility: float,
    strike: float
) -> Strategy:
    """
    Calendar Spread: long the far-dated call, short the near-dated call.

    Both legs share the strike; the short leg loses time value faster.
    """
    if not short_maturity < long_maturity:
        raise StrategyValidationError(
            f"Calendar Spread requires short_maturity < long_maturity, "
            f"got {short_maturity} and {long_maturity}"
        )
    return _make(StrategyName.CALENDAR_SPREAD, [
        (create_call(spot, strike, rate, dividend_yield, long_maturity, volatility), +1),
        (create_call(spot, strike, rate, dividend_yield, short_maturity, volatility), -1),
    ])


def iron_condor(
    spot: float,
    rate: float,
    dividend_yield: float,
    maturity: float,
    volatility: float,
    k1: float,
    k2: float,
    k3: float,
    k4: float
) -> Strategy:
    """
    Iron Condor: bull put spread (K1/K2) plus bear call spread (K3/K4).

    Long put K1, short put K2, short call K3, long call K4 with K1<K2<K3<K4.
    """
    _require_increasing(StrategyName.IRON_CONDOR, k1, k2, k3, k4)
    return _make(StrategyName.IRON_CONDOR, [
        (create_put(spot, k1, rate, dividend_yield, maturity, volatility), +1),
        (create_put(spot, k2, rate, dividend_yield, maturity, volatility), -1),
        (create_call(spot, k3, rate, dividend_yield, maturity, volatility), -1),
        (create_call(spot, k4, rate, dividend_yield, maturity, volatility), +1),
    ])


# =============================================================================
# Registry
# =============================================================================

STRATEGY_BUILDERS: Dict[StrategyName, Callable[..., Strategy]] = {
    StrategyName.BULL_CALL_SPREAD: bull_call_spread,
    StrategyName.BEAR_PUT_SPREAD: bear_put_spread,
    StrategyName.BUTTERFLY: butterfly,
    StrategyName.STRADDLE: straddle,
    StrategyName.STRANGLE: strangle,
    StrategyName.CALENDAR_SPREAD: calendar_spread,
    StrategyName.IRON_CONDOR: iron_condor,
}


def build_strategy(name: Union[str, StrategyName], **params) -> Strategy:
    """
    Build a strategy by name from keyword parameters.

    Raises:
        StrategyValidationError: Unknown name or missing/unexpected parameters
    """
    builder = STRATEGY_BUILDERS[StrategyName.parse(name)]
    try:
        return builder(**params)
    except TypeError as e:
        raise StrategyValidationError(f"Invalid parameters for {name}: {e}") from e


# =============================================================================
# Investor Objectives
# =============================================================================

@dataclass(frozen=True)
class Objective:
    """An investor objective and the strategy that expresses it."""

    number: int
    title: str
    strategy: StrategyName
    description: str


OBJECTIVES: Tuple[Objective, ...] = (
    Objective(1, "Moderate rise", StrategyName.BULL_CALL_SPREAD,
              "You expect the price to rise a little: a low-cost strategy that "
              "profits from a gradual climb."),
    Objective(2, "Moderate fall", StrategyName.BEAR_PUT_SPREAD,
              "You expect the price to fall a little: downside exposure at a "
              "limited cost."),
    Objective(3, "Stability", StrategyName.BUTTERFLY,
              "You expect the price to stay close to a level: gains if the "
              "price stays stable."),
    Objective(4, "High volatility", StrategyName.STRADDLE,
              "You expect a large move in either direction: a bet on rising "
              "volatility."),
    Objective(5, "Moderate volatility", StrategyName.STRANGLE,
              "Like the straddle but cheaper: useful when a move is expected "
              "without being necessarily symmetric."),
    Objective(6, "Long-term view", StrategyName.CALENDAR_SPREAD,
              "A bet on the different behaviour of short and long expiries."),
    Objective(7, "Range trading", StrategyName.IRON_CONDOR,
              "You expect the price to stay within a range: limited gain with "
              "controlled risk."),
)

MAX_OBJECTIVES = 3


def objective_for_strategy(name: Union[str, StrategyName]) -> Objective:
    """Return the objective expressed by a strategy."""
    strategy = StrategyName.parse(name)
    for objective in OBJECTIVES:
        if objective.strategy is strategy:
            return objective
    raise StrategyValidationError(f"No objective for strategy '{name}'")


def objectives_for(selection: str) -> List[Objective]:
    """
    Parse a comma-separated objective selection such as "1,4".

    Duplicates are ignored; at most MAX_OBJECTIVES may be chosen.

    Raises:
        StrategyValidationError: Empty, non-numeric, out-of-range or too many choices
    """
    by_number = {objective.number: objective for objective in OBJECTIVES}
    chosen: List[Objective] = []

    tokens = [token.strip() for token in str(selection).split(',') if token.strip()]
    if not tokens:
        raise StrategyValidationError("No objective selected")

    for token in tokens:
        if not token.isdigit() or int(token) not in by_number:
            raise StrategyValidationError(
                f"Objective must be a number between 1 and {len(OBJECTIVES)}, got '{token}'"
            )
        objective = by_number[int(token)]
        if objective not in chosen:
            chosen.append(objective)

    if len(chosen) > MAX_OBJECTIVES:
        raise StrategyValidationError(
            f"At most {MAX_OBJECTIVES} objectives may be selected, got {len(chosen)}"
        )
    return chosen

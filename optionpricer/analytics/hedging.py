"""
Discrete Delta-Hedging Simulator

Sells one option, replicates it with the underlying and a cash account
rebalanced at discrete dates, and measures the replication error at expiry.

Per path:
    t = 0:       delta_0 = Delta(S0, T),  B_0 = V(S0, T) - delta_0 * S0
    each step:   S <- S * exp((r - q - sigma^2/2)*dt + sigma*sqrt(dt)*Z)
                 B <- B * exp(r*dt)
                 delta' = Delta(S, T - t)
                 B <- B - (delta' - delta) * S
                 B <- B - cost * |delta' - delta| * S      (when cost > 0)
    expiry:      PnL = delta * S_T + B - payoff(S_T)

Rebalancing is skipped when |delta' - delta| <= 1e-12. Transaction costs are
already deducted from B, so PnL is net of costs. At the final date the
remaining maturity is zero and delta is the slope of the payoff (1 or 0 for
calls, -1 or 0 for puts).

Usage:
    from optionpricer.analytics.hedging import simulate_delta_hedging

    result = simulate_delta_hedging(call, BlackScholesPricer(), steps=50,
                                    paths=2000, cost=0.001, seed=7)
    print(result.mean_pnl, result.std_pnl)
"""

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import numpy as np

from optionpricer.core.monte_carlo import standard_normals
from optionpricer.core.option import Option
from optionpricer.core.pricing import InvalidParameterError, PricingMethod

# Configure module logger
logger = logging.getLogger(__name__)


DEFAULT_STEPS = 50
DEFAULT_PATHS = 2000
REBALANCE_THRESHOLD = 1e-12


# =============================================================================
# Result
# =============================================================================

@dataclass(frozen=True)
class DeltaHedgingResult:
    """
    Summary statistics of a hedging simulation.

    Attributes:
        paths (int): Number of simulated paths
        steps (int): Rebalancing dates per path
        cost (float): Proportional transaction cost rate used
        mean_pnl (float): Mean replication PnL, net of costs
        std_pnl (float): Population standard deviation of the PnL
        mean_transaction_cost (float): Mean cumulative cost per path
    """

    paths: int
    steps: int
    cost: float
    mean_pnl: float
    std_pnl: float
    mean_transaction_cost: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =============================================================================
# Simulation
# =============================================================================

def _expiry_delta(option: Option, spot: float) -> float:
    if option.is_call:
        return 1.0 if spot > option.strike else 0.0
    return -1.0 if spot < option.strike else 0.0


def simulate_delta_hedging(
    option: Option,
    method: PricingMethod,
    steps: int = DEFAULT_STEPS,
    paths: int = DEFAULT_PATHS,
    cost: float = 0.0,
    seed: Optional[int] = None
) -> DeltaHedgingResult:
    """
    Simulate discrete delta hedging of an option under GBM.

    Args:
        option: Option being replicated
        method: Pricing method supplying the initial price and deltas
        steps: Rebalancing dates (>= 2)
        paths: Simulated paths (>= 1)
        cost: Proportional transaction cost per unit of traded notional
        seed: Seed of the random stream (None for entropy)

    Returns:
        DeltaHedgingResult

    Raises:
        InvalidParameterError: If steps < 2, paths < 1 or maturity <= 0
    """
    if steps < 2:
        raise InvalidParameterError(f"steps must be at least 2, got {steps}")
    if paths < 1:
        raise InvalidParameterError(f"paths must be positive, got {paths}")
    if not option.maturity > 0:
        raise InvalidParameterError(f"maturity must be positive, got {option.maturity}")

    T = option.maturity
    sigma = option.volatility
    dt = T / steps
    mu = (option.rate - option.dividend_yield - 0.5 * sigma * sigma) * dt
    sig_sqrt_dt = sigma * math.sqrt(dt)
    growth = math.exp(option.rate * dt)

    rng = np.random.default_rng(seed)
    pnls = np.empty(paths)
    costs = np.empty(paths)

    price0 = method.price(option)
    delta0 = method.delta(option)

    for p in range(paths):
        spot = option.spot
        delta = delta0
        cash = price0 - delta * spot
        total_cost = 0.0

        shocks = standard_normals(rng, steps)
        for i in range(steps):
            spot = spot * math.exp(mu + sig_sqrt_dt * shocks[i])
            cash *= growth

            if i == steps - 1:
                new_delta = _expiry_delta(option, spot)
            else:
                remaining = max(T - (i + 1) * dt, 0.0)
                new_delta = method.delta(option.with_spot(spot).with_maturity(remaining))

            change = new_delta - delta
            if abs(change) > REBALANCE_THRESHOLD:
                cash -= change * spot
                if cost > 0.0:
                    fee = cost * abs(change) * spot
                    total_cost += fee
                    cash -= fee

            delta = new_delta

        pnls[p] = delta * spot + cash - option.payoff(spot)
        costs[p] = total_cost

    result = DeltaHedgingResult(
        paths=paths,
        steps=steps,
        cost=cost,
        mean_pnl=float(np.mean(pnls)),
        std_pnl=float(np.std(pnls)),
        mean_transaction_cost=float(np.mean(costs)),
    )

    logger.info(
        f"Delta hedging {option}: {paths} paths x {steps} steps, "
        f"mean PnL={result.mean_pnl:.4f}, std={result.std_pnl:.4f}"
    )
    return result


class DeltaHedgingSimulator:
    """Namespace wrapper around simulate_delta_hedging()."""

    @staticmethod
    def run(
        option: Option,
        method: PricingMethod,
        steps: int = DEFAULT_STEPS,
        paths: int = DEFAULT_PATHS,
        cost: float = 0.0,
        seed: Optional[int] = None
    ) -> DeltaHedgingResult:
        return simulate_delta_hedging(option, method, steps, paths, cost, seed)

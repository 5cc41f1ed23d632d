"""
Analytics Module for the Option Pricer

Components:
    - payoff: Terminal payoff grids, breakevens and CSV export
    - analyzer: Capital requirement and plain-language Greek interpretation
    - implied_vol: Newton-Raphson / bisection implied volatility solver
    - hedging: Discrete delta-hedging simulation under GBM
"""

from optionpricer.analytics.payoff import (
    breakeven_points,
    export_csv,
    generate_grid,
    leg_payoff,
    payoff_table,
    total_payoff,
)
from optionpricer.analytics.analyzer import (
    capital_required,
    interpret_delta,
    interpret_gamma,
    interpret_net_position,
    interpret_theta,
    interpret_vega,
    summarize,
)
from optionpricer.analytics.implied_vol import (
    ImpliedVolatilityError,
    ImpliedVolSolver,
    RootNotBracketedError,
    solve_implied_volatility,
)
from optionpricer.analytics.hedging import (
    DeltaHedgingResult,
    DeltaHedgingSimulator,
    simulate_delta_hedging,
)

__all__ = [
    # Payoff
    'breakeven_points',
    'export_csv',
    'generate_grid',
    'leg_payoff',
    'payoff_table',
    'total_payoff',
    # Analyzer
    'capital_required',
    'interpret_delta',
    'interpret_gamma',
    'interpret_net_position',
    'interpret_theta',
    'interpret_vega',
    'summarize',
    # Implied volatility
    'ImpliedVolatilityError',
    'ImpliedVolSolver',
    'RootNotBracketedError',
    'solve_implied_volatility',
    # Hedging
    'DeltaHedgingResult',
    'DeltaHedgingSimulator',
    'simulate_delta_hedging',
]

"""
Option Structures Module

Canonical multi-leg strategies, the investor objectives they express, and
recognition of those strategies inside arbitrary books.

Available Strategies:
    - Bull Call Spread: +1 call K1, -1 call K2 (K1 < K2)
    - Bear Put Spread: +1 put K2, -1 put K1 (K1 < K2)
    - Butterfly: +1 call K-w, -2 calls K, +1 call K+w
    - Straddle: +1 call K, +1 put K
    - Strangle: +1 put K1, +1 call K2 (K1 < K2)
    - Calendar Spread: +1 call T2, -1 call T1 (T1 < T2), same strike
    - Iron Condor: +1 put K1, -1 put K2, -1 call K3, +1 call K4

Usage:
    from optionpricer.structures import build_strategy, detect_structures

    condor = build_strategy("iron_condor", spot=100, rate=0.02, dividend_yield=0.0,
                            maturity=1.0, volatility=0.2, k1=80, k2=90, k3=110, k4=120)
    matches = detect_structures(condor.legs)
"""

from optionpricer.structures.strategy import (
    OBJECTIVES,
    STRATEGY_BUILDERS,
    Objective,
    Strategy,
    StrategyError,
    StrategyName,
    StrategyValidationError,
    bear_put_spread,
    build_strategy,
    bull_call_spread,
    butterfly,
    calendar_spread,
    iron_condor,
    objective_for_strategy,
    objectives_for,
    straddle,
    strangle,
)
from optionpricer.structures.detector import (
    StructureDetector,
    StructureMatch,
    detect_structures,
)

__all__ = [
    # Strategies
    'Strategy',
    'StrategyName',
    'StrategyError',
    'StrategyValidationError',
    'STRATEGY_BUILDERS',
    'build_strategy',
    'bull_call_spread',
    'bear_put_spread',
    'butterfly',
    'straddle',
    'strangle',
    'calendar_spread',
    'iron_condor',
    # Objectives
    'Objective',
    'OBJECTIVES',
    'objective_for_strategy',
    'objectives_for',
    # Detection
    'StructureDetector',
    'StructureMatch',
    'detect_structures',
]

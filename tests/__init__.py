"""
Test Suite for the Option Pricer

This package contains unit tests for the pricing library, organized by
module.

Test modules:
    - test_option: Option contract validation, clones and payoffs
    - test_pricing: Black-Scholes prices, parity and Greeks
    - test_monte_carlo: Monte Carlo engine, reproducibility and Greeks
    - test_strategy: Strategy templates and investor objectives
    - test_portfolio: Portfolio lines, flattening and aggregation
    - test_detector: Structure recognition in unordered books
    - test_payoff: Payoff grids, breakevens and CSV export
    - test_analyzer: Capital requirement and Greek interpretation
    - test_implied_vol: Newton / bisection implied volatility
    - test_hedging: Delta-hedging simulation
    - test_cli: Book loading, environments and CLI commands

Run all tests:
    pytest tests/ -v

Run with coverage:
    pytest tests/ --cov=optionpricer --cov-report=term-missing
"""

#!/usr/bin/env python3
"""
Example 2: Analyzing a Position Book

Loads sample_book.yaml, summarizes its risk, exports the payoff profile,
backs out an implied volatility and runs a delta-hedging simulation.

Difficulty: Intermediate
Time to run: < 30 seconds
"""

import sys
from pathlib import Path

# Add the repository root to path so we can import optionpricer
sys.path.insert(0, str(Path(__file__).parent.parent))

from optionpricer.analytics import (
    breakeven_points,
    export_csv,
    generate_grid,
    simulate_delta_hedging,
    solve_implied_volatility,
    summarize,
)
from optionpricer.cli import load_book
from optionpricer.core import BlackScholesPricer, create_call
from optionpricer.structures import detect_structures


def main():
    bs = BlackScholesPricer()
    book = load_book(Path(__file__).parent / "sample_book.yaml")

    print(f"Book: {book.name}")
    print("-" * 40)
    report = summarize(book.portfolio, bs)
    for key, value in report['greeks'].items():
        print(f"  {key:<8} {value:12.4f}")
    print(f"  capital  {report['capital_required']:12.2f}")
    for key, text in report['interpretation'].items():
        print(f"  {key}: {text}")
    print()

    print("Structures:")
    for match in detect_structures(book.portfolio.flatten_legs()):
        print(f"  {match.name}: {match.detail}")
    print()

    legs = list(book.portfolio.flatten_legs())
    grid = generate_grid(book.market.spot)
    premium = book.portfolio.price(bs)
    output = Path("sample_book_payoff.csv")
    export_csv(output, legs, grid, premium)
    print(f"Payoff written to {output}")
    print("Breakevens: " + ", ".join(f"{x:.2f}" for x in breakeven_points(legs, grid, premium)))
    print()

    call = create_call(100.0, 100.0, 0.02, 0.0, 1.0, 0.20)
    observed = 10.45
    print(f"Implied vol of a {observed} call: {solve_implied_volatility(call, observed):.4f}")

    result = simulate_delta_hedging(call, bs, steps=50, paths=2000, cost=0.001, seed=7)
    print(f"Delta hedge: mean PnL {result.mean_pnl:.4f}, std {result.std_pnl:.4f}, "
          f"mean cost {result.mean_transaction_cost:.4f}")


if __name__ == '__main__':
    main()

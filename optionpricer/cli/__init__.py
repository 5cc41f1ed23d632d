"""
CLI Package for the Option Pricer

Provides command-line tools for pricing position books, detecting
structures, exporting payoffs and managing environments.

Usage:
    # Price a book with Monte Carlo
    option-pricer price book.yaml --method mc --seed 42

    # Recognize strategies in a book
    option-pricer detect book.yaml

    # Export the payoff profile
    option-pricer payoff book.yaml --output payoff.csv
"""

from optionpricer.cli.config_loader import (
    Book,
    BookLoader,
    ConfigValidationError,
    MarketSnapshot,
    load_book,
    load_book_string,
)

from optionpricer.cli.environment import (
    Environment,
    EnvironmentSettings,
    EnvironmentManager,
    build_settings,
    get_environment,
    get_settings,
    set_environment,
    configure_logging,
)

__all__ = [
    # Loader
    "Book",
    "BookLoader",
    "ConfigValidationError",
    "MarketSnapshot",
    "load_book",
    "load_book_string",
    # Environment
    "Environment",
    "EnvironmentSettings",
    "EnvironmentManager",
    "build_settings",
    "get_environment",
    "get_settings",
    "set_environment",
    "configure_logging",
]

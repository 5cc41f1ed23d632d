"""
Position Book Loader

Loads option books from YAML and JSON files, validates them, and converts
them to a Portfolio priced against a single market snapshot.

Book Format:
    name: Hedged butterfly
    market:
      spot: 100
      volatility: 0.20
      dividend_yield: 0.0
      rate: 0.02
      maturity: 1.0
    options:
      - type: call
        strike: 105
        quantity: -2
        maturity: 0.5        # optional, defaults to market maturity
        volatility: 0.25     # optional, defaults to market volatility
    strategies:
      - template: butterfly
        quantity: 1
        params: {strike: 100, width: 10}

Strategy params are merged over the market snapshot, so a template only
lists what the market does not supply (strikes, width, and for a calendar
spread the two maturities).
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

import yaml

from optionpricer.core.option import Option, OptionError, OptionType
from optionpricer.core.portfolio import (
    Portfolio,
    PortfolioValidationError,
    validate_quantity,
)
from optionpricer.structures.strategy import (
    StrategyError,
    StrategyName,
    build_strategy,
)

logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = errors or []
        super().__init__(message)


MARKET_FIELDS = ("spot", "volatility", "dividend_yield", "rate", "maturity")

MARKET_DEFAULTS: Dict[str, float] = {
    "dividend_yield": 0.0,
}


@dataclass(frozen=True)
class MarketSnapshot:
    """Market inputs shared by every line of a book."""

    spot: float
    volatility: float
    dividend_yield: float
    rate: float
    maturity: float

    def as_params(self) -> Dict[str, float]:
        return {
            "spot": self.spot,
            "volatility": self.volatility,
            "dividend_yield": self.dividend_yield,
            "rate": self.rate,
            "maturity": self.maturity,
        }


@dataclass
class Book:
    """A loaded position book."""

    name: str
    market: MarketSnapshot
    portfolio: Portfolio


class BookLoader:
    """Loads and parses position book files."""

    @classmethod
    def load(cls, path: Union[str, Path]) -> Book:
        """
        Load a book from file.

        Args:
            path: Path to YAML or JSON book file

        Returns:
            Parsed and validated Book

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigValidationError: If the book is invalid
            ValueError: If file format is unsupported
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Book file not found: {path}")

        raw_data = cls._load_file(path)
        book = cls._parse_book(raw_data, source=str(path))

        logger.info(
            f"Loaded book '{book.name}' from {path} "
            f"({len(book.portfolio.option_lines)} option(s), "
            f"{len(book.portfolio.strategy_lines)} strategy line(s))"
        )
        return book

    @classmethod
    def load_from_string(cls, content: str, format: str = "yaml") -> Book:
        """
        Load a book from string content.

        Args:
            content: YAML or JSON string
            format: "yaml" or "json"
        """
        if format.lower() == "yaml":
            raw_data = yaml.safe_load(content)
        elif format.lower() == "json":
            raw_data = json.loads(content)
        else:
            raise ValueError(f"Unsupported format: {format}")

        return cls._parse_book(raw_data, source="<string>")

    @classmethod
    def _load_file(cls, path: Path) -> Any:
        """Load raw data from file."""
        suffix = path.suffix.lower()

        with open(path, "r") as f:
            if suffix in (".yaml", ".yml"):
                return yaml.safe_load(f)
            elif suffix == ".json":
                return json.load(f)
            else:
                raise ValueError(f"Unsupported file format: {suffix}")

    @classmethod
    def _parse_book(cls, data: Any, source: str) -> Book:
        """Parse raw data into a Book, collecting every validation error."""
        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"Book validation failed: {source}",
                errors=["Book must be a mapping"],
            )

        errors: List[str] = []
        market = cls._parse_market(data.get("market"), errors)
        if market is None:
            raise ConfigValidationError(f"Book validation failed: {source}", errors=errors)

        portfolio = Portfolio(name=str(data.get("name", "book")))

        for i, entry in enumerate(data.get("options") or []):
            cls._parse_option(entry, market, portfolio, errors, f"options[{i}]")

        for i, entry in enumerate(data.get("strategies") or []):
            cls._parse_strategy(entry, market, portfolio, errors, f"strategies[{i}]")

        if errors:
            raise ConfigValidationError(f"Book validation failed: {source}", errors=errors)

        return Book(name=portfolio.name, market=market, portfolio=portfolio)

    @classmethod
    def _parse_market(cls, data: Any, errors: List[str]) -> Optional[MarketSnapshot]:
        """Parse the market section."""
        if not isinstance(data, dict):
            errors.append("market section is required")
            return None

        values: Dict[str, float] = {}
        for name in MARKET_FIELDS:
            value = data.get(name, MARKET_DEFAULTS.get(name))
            if value is None:
                errors.append(f"market.{name} is required")
                continue
            try:
                values[name] = float(value)
            except (TypeError, ValueError):
                errors.append(f"market.{name} must be a number, got {value!r}")

        if errors:
            return None
        if values["spot"] <= 0:
            errors.append(f"market.spot must be positive, got {values['spot']}")
        if values["volatility"] < 0:
            errors.append(f"market.volatility must be non-negative, got {values['volatility']}")
        if values["maturity"] < 0:
            errors.append(f"market.maturity must be non-negative, got {values['maturity']}")
        if errors:
            return None

        return MarketSnapshot(**values)

    @classmethod
    def _parse_option(
        cls,
        data: Any,
        market: MarketSnapshot,
        portfolio: Portfolio,
        errors: List[str],
        where: str,
    ) -> None:
        """Parse one raw option line."""
        if not isinstance(data, dict):
            errors.append(f"{where} must be a mapping")
            return

        try:
            quantity = validate_quantity(data.get("quantity", 1))
            option = Option(
                option_type=OptionType.parse(data.get("type", "")),
                spot=market.spot,
                strike=data.get("strike"),
                rate=market.rate,
                dividend_yield=market.dividend_yield,
                maturity=data.get("maturity", market.maturity),
                volatility=data.get("volatility", market.volatility),
            )
        except (OptionError, PortfolioValidationError, TypeError, ValueError) as e:
            errors.append(f"{where}: {e}")
            return

        portfolio.add_option(option, quantity)

    @classmethod
    def _parse_strategy(
        cls,
        data: Any,
        market: MarketSnapshot,
        portfolio: Portfolio,
        errors: List[str],
        where: str,
    ) -> None:
        """Parse one strategy line."""
        if not isinstance(data, dict):
            errors.append(f"{where} must be a mapping")
            return

        try:
            name = StrategyName.parse(data.get("template", ""))
        except (StrategyError, ValueError) as e:
            errors.append(f"{where}: {e}")
            return

        params = market.as_params()
        if name is StrategyName.CALENDAR_SPREAD:
            params.pop("maturity")
        params.update(data.get("params") or {})

        try:
            quantity = validate_quantity(data.get("quantity", 1))
            strategy = build_strategy(name, **params)
        except (StrategyError, OptionError, PortfolioValidationError, TypeError, ValueError) as e:
            errors.append(f"{where}: {e}")
            return

        portfolio.add_strategy(strategy, quantity)


def load_book(path: Union[str, Path]) -> Book:
    """
    Convenience function to load a book file.

    Args:
        path: Path to YAML or JSON book file

    Returns:
        Validated Book
    """
    return BookLoader.load(path)


def load_book_string(content: str, format: str = "yaml") -> Book:
    """Convenience function to load a book from a string."""
    return BookLoader.load_from_string(content, format)

"""
Structure Detection for Custom Option Books

Given an unordered bag of (option, signed quantity) legs, this module
recognizes the canonical strategies they contain. Every combination of legs
is examined, so a hand-built book is recognized whatever order its legs were
entered in, and a book containing several structures reports all of them.

Matching Rules (strike/maturity equality and strict ordering both use an
absolute tolerance of 1e-9):
    - Straddle:         long call and long put, same strike and maturity
    - Strangle:         long put with strike strictly below a long call's, same maturity
    - Butterfly:        calls with quantities +1/-2/+1, middle strike is the mean
                        of the wings, all three share maturity
    - Bull Call Spread: +1 call at a lower strike, -1 call at a higher strike, same maturity
    - Bear Put Spread:  +1 put at a higher strike, -1 put at a lower strike, same maturity
    - Iron Condor:      +1 put K1, -1 put K2, -1 call K3, +1 call K4 with
                        K1 < K2 < K3 < K4, one common maturity
    - Calendar Spread:  calls at one strike, -1 on the near maturity and +1 on
                        the far maturity (the reverse position is not reported)

Complexity is O(legs^k) for a template of k legs (k <= 4), which is fine for
books of a few dozen legs.

Usage:
    from optionpricer.structures.detector import detect_structures

    for match in detect_structures(portfolio.flatten_legs()):
        print(f"{match.name}: {match.detail}")
"""

import logging
from dataclasses import dataclass
from itertools import permutations
from typing import Dict, Iterable, List, Sequence, Tuple

from optionpricer.core.option import Leg, Option
from optionpricer.structures.strategy import StrategyName

# Configure module logger
logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

MATCH_TOLERANCE = 1e-9

STRUCTURE_OBJECTIVES: Dict[StrategyName, str] = {
    StrategyName.STRADDLE: "Bet on high volatility without directional bias",
    StrategyName.STRANGLE: "Bet on high volatility, cheaper than a straddle",
    StrategyName.BUTTERFLY: "Bet on stability around a central strike",
    StrategyName.BULL_CALL_SPREAD: "Bet on a moderate rise",
    StrategyName.BEAR_PUT_SPREAD: "Bet on a moderate fall",
    StrategyName.IRON_CONDOR: (
        "Range-bound strategy with limited profit and a high probability of gain"
    ),
    StrategyName.CALENDAR_SPREAD: "Bet on implied volatility differences between maturities",
}


# =============================================================================
# Match Result
# =============================================================================

@dataclass(frozen=True)
class StructureMatch:
    """
    One recognized structure.

    Attributes:
        name (str): Canonical strategy label (e.g. 'Iron Condor')
        objective (str): Plain-language purpose of the structure
        detail (str): Strikes and maturities that matched
    """

    name: str
    objective: str
    detail: str


def _match(name: StrategyName, detail: str) -> StructureMatch:
    return StructureMatch(name=name.value, objective=STRUCTURE_OBJECTIVES[name], detail=detail)


def _same(a: float, b: float) -> bool:
    return abs(a - b) < MATCH_TOLERANCE


def _below(a: float, b: float) -> bool:
    """Strictly below, beyond the matching tolerance."""
    return a < b and not _same(a, b)


def _fmt(value: float) -> str:
    return f"{value:g}"


# =============================================================================
# Individual Rules
# =============================================================================

def _straddles(calls: Sequence[Leg], puts: Sequence[Leg]) -> List[StructureMatch]:
    matches = []
    for call in calls:
        for put in puts:
            if call.quantity <= 0 or put.quantity <= 0:
                continue
            c, p = call.option, put.option
            if _same(c.strike, p.strike) and _same(c.maturity, p.maturity):
                matches.append(_match(
                    StrategyName.STRADDLE,
                    f"+1 Call(K={_fmt(c.strike)}) +1 Put(K={_fmt(p.strike)}), "
                    f"maturity {c.maturity:.3f} years"
                ))
    return matches


def _strangles(calls: Sequence[Leg], puts: Sequence[Leg]) -> List[StructureMatch]:
    matches = []
    for call in calls:
        for put in puts:
            if call.quantity <= 0 or put.quantity <= 0:
                continue
            c, p = call.option, put.option
            if _below(p.strike, c.strike) and _same(c.maturity, p.maturity):
                matches.append(_match(
                    StrategyName.STRANGLE,
                    f"K_put={_fmt(p.strike)}, K_call={_fmt(c.strike)}, "
                    f"maturity {c.maturity:.3f} years"
                ))
    return matches


def _butterflies(calls: Sequence[Leg]) -> List[StructureMatch]:
    matches = []
    for low, middle, high in permutations(calls, 3):
        if (low.quantity, middle.quantity, high.quantity) != (1, -2, 1):
            continue
        k1, k, k2 = low.option.strike, middle.option.strike, high.option.strike
        # wings are ordered so a butterfly is reported once
        if not _below(k1, k2):
            continue
        if (
            _same(k, (k1 + k2) / 2.0)
            and _same(low.option.maturity, middle.option.maturity)
            and _same(middle.option.maturity, high.option.maturity)
        ):
            matches.append(_match(
                StrategyName.BUTTERFLY,
                f"K1={_fmt(k1)}, K={_fmt(k)}, K2={_fmt(k2)}, T={middle.option.maturity:.3f}"
            ))
    return matches


def _bull_call_spreads(calls: Sequence[Leg]) -> List[StructureMatch]:
    matches = []
    for long_leg, short_leg in permutations(calls, 2):
        if long_leg.quantity != 1 or short_leg.quantity != -1:
            continue
        lo, hi = long_leg.option, short_leg.option
        if _below(lo.strike, hi.strike) and _same(lo.maturity, hi.maturity):
            matches.append(_match(
                StrategyName.BULL_CALL_SPREAD,
                f"K1={_fmt(lo.strike)}, K2={_fmt(hi.strike)}, T={lo.maturity:.3f}"
            ))
    return matches


def _bear_put_spreads(puts: Sequence[Leg]) -> List[StructureMatch]:
    matches = []
    for short_leg, long_leg in permutations(puts, 2):
        if short_leg.quantity != -1 or long_leg.quantity != 1:
            continue
        lo, hi = short_leg.option, long_leg.option
        if _below(lo.strike, hi.strike) and _same(lo.maturity, hi.maturity):
            matches.append(_match(
                StrategyName.BEAR_PUT_SPREAD,
                f"K1={_fmt(lo.strike)}, K2={_fmt(hi.strike)}, T={lo.maturity:.3f}"
            ))
    return matches


def _iron_condors(calls: Sequence[Leg], puts: Sequence[Leg]) -> List[StructureMatch]:
    long_puts = [leg for leg in puts if leg.quantity == 1]
    short_puts = [leg for leg in puts if leg.quantity == -1]
    short_calls = [leg for leg in calls if leg.quantity == -1]
    long_calls = [leg for leg in calls if leg.quantity == 1]

    matches = []
    for p1 in long_puts:
        for p2 in short_puts:
            for c3 in short_calls:
                for c4 in long_calls:
                    k1, k2 = p1.option.strike, p2.option.strike
                    k3, k4 = c3.option.strike, c4.option.strike
                    t = p1.option.maturity
                    if not (_below(k1, k2) and _below(k2, k3) and _below(k3, k4)):
                        continue
                    if (
                        _same(t, p2.option.maturity)
                        and _same(p2.option.maturity, c3.option.maturity)
                        and _same(c3.option.maturity, c4.option.maturity)
                    ):
                        matches.append(_match(
                            StrategyName.IRON_CONDOR,
                            f"K1={_fmt(k1)} < K2={_fmt(k2)} < K3={_fmt(k3)} "
                            f"< K4={_fmt(k4)}, T={t:.3f}"
                        ))
    return matches


def _calendar_spreads(calls: Sequence[Leg]) -> List[StructureMatch]:
    matches = []
    for near, far in permutations(calls, 2):
        if near.quantity != -1 or far.quantity != 1:
            continue
        a, b = near.option, far.option
        if _same(a.strike, b.strike) and _below(a.maturity, b.maturity):
            matches.append(_match(
                StrategyName.CALENDAR_SPREAD,
                f"K={_fmt(a.strike)}, T1={a.maturity:.3f}, T2={b.maturity:.3f}"
            ))
    return matches


# =============================================================================
# Detector
# =============================================================================

def _as_legs(legs: Iterable[Tuple[Option, int]]) -> List[Leg]:
    return [Leg(option, int(quantity)) for option, quantity in legs]


def detect_structures(legs: Iterable[Tuple[Option, int]]) -> List[StructureMatch]:
    """
    Recognize every known structure contained in a bag of legs.

    Args:
        legs: Iterable of Leg or (Option, quantity) pairs, in any order

    Returns:
        List of StructureMatch in rule order (straddle, strangle, butterfly,
        bull call spread, bear put spread, iron condor, calendar spread).
        An empty list means no structure was recognized.
    """
    book = _as_legs(legs)
    calls = [leg for leg in book if leg.option.is_call]
    puts = [leg for leg in book if leg.option.is_put]

    matches: List[StructureMatch] = []
    matches.extend(_straddles(calls, puts))
    matches.extend(_strangles(calls, puts))
    matches.extend(_butterflies(calls))
    matches.extend(_bull_call_spreads(calls))
    matches.extend(_bear_put_spreads(puts))
    matches.extend(_iron_condors(calls, puts))
    matches.extend(_calendar_spreads(calls))

    logger.debug(f"Detected {len(matches)} structure(s) in {len(book)} leg(s)")
    return matches


class StructureDetector:
    """Namespace wrapper around detect_structures()."""

    @staticmethod
    def detect(legs: Iterable[Tuple[Option, int]]) -> List[StructureMatch]:
        return detect_structures(legs)

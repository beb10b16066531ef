"""Grid engine enums and shared numeric helpers.

All enums are strict string enums so they serialize as plain strings.
"""

from __future__ import annotations

import math
from enum import Enum

# Hard cap on candidate orders per simulation
SAFETY_CAP = 3000

# Main-ladder rungs generated past the boundary; the accumulator decides the cutoff
LADDER_OVERSHOOT = 10


class Direction(str, Enum):
    """Trade direction of the basket."""

    LONG = "LONG"
    SHORT = "SHORT"

    @property
    def sign(self) -> int:
        """+1 for LONG, -1 for SHORT."""
        return 1 if self is Direction.LONG else -1


class OrderKind(str, Enum):
    """Kind of ladder order / filled position."""

    ENTRY = "ENTRY"
    MAIN = "MAIN"
    DYNAMIC = "DYNAMIC"
    HEDGE = "HEDGE"


class Crossing(str, Enum):
    """Where the hedge stop-loss crossing was detected."""

    # Before filling a rung
    RUNG = "rung"
    # At the boundary after the ladder was exhausted
    BOUNDARY = "boundary"


def normalize_lot(value: float) -> float:
    """Round a lot to hundredths, halves rounded up.

    Values that cannot be scaled (overflow, nan) are returned unchanged.

    Example:
        >>> normalize_lot(0.0196)
        0.02
    """
    scaled = value * 100 + 0.5
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled) / 100


def basket_pnl(
    mark_price: float,
    avg_price: float,
    lot: float,
    contract_size: float,
    sign: int,
) -> float:
    """P&L of a basket (or a single order) marked at mark_price.

    Args:
        mark_price: Price the position is marked at.
        avg_price: Average (or single-order) open price.
        lot: Position size in lots.
        contract_size: Units per lot.
        sign: +1 for a long position, -1 for a short one.

    Returns:
        P&L in account currency.
    """
    return (mark_price - avg_price) * lot * contract_size * sign

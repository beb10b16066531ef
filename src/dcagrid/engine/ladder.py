"""Ladder generation.

Builds the candidate order sequence for a grid: the main geometric ladder plus
the optional DYNAMIC ladder interleaved at 1.5-step offsets. Orders are yielded
nearest-to-entry first and truncated to SAFETY_CAP.
"""

from __future__ import annotations

import heapq
import itertools
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dcagrid.engine.types import (
    LADDER_OVERSHOOT,
    SAFETY_CAP,
    Direction,
    OrderKind,
    normalize_lot,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from dcagrid.engine.config import GridConfig


@dataclass(frozen=True)
class LadderOrder:
    """A candidate order on the ladder.

    Attributes:
        kind: ENTRY, MAIN or DYNAMIC.
        label: Display label (ENTRY, L-3, D-1.5, ...).
        price: Limit price of the rung.
        lot: Lot size, rounded to hundredths.
    """

    kind: OrderKind
    label: str
    price: float
    lot: float


def scaled_lot(initial_lot: float, multiplier: float, exponent: int) -> float | None:
    """Rounded initial_lot * multiplier**exponent, or None if it overflows."""
    try:
        lot = normalize_lot(initial_lot * multiplier**exponent)
    except OverflowError:
        return None
    if not math.isfinite(lot):
        return None
    return lot


def rung_count(
    entry_price: float, boundary_price: float, step: float, cap: int = SAFETY_CAP
) -> int:
    """Number of main rungs to generate: enough to pass the boundary, capped."""
    steps = abs(entry_price - boundary_price) / step
    if not math.isfinite(steps):
        return cap
    return min(math.ceil(steps) + LADDER_OVERSHOOT, cap)


class LadderGenerator:
    """Deterministic, restartable source of candidate orders.

    Each iteration re-derives the ladder from the config, so the same
    generator can be consumed any number of times with identical results.
    """

    def __init__(self, config: GridConfig, cap: int = SAFETY_CAP) -> None:
        """Initialize generator.

        Args:
            config: Grid configuration (step must be > 0).
            cap: Maximum number of orders yielded.
        """
        self.config = config
        self.cap = cap
        self._count = rung_count(config.entry_price, config.boundary_price, config.step, cap)

    def __iter__(self) -> Iterator[LadderOrder]:
        streams = [self._main_orders()]
        if self.config.use_dynamic_ladder:
            streams.append(self._dynamic_orders())
        # heapq.merge is stable: on equal distance the main rung comes first
        merged = heapq.merge(*streams, key=self._distance)
        return itertools.islice(merged, self.cap)

    def _distance(self, order: LadderOrder) -> float:
        return abs(self.config.entry_price - order.price)

    def _price_at(self, offset: float) -> float:
        if self.config.direction is Direction.LONG:
            return self.config.entry_price - offset
        return self.config.entry_price + offset

    def _main_orders(self) -> Iterator[LadderOrder]:
        cfg = self.config
        for i in range(self._count):
            lot = scaled_lot(cfg.initial_lot, cfg.lot_multiplier, i)
            if lot is None:
                return
            if i == 0:
                yield LadderOrder(OrderKind.ENTRY, "ENTRY", self._price_at(0.0), lot)
            else:
                yield LadderOrder(OrderKind.MAIN, f"L-{i}", self._price_at(i * cfg.step), lot)

    def _dynamic_orders(self) -> Iterator[LadderOrder]:
        cfg = self.config
        for i in range(self._count):
            lot = scaled_lot(cfg.initial_lot, cfg.lot_multiplier, i + 2)
            if lot is None:
                return
            offset = i * cfg.step + cfg.step * 1.5
            yield LadderOrder(OrderKind.DYNAMIC, f"D-{i + 1.5:.1f}", self._price_at(offset), lot)


def generate_ladder(config: GridConfig, cap: int = SAFETY_CAP) -> list[LadderOrder]:
    """Materialize the full candidate ladder for a config.

    Args:
        config: Grid configuration (step must be > 0).
        cap: Maximum number of orders.

    Returns:
        Orders sorted nearest-to-entry first.
    """
    return list(LadderGenerator(config, cap))

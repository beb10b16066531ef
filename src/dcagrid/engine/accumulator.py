"""Position accumulation.

Walks the candidate ladder nearest-first, fills rungs until the boundary is
passed or the hedge fires, and records the running basket state after each
fill.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dcagrid.engine.hedge import HedgeEvaluator, HedgeOutcome
from dcagrid.engine.position import GridPosition
from dcagrid.engine.types import Crossing, Direction, basket_pnl, normalize_lot

if TYPE_CHECKING:
    from collections.abc import Iterable

    from dcagrid.engine.config import GridConfig
    from dcagrid.engine.ladder import LadderOrder

logger = logging.getLogger(__name__)


@dataclass
class BasketState:
    """Running basket state during accumulation."""

    total_lot: float = 0.0
    # Unrounded sum of price * lot
    cost_basis: float = 0.0
    avg_price: float = 0.0
    positions: list[GridPosition] = field(default_factory=list)


@dataclass(frozen=True)
class AccumulationResult:
    """Final basket after accumulation.

    Attributes:
        positions: Filled positions in processing order, hedge record last.
        total_lot: Basket lot (excluding hedge).
        cost_basis: Unrounded sum of price * lot over filled rungs.
        avg_price: Gross basket average price.
        hedge: Hedge details if it fired.
    """

    positions: tuple[GridPosition, ...]
    total_lot: float
    cost_basis: float
    avg_price: float
    hedge: HedgeOutcome | None = None


class PositionAccumulator:
    """Fills ladder orders into a basket and delegates stop-loss checks."""

    def __init__(self, config: GridConfig) -> None:
        self.config = config
        self._sign = config.direction.sign

    def run(self, orders: Iterable[LadderOrder]) -> AccumulationResult:
        """Accumulate orders into a basket.

        Args:
            orders: Candidate orders, nearest-to-entry first.

        Returns:
            AccumulationResult with positions and final basket state.
        """
        cfg = self.config
        state = BasketState(avg_price=cfg.entry_price)
        hedger = HedgeEvaluator(cfg)

        for order in orders:
            if self._beyond_boundary(order.price):
                break

            if hedger.is_breached(order.price, state.avg_price, state.total_lot):
                state.positions.append(hedger.open(state.avg_price, state.total_lot, Crossing.RUNG))
                break

            self._fill(state, order)

        if hedger.is_breached(cfg.boundary_price, state.avg_price, state.total_lot):
            state.positions.append(hedger.open(state.avg_price, state.total_lot, Crossing.BOUNDARY))

        return AccumulationResult(
            positions=tuple(state.positions),
            total_lot=state.total_lot,
            cost_basis=state.cost_basis,
            avg_price=state.avg_price,
            hedge=hedger.outcome,
        )

    def _beyond_boundary(self, price: float) -> bool:
        if self.config.direction is Direction.LONG:
            return price < self.config.boundary_price
        return price > self.config.boundary_price

    def _fill(self, state: BasketState, order: LadderOrder) -> None:
        cfg = self.config
        state.total_lot = normalize_lot(state.total_lot + order.lot)
        state.cost_basis += order.price * order.lot
        if state.total_lot > 0:
            state.avg_price = state.cost_basis / state.total_lot

        state.positions.append(
            GridPosition(
                kind=order.kind,
                label=order.label,
                price=order.price,
                lot=order.lot,
                total_lot_after=state.total_lot,
                avg_price_after=state.avg_price,
                distance_from_entry=abs(cfg.entry_price - order.price),
                individual_pnl=basket_pnl(
                    cfg.boundary_price, order.price, order.lot, cfg.contract_size, self._sign
                ),
                cumulative_pnl=basket_pnl(
                    order.price, state.avg_price, state.total_lot, cfg.contract_size, self._sign
                ),
            )
        )

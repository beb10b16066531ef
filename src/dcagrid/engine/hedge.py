"""Hedge evaluation.

Basket P&L is affine in price, so the price at which it equals the stop-loss
is solved directly:

    trigger = avg + stop_loss / (total_lot * contract_size * sign)

The hedge is a reverse position of round(total_lot * lot_multiplier) opened at
that price. At most one hedge fires per simulation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dcagrid.engine.position import GridPosition
from dcagrid.engine.types import Crossing, OrderKind, basket_pnl, normalize_lot

if TYPE_CHECKING:
    from dcagrid.engine.config import GridConfig

logger = logging.getLogger(__name__)

# Below this lot difference basket and hedge are treated as fully netted
NETTING_EPSILON = 0.001


def net_lot(total_lot: float, hedge_lot: float, sign: int) -> float:
    """Absolute size of basket plus reverse hedge, rounded."""
    signed = total_lot * sign + hedge_lot * -sign
    return normalize_lot(abs(signed))


def net_average_price(
    avg_price: float,
    total_lot: float,
    hedge_price: float,
    hedge_lot: float,
) -> float:
    """Breakeven of basket plus hedge, or 0.0 when the two fully net out."""
    if abs(total_lot - hedge_lot) <= NETTING_EPSILON:
        return 0.0
    return (avg_price * total_lot - hedge_price * hedge_lot) / (total_lot - hedge_lot)


@dataclass(frozen=True)
class HedgeOutcome:
    """Result of a fired hedge.

    Attributes:
        trigger_price: Exact price where basket P&L equals the stop-loss.
        hedge_lot: Lot size of the reverse position.
        net_lot: Absolute net lot of basket plus hedge.
        net_average_price: Breakeven of the combined position (0.0 if netted).
        crossing: RUNG when detected before a fill, BOUNDARY when detected
            at the boundary after the ladder was exhausted.
    """

    trigger_price: float
    hedge_lot: float
    net_lot: float
    net_average_price: float
    crossing: Crossing


class HedgeEvaluator:
    """Detects the stop-loss crossing and opens the offsetting position."""

    def __init__(self, config: GridConfig) -> None:
        self.config = config
        self._sign = config.direction.sign
        self._outcome: HedgeOutcome | None = None

    @property
    def fired(self) -> bool:
        """True once a hedge has been opened; never resets."""
        return self._outcome is not None

    @property
    def outcome(self) -> HedgeOutcome | None:
        """Details of the fired hedge, if any."""
        return self._outcome

    def is_breached(self, mark_price: float, avg_price: float, total_lot: float) -> bool:
        """Check whether marking the basket at mark_price breaches the stop-loss.

        Always False when hedging is disabled, the stop-loss is not negative,
        the hedge already fired, or the basket is empty.
        """
        hedge = self.config.hedge
        if not hedge.can_trigger or self.fired or total_lot <= 0:
            return False
        pnl = basket_pnl(mark_price, avg_price, total_lot, self.config.contract_size, self._sign)
        return pnl <= hedge.stop_loss_amount

    def trigger_price(self, avg_price: float, total_lot: float) -> float:
        """Price at which basket P&L equals the stop-loss amount.

        Args:
            avg_price: Basket average price.
            total_lot: Basket lot; must be > 0.
        """
        stop_loss = self.config.hedge.stop_loss_amount
        return avg_price + stop_loss / (total_lot * self.config.contract_size * self._sign)

    def open(self, avg_price: float, total_lot: float, crossing: Crossing) -> GridPosition:
        """Fire the hedge against the current basket.

        Args:
            avg_price: Basket average price at the crossing.
            total_lot: Basket lot at the crossing (> 0).
            crossing: Where the stop-loss crossing was detected.

        Returns:
            The HEDGE position record.
        """
        if self.fired:
            raise RuntimeError("hedge already fired for this simulation")

        cfg = self.config
        trigger = self.trigger_price(avg_price, total_lot)
        hedge_lot = normalize_lot(total_lot * cfg.hedge.lot_multiplier)
        outcome = HedgeOutcome(
            trigger_price=trigger,
            hedge_lot=hedge_lot,
            net_lot=net_lot(total_lot, hedge_lot, self._sign),
            net_average_price=net_average_price(avg_price, total_lot, trigger, hedge_lot),
            crossing=crossing,
        )
        self._outcome = outcome

        logger.info(
            "Hedge triggered",
            extra={
                "trigger_price": trigger,
                "hedge_lot": hedge_lot,
                "basket_lot": total_lot,
                "crossing": crossing,
            },
        )

        return GridPosition(
            kind=OrderKind.HEDGE,
            label="HEDGE",
            price=trigger,
            lot=hedge_lot,
            total_lot_after=outcome.net_lot,
            avg_price_after=outcome.net_average_price,
            distance_from_entry=abs(cfg.entry_price - trigger),
            individual_pnl=basket_pnl(
                cfg.boundary_price, trigger, hedge_lot, cfg.contract_size, -self._sign
            ),
            cumulative_pnl=cfg.hedge.stop_loss_amount,
        )

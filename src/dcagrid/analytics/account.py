"""Account-level analytics derived from a simulation summary.

- Equity and drawdown of an account balance at the evaluated outcome.
- Profit target: where the net position must travel from its breakeven to
  earn a given distance, and how far that is from the boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from dcagrid.engine.types import Direction

if TYPE_CHECKING:
    from dcagrid.engine.config import GridConfig
    from dcagrid.engine.summary import GridSummary


@dataclass(frozen=True)
class AccountStats:
    """Account outcome for a simulated basket.

    Attributes:
        balance: Starting account balance.
        equity: Balance plus net P&L.
        drawdown_amount: Loss amount (0 if net P&L is not negative).
        drawdown_pct: Loss as percent of balance (0 if balance <= 0).
    """

    balance: float
    equity: float
    drawdown_amount: float
    drawdown_pct: float


@dataclass(frozen=True)
class ProfitTarget:
    """Profit target for the net position.

    Attributes:
        target_price: Breakeven shifted by the distance in the net direction.
        profit: distance * net_lot * contract_size.
        move: Distance from the boundary to the target price.
    """

    target_price: float
    profit: float
    move: float


def account_stats(summary: GridSummary, balance: float) -> AccountStats:
    """Compute equity and drawdown for a starting balance."""
    pnl = summary.net_pnl
    drawdown = abs(pnl) if pnl < 0 else 0.0
    pct = drawdown / balance * 100 if balance > 0 else 0.0
    return AccountStats(
        balance=balance,
        equity=balance + pnl,
        drawdown_amount=drawdown,
        drawdown_pct=pct,
    )


def is_net_long(summary: GridSummary, direction: Direction) -> bool:
    """Whether basket plus hedge is net long."""
    if direction is Direction.LONG:
        return summary.total_lot >= summary.hedge_lot
    return summary.hedge_lot > summary.total_lot


def profit_target(summary: GridSummary, config: GridConfig, distance: float) -> ProfitTarget:
    """Price and profit for a move of `distance` beyond breakeven.

    The breakeven is the net average price, falling back to the gross average
    when the net average is 0 (fully netted or null run).
    """
    breakeven = summary.net_average_price or summary.gross_average_price
    if is_net_long(summary, config.direction):
        target = breakeven + distance
    else:
        target = breakeven - distance
    return ProfitTarget(
        target_price=target,
        profit=distance * summary.net_lot * config.contract_size,
        move=abs(target - config.boundary_price),
    )

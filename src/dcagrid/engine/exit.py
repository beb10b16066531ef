"""Win-mode exit overlay.

Re-marks each position's individual P&L at a hypothetical profit-target exit
instead of the boundary price. Cumulative (staircase) P&L is left as recorded
during accumulation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dcagrid.engine.types import basket_pnl

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dcagrid.engine.config import GridConfig
    from dcagrid.engine.position import GridPosition


def exit_price(breakeven: float, target_profit_distance: float, sign: int) -> float:
    """Exit price lying target_profit_distance beyond breakeven in the profit direction."""
    return breakeven + target_profit_distance * sign


def apply_win_mode(
    positions: Sequence[GridPosition],
    config: GridConfig,
    breakeven: float,
) -> tuple[GridPosition, ...]:
    """Re-mark positions at the win-mode exit price.

    Args:
        positions: Positions from accumulation.
        config: Grid configuration (direction, contract size, target distance).
        breakeven: Net average price if hedged, else gross average price.

    Returns:
        Copies of the positions with individual_pnl re-marked.
    """
    sign = config.direction.sign
    price = exit_price(breakeven, config.target_profit_distance, sign)

    remarked = []
    for pos in positions:
        pos_sign = -sign if pos.is_hedge else sign
        pnl = basket_pnl(price, pos.price, pos.lot, config.contract_size, pos_sign)
        remarked.append(pos.model_copy(update={"individual_pnl": pnl}))
    return tuple(remarked)

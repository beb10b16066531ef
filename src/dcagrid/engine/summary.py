"""Simulation summary.

GridSummary reduces the final position list into aggregate metrics.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from dcagrid.engine.hedge import net_lot

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dcagrid.engine.accumulator import AccumulationResult
    from dcagrid.engine.config import GridConfig
    from dcagrid.engine.position import GridPosition


class GridSummary(BaseModel):
    """Aggregate metrics of a simulation run (frozen)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    filled_order_count: int = Field(ge=0, description="Filled rungs, hedge excluded")
    gross_average_price: float = Field(description="Basket average price without hedge")
    net_pnl: float = Field(description="main_pnl + hedge_pnl")
    main_pnl: float = Field(description="Sum of individual P&L over basket positions")
    hedge_pnl: float = Field(description="Individual P&L of the hedge (0 if none)")
    total_lot: float = Field(description="Basket lot, hedge excluded")
    hedge_lot: float = Field(description="Hedge lot (0 if none)")
    net_lot: float = Field(description="Absolute net lot of basket plus hedge")
    range_covered: float = Field(description="|entry - boundary|")
    breakeven_distance: float = Field(description="|entry - gross average|")
    recovery_gap: float = Field(description="|boundary - net average|")
    net_average_price: float = Field(
        description="Breakeven of basket plus hedge; gross average when unhedged"
    )
    is_hedged: bool = Field(description="Whether the hedge fired")
    hedge_trigger_price: float | None = Field(
        default=None,
        description="Exact hedge trigger price (None when not hedged)",
    )


def null_summary() -> GridSummary:
    """All-zero summary returned for invalid inputs."""
    return GridSummary(
        filled_order_count=0,
        gross_average_price=0.0,
        net_pnl=0.0,
        main_pnl=0.0,
        hedge_pnl=0.0,
        total_lot=0.0,
        hedge_lot=0.0,
        net_lot=0.0,
        range_covered=0.0,
        breakeven_distance=0.0,
        recovery_gap=0.0,
        net_average_price=0.0,
        is_hedged=False,
        hedge_trigger_price=None,
    )


def compute_summary(
    config: GridConfig,
    basket: AccumulationResult,
    positions: Sequence[GridPosition],
) -> GridSummary:
    """Compute aggregate metrics.

    Args:
        config: Grid configuration.
        basket: Final basket state from accumulation.
        positions: Final positions (after any win-mode overlay).

    Returns:
        GridSummary for the run.
    """
    main_pnl = sum((p.individual_pnl for p in positions if not p.is_hedge), 0.0)
    hedge_pnl = sum((p.individual_pnl for p in positions if p.is_hedge), 0.0)

    hedge = basket.hedge
    if hedge is not None:
        hedge_lot = hedge.hedge_lot
        net_average = hedge.net_average_price
    else:
        hedge_lot = 0.0
        net_average = basket.avg_price

    return GridSummary(
        filled_order_count=sum(1 for p in positions if not p.is_hedge),
        gross_average_price=basket.avg_price,
        net_pnl=main_pnl + hedge_pnl,
        main_pnl=main_pnl,
        hedge_pnl=hedge_pnl,
        total_lot=basket.total_lot,
        hedge_lot=hedge_lot,
        net_lot=net_lot(basket.total_lot, hedge_lot, config.direction.sign),
        range_covered=abs(config.entry_price - config.boundary_price),
        breakeven_distance=abs(config.entry_price - basket.avg_price),
        recovery_gap=abs(config.boundary_price - net_average),
        net_average_price=net_average,
        is_hedged=hedge is not None,
        hedge_trigger_price=hedge.trigger_price if hedge is not None else None,
    )

"""Grid simulator.

Runs the full pipeline for one configuration:

    LadderGenerator -> PositionAccumulator (+ HedgeEvaluator)
        -> win-mode overlay (optional) -> summary

The simulator is a pure function of its config: no I/O, no shared state, and
it never raises for out-of-range numeric inputs.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from dcagrid.engine.accumulator import PositionAccumulator
from dcagrid.engine.config import GridConfig  # noqa: TC001 - used at runtime
from dcagrid.engine.exit import apply_win_mode
from dcagrid.engine.ladder import LadderGenerator
from dcagrid.engine.position import GridPosition  # noqa: TC001 - pydantic field type
from dcagrid.engine.summary import GridSummary, compute_summary, null_summary

logger = logging.getLogger(__name__)


class SimulationResult(BaseModel):
    """Positions in processing order plus aggregate summary (frozen)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    positions: tuple[GridPosition, ...] = Field(
        default=(),
        description="Filled positions nearest-to-entry first, hedge record last",
    )
    summary: GridSummary = Field(description="Aggregate metrics")

    @property
    def hedge_position(self) -> GridPosition | None:
        """The HEDGE record, if the hedge fired."""
        for pos in self.positions:
            if pos.is_hedge:
                return pos
        return None

    @property
    def breakeven(self) -> float:
        """Net average price when hedged, gross average otherwise."""
        if self.summary.is_hedged:
            return self.summary.net_average_price
        return self.summary.gross_average_price


class GridSimulator:
    """Deterministic grid simulator."""

    def __init__(self, config: GridConfig) -> None:
        """Initialize simulator.

        Args:
            config: Grid configuration.
        """
        self.config = config

    def run(self) -> SimulationResult:
        """Run the simulation.

        Returns:
            SimulationResult; the null result when step, initial_lot or
            contract_size is not positive.
        """
        cfg = self.config
        if not cfg.is_runnable:
            logger.debug(
                "Null simulation for non-positive input",
                extra={
                    "step": cfg.step,
                    "initial_lot": cfg.initial_lot,
                    "contract_size": cfg.contract_size,
                },
            )
            return SimulationResult(positions=(), summary=null_summary())

        basket = PositionAccumulator(cfg).run(LadderGenerator(cfg))

        positions = basket.positions
        if cfg.win_mode:
            breakeven = (
                basket.hedge.net_average_price if basket.hedge is not None else basket.avg_price
            )
            positions = apply_win_mode(positions, cfg, breakeven)

        summary = compute_summary(cfg, basket, positions)
        logger.debug(
            "Simulation complete",
            extra={
                "direction": cfg.direction,
                "filled": summary.filled_order_count,
                "total_lot": summary.total_lot,
                "net_pnl": summary.net_pnl,
                "hedged": summary.is_hedged,
            },
        )
        return SimulationResult(positions=positions, summary=summary)


def simulate(config: GridConfig) -> SimulationResult:
    """Run a single simulation for config."""
    return GridSimulator(config).run()

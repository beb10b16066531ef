"""Grid engine configuration.

GridConfig and HedgeConfig are frozen (immutable) and define every simulation
parameter. Values the engine itself tolerates (step, initial_lot,
contract_size) are left unconstrained so that a non-positive value produces
the null simulation instead of a validation error.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field

from dcagrid.engine.types import Direction


class HedgeConfig(BaseModel):
    """Hedge stop-loss configuration (frozen)."""

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    enabled: bool = Field(default=False, description="Open a reverse position on stop-loss")
    stop_loss_amount: float = Field(
        default=-4000.0,
        description="Basket P&L that triggers the hedge; only values < 0 can trigger",
    )
    lot_multiplier: float = Field(
        default=2.0,
        description="Hedge lot as a multiple of the basket lot at trigger time",
    )
    # Accepted for compatibility; not used by trigger or pricing math.
    stop_loss_expansion_multiplier: float = Field(
        default=2.0,
        description="Stop-loss expansion multiplier (currently unused)",
    )

    @property
    def can_trigger(self) -> bool:
        """Whether this configuration is able to fire a hedge at all."""
        return self.enabled and self.stop_loss_amount < 0


class GridConfig(BaseModel):
    """Grid simulation configuration (frozen)."""

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    entry_price: float = Field(default=2000.0, description="Price of the first (ENTRY) order")
    boundary_price: float = Field(
        default=1950.0,
        description="Worst-case adverse price the simulation is evaluated against",
    )
    step: float = Field(default=10.0, description="Price distance between main rungs")
    initial_lot: float = Field(default=0.01, description="Lot size of the ENTRY order")
    lot_multiplier: float = Field(
        default=1.4,
        gt=0,
        description="Geometric growth factor of rung lots",
    )
    direction: Direction = Field(default=Direction.LONG, description="LONG or SHORT basket")
    contract_size: float = Field(default=100.0, description="Units per lot")
    use_dynamic_ladder: bool = Field(
        default=False,
        description="Interleave DYNAMIC orders at 1.5-step offsets",
    )
    hedge: HedgeConfig = Field(default_factory=HedgeConfig, description="Hedge settings")
    win_mode: bool = Field(
        default=False,
        description="Re-mark positions at a profit-target exit instead of the boundary",
    )
    target_profit_distance: float = Field(
        default=20.0,
        ge=0,
        description="Exit distance beyond breakeven used by win mode",
    )

    @property
    def is_runnable(self) -> bool:
        """False when inputs call for the null simulation.

        Also False for non-finite prices, which model_copy does not validate.
        """
        prices = (self.entry_price, self.boundary_price, self.entry_price - self.boundary_price)
        if not all(math.isfinite(v) for v in prices):
            return False
        return all(
            math.isfinite(v) and v > 0 for v in (self.step, self.initial_lot, self.contract_size)
        )

    @property
    def distance(self) -> float:
        """Absolute distance between entry and boundary."""
        return abs(self.entry_price - self.boundary_price)

    def boundary_at(self, distance: float) -> float:
        """Boundary price lying `distance` away from entry on the adverse side."""
        if self.direction is Direction.LONG:
            return self.entry_price - distance
        return self.entry_price + distance

    def with_distance(self, distance: float) -> GridConfig:
        """Copy of this config with the boundary moved to `distance` from entry."""
        return self.model_copy(update={"boundary_price": self.boundary_at(distance)})

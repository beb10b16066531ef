"""GridPosition model.

A ladder order that was actually filled (or the hedge opened against the
basket), together with the basket state right after it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dcagrid.engine.types import OrderKind


class GridPosition(BaseModel):
    """Filled order plus running basket state (frozen).

    For a HEDGE record, total_lot_after is the net lot and avg_price_after the
    net average price of basket plus hedge.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: OrderKind = Field(description="ENTRY, MAIN, DYNAMIC or HEDGE")
    label: str = Field(description="Ladder label (ENTRY, L-n, D-n.5, HEDGE)")
    price: float = Field(description="Fill price (trigger price for HEDGE)")
    lot: float = Field(description="Lot size of this fill")
    total_lot_after: float = Field(description="Basket lot after this fill")
    avg_price_after: float = Field(description="Basket average price after this fill")
    distance_from_entry: float = Field(description="Absolute distance from entry price")
    individual_pnl: float = Field(description="P&L of this fill alone at the evaluation price")
    cumulative_pnl: float = Field(description="Basket P&L marked at this fill's own price")

    @property
    def is_hedge(self) -> bool:
        """Check if this is the hedge record."""
        return self.kind == OrderKind.HEDGE

    @property
    def cost(self) -> float:
        """Notional cost contribution (price * lot)."""
        return self.price * self.lot

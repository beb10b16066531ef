"""Inverse solvers over the grid engine.

Bisection on boundary distance for a target breakeven price or a target net
P&L, plus a debounce helper for interactive callers.
"""

from __future__ import annotations

from dcagrid.solver.debounce import Debouncer
from dcagrid.solver.range_solver import (
    RangeSolution,
    RangeSolver,
    Sample,
    solve_for_breakeven,
    solve_for_target_pnl,
)

__all__ = [
    "Debouncer",
    "RangeSolution",
    "RangeSolver",
    "Sample",
    "solve_for_breakeven",
    "solve_for_target_pnl",
]

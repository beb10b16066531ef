"""Tests for boundary-distance bisection solvers."""

from __future__ import annotations

import logging
import math

import pytest

from dcagrid.engine import Direction, GridConfig, HedgeConfig, simulate
from dcagrid.solver import RangeSolver, Sample, solve_for_breakeven, solve_for_target_pnl
from dcagrid.solver.range_solver import (
    BREAKEVEN_TOLERANCE,
    MAX_ITERATIONS,
    PNL_TOLERANCE,
    is_monotonic,
)


@pytest.fixture
def config() -> GridConfig:
    """Reference LONG grid."""
    return GridConfig()


class TestSolveForBreakeven:
    """Tests for the breakeven solver."""

    def test_recovers_known_breakeven(self, config: GridConfig) -> None:
        """Target taken from a 100-point grid is recovered within tolerance."""
        target = simulate(config.with_distance(100.0)).breakeven

        solution = solve_for_breakeven(config, target)

        assert solution is not None
        assert solution.converged
        assert solution.residual < BREAKEVEN_TOLERANCE
        assert simulate(solution.apply(config)).breakeven == pytest.approx(
            target, abs=BREAKEVEN_TOLERANCE
        )

    def test_short_recovers_known_breakeven(self) -> None:
        """SHORT narrows in the mirrored direction."""
        config = GridConfig(direction=Direction.SHORT, boundary_price=2050.0)
        target = simulate(config.with_distance(100.0)).breakeven

        solution = solve_for_breakeven(config, target)

        assert solution is not None
        assert solution.converged
        assert solution.boundary_price > config.entry_price

    def test_outputs_rounded(self, config: GridConfig) -> None:
        """Distance and boundary are rounded to 2 decimals."""
        target = simulate(config.with_distance(100.0)).breakeven

        solution = solve_for_breakeven(config, target)

        assert solution is not None
        assert solution.distance == round(solution.distance, 2)
        assert solution.boundary_price == round(solution.boundary_price, 2)
        assert solution.boundary_price == pytest.approx(config.entry_price - solution.distance)

    @pytest.mark.parametrize("target", [0.0, -10.0, math.nan, math.inf])
    def test_invalid_target(self, config: GridConfig, target: float) -> None:
        """Non-positive or non-finite targets return None."""
        assert solve_for_breakeven(config, target) is None

    def test_unreachable_target(
        self, config: GridConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A LONG breakeven above entry cannot be reached."""
        with caplog.at_level(logging.WARNING, logger="dcagrid.solver.range_solver"):
            solution = solve_for_breakeven(config, 5000.0)

        assert solution is not None
        assert not solution.converged
        assert solution.iterations == MAX_ITERATIONS
        assert solution.objective == pytest.approx(2000.0)
        assert solution.residual == pytest.approx(3000.0)
        assert solution.boundary_price == 1950.0
        assert solution.distance == 50.0
        assert any("did not converge" in r.getMessage() for r in caplog.records)


class TestSolveForTargetPnl:
    """Tests for the net P&L solver."""

    def test_hits_target_pnl(self, config: GridConfig) -> None:
        """Solved boundary reproduces the target P&L."""
        solution = solve_for_target_pnl(config, -5000.0)

        assert solution is not None
        assert solution.converged
        assert solution.residual < PNL_TOLERANCE
        resim = simulate(solution.apply(config)).summary.net_pnl
        assert resim == pytest.approx(-5000.0, abs=PNL_TOLERANCE + 5.0)

    def test_reference_loss(self, config: GridConfig) -> None:
        """-250 target lands near the 50-point reference grid."""
        solution = solve_for_target_pnl(config, -250.0)

        assert solution is not None
        assert solution.converged
        assert solution.distance == pytest.approx(50.0, abs=1.0)

    @pytest.mark.parametrize("target", [math.nan, math.inf, -math.inf])
    def test_invalid_target(self, config: GridConfig, target: float) -> None:
        """Non-finite targets return None."""
        assert solve_for_target_pnl(config, target) is None


class TestRangeSolver:
    """Tests for solver construction and bookkeeping."""

    def test_win_mode_forced_off(self) -> None:
        """Solves always run with win mode disabled."""
        solver = RangeSolver(GridConfig(win_mode=True))

        assert not solver.config.win_mode

    @pytest.mark.parametrize(
        ("low", "high", "iterations"),
        [(0.0, 100.0, 30), (50.0, 10.0, 30), (0.1, 100.0, 0)],
    )
    def test_invalid_domain(self, low: float, high: float, iterations: int) -> None:
        """Bad search domain or budget is rejected."""
        with pytest.raises(ValueError):
            RangeSolver(GridConfig(), low=low, high=high, max_iterations=iterations)

    def test_samples_recorded(self, config: GridConfig) -> None:
        """Every engine run is kept, first at the domain midpoint."""
        solution = RangeSolver(config, max_iterations=5).solve_for_target_pnl(-1e12)

        assert solution is not None
        assert solution.iterations == 5
        assert len(solution.samples) == 5
        assert solution.samples[0].distance == pytest.approx(2500.05)

    def test_apply_keeps_other_fields(self, config: GridConfig) -> None:
        """apply only moves the boundary."""
        solution = solve_for_target_pnl(config, -250.0)

        assert solution is not None
        applied = solution.apply(config)
        assert applied.step == config.step
        assert applied.boundary_price == solution.boundary_price


class TestMonotonicity:
    """Tests for the monotonicity check."""

    def test_increasing(self) -> None:
        """Increasing samples are monotonic regardless of evaluation order."""
        samples = [Sample(50.0, 5.0), Sample(10.0, 1.0), Sample(30.0, 3.0)]

        assert is_monotonic(samples)

    def test_decreasing_with_plateau(self) -> None:
        """Plateaus are allowed."""
        samples = [Sample(10.0, 3.0), Sample(20.0, 3.0), Sample(30.0, 1.0)]

        assert is_monotonic(samples)

    def test_non_monotonic(self) -> None:
        """A reversal is detected."""
        samples = [Sample(10.0, 1.0), Sample(20.0, 3.0), Sample(30.0, 2.0)]

        assert not is_monotonic(samples)

    def test_plain_ladder_is_monotonic(self, config: GridConfig) -> None:
        """A plain geometric ladder yields a monotonic breakeven."""
        target = simulate(config.with_distance(100.0)).breakeven

        solution = solve_for_breakeven(config, target)

        assert solution is not None
        assert solution.monotonic

    def test_hedged_objective_not_monotonic(self, caplog: pytest.LogCaptureFixture) -> None:
        """A shallow stop-loss turns net P&L back up past the trigger."""
        cfg = GridConfig(hedge=HedgeConfig(enabled=True, stop_loss_amount=-100.0))

        with caplog.at_level(logging.WARNING, logger="dcagrid.solver.range_solver"):
            solution = RangeSolver(cfg).solve_for_target_pnl(20000.0)

        assert solution is not None
        assert solution.monotonic is False
        assert not solution.converged
        assert solution.boundary_price == 1950.0
        assert any("not monotonic" in r.getMessage() for r in caplog.records)

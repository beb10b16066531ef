"""Boundary-distance solvers.

Both solvers treat the whole engine as a black-box function of the boundary
distance and invert it by bisection over [0.1, 5000] with a fixed budget of
30 iterations. Each iteration is one full engine run with win mode off.

Precondition: the objective is monotonic in distance. That holds for a plain
geometric ladder; a hedge or an unusual multiplier can break it. Every
evaluated sample is kept and checked afterwards; a non-monotonic sample set
is reported via RangeSolution.monotonic and a warning, not corrected.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field

from dcagrid.engine.config import GridConfig  # noqa: TC001 - used at runtime
from dcagrid.engine.simulator import SimulationResult, simulate
from dcagrid.engine.types import Direction

logger = logging.getLogger(__name__)

DISTANCE_LOW = 0.1
DISTANCE_HIGH = 5000.0
MAX_ITERATIONS = 30
BREAKEVEN_TOLERANCE = 0.5
PNL_TOLERANCE = 10.0

# (objective, target) -> True when the root lies at a larger distance
NarrowRule = Callable[[float, float], bool]


@dataclass(frozen=True)
class Sample:
    """One engine evaluation during a solve."""

    distance: float
    objective: float


@dataclass(frozen=True)
class RangeSolution:
    """Result of a boundary-distance solve.

    Attributes:
        boundary_price: Solved boundary price, rounded to 2 decimals. The base
            config's boundary when the solve did not converge.
        distance: Solved boundary distance from entry, rounded to 2 decimals.
            The base config's distance when the solve did not converge.
        objective: Objective value at the lowest-residual sample.
        residual: |objective - target| at the lowest-residual sample.
        iterations: Engine runs performed.
        converged: Whether an iterate landed inside the tolerance.
        monotonic: Whether all evaluated samples were monotonic in distance.
        samples: Every (distance, objective) evaluation, in evaluation order.
    """

    boundary_price: float
    distance: float
    objective: float
    residual: float
    iterations: int
    converged: bool
    monotonic: bool
    samples: tuple[Sample, ...] = field(default=(), repr=False)

    def apply(self, config: GridConfig) -> GridConfig:
        """Config with the solved boundary, ready to be re-run for display."""
        return config.model_copy(update={"boundary_price": self.boundary_price})


def breakeven_of(result: SimulationResult) -> float:
    """Net average price when hedged, gross average otherwise."""
    return result.breakeven


def net_pnl_of(result: SimulationResult) -> float:
    """Net P&L of a run."""
    return result.summary.net_pnl


def is_monotonic(samples: list[Sample]) -> bool:
    """Check that objectives are monotonic (either way) when ordered by distance."""
    ordered = sorted(samples, key=lambda s: s.distance)
    diffs = [b.objective - a.objective for a, b in zip(ordered, ordered[1:])]
    return all(d >= 0 for d in diffs) or all(d <= 0 for d in diffs)


class RangeSolver:
    """Bisection over boundary distance for a fixed base configuration."""

    def __init__(
        self,
        config: GridConfig,
        low: float = DISTANCE_LOW,
        high: float = DISTANCE_HIGH,
        max_iterations: int = MAX_ITERATIONS,
    ) -> None:
        """Initialize solver.

        Args:
            config: Base configuration; its boundary is replaced per iteration.
            low: Lower bound of the distance search domain.
            high: Upper bound of the distance search domain.
            max_iterations: Fixed bisection budget.
        """
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
        if not 0 < low < high:
            raise ValueError(f"search domain must satisfy 0 < low < high, got [{low}, {high}]")
        self.config = config.model_copy(update={"win_mode": False})
        self.low = low
        self.high = high
        self.max_iterations = max_iterations

    def solve_for_breakeven(self, target: float) -> RangeSolution | None:
        """Find the boundary distance whose breakeven equals target.

        Args:
            target: Target breakeven price (> 0).

        Returns:
            RangeSolution, or None when target is not a positive finite number.
        """
        if not _is_finite_number(target) or target <= 0:
            logger.debug("Breakeven solve skipped", extra={"target": target})
            return None

        rule = _above if self.config.direction is Direction.LONG else _below
        return self._bisect(target, breakeven_of, rule, BREAKEVEN_TOLERANCE, "breakeven")

    def solve_for_target_pnl(self, target: float) -> RangeSolution | None:
        """Find the boundary distance whose net P&L equals target.

        Args:
            target: Target net P&L (usually negative).

        Returns:
            RangeSolution, or None when target is not a finite number.
        """
        if not _is_finite_number(target):
            logger.debug("Target P&L solve skipped", extra={"target": target})
            return None

        return self._bisect(target, net_pnl_of, _above, PNL_TOLERANCE, "net_pnl")

    def _bisect(
        self,
        target: float,
        objective_fn: Callable[[SimulationResult], float],
        farther: NarrowRule,
        tolerance: float,
        objective_name: str,
    ) -> RangeSolution:
        low, high = self.low, self.high
        samples: list[Sample] = []
        converged = False

        for _ in range(self.max_iterations):
            mid = (low + high) / 2
            objective = objective_fn(simulate(self.config.with_distance(mid)))
            sample = Sample(distance=mid, objective=objective)
            samples.append(sample)

            if abs(objective - target) < tolerance:
                converged = True
                break

            if farther(objective, target):
                low = mid
            else:
                high = mid

        # Lowest residual; a converged sample is the only one inside tolerance
        best = min(samples, key=lambda s: abs(s.objective - target))
        monotonic = is_monotonic(samples)
        residual = abs(best.objective - target)

        if not converged:
            logger.warning(
                "Range solve did not converge",
                extra={
                    "objective": objective_name,
                    "target": target,
                    "residual": residual,
                    "iterations": len(samples),
                },
            )
        if not monotonic:
            logger.warning(
                "Objective is not monotonic in boundary distance",
                extra={"objective": objective_name, "target": target},
            )

        logger.debug(
            "Range solve complete",
            extra={
                "objective": objective_name,
                "target": target,
                "distance": best.distance,
                "converged": converged,
                "iterations": len(samples),
            },
        )

        if converged:
            boundary_price = round(self.config.boundary_at(best.distance), 2)
            distance = round(best.distance, 2)
        else:
            # Base boundary is left in place
            boundary_price = self.config.boundary_price
            distance = self.config.distance
        return RangeSolution(
            boundary_price=boundary_price,
            distance=distance,
            objective=best.objective,
            residual=residual,
            iterations=len(samples),
            converged=converged,
            monotonic=monotonic,
            samples=tuple(samples),
        )


def _above(objective: float, target: float) -> bool:
    return objective > target


def _below(objective: float, target: float) -> bool:
    return objective < target


def _is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def solve_for_breakeven(config: GridConfig, target: float) -> RangeSolution | None:
    """Solve for the boundary whose breakeven equals target."""
    return RangeSolver(config).solve_for_breakeven(target)


def solve_for_target_pnl(config: GridConfig, target: float) -> RangeSolution | None:
    """Solve for the boundary whose net P&L equals target."""
    return RangeSolver(config).solve_for_target_pnl(target)

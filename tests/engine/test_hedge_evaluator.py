"""Tests for hedge stop-loss evaluation."""

from __future__ import annotations

import logging

import pytest

from dcagrid.engine import (
    Crossing,
    Direction,
    GridConfig,
    HedgeConfig,
    HedgeEvaluator,
    OrderKind,
    simulate,
)
from dcagrid.engine.hedge import net_average_price, net_lot


def make_config(stop_loss: float = -100.0, enabled: bool = True, **overrides: object) -> GridConfig:
    """Scenario A config with a hedge."""
    base: dict[str, object] = {
        "entry_price": 2000.0,
        "boundary_price": 1950.0,
        "step": 10.0,
        "initial_lot": 0.01,
        "lot_multiplier": 1.4,
        "direction": Direction.LONG,
        "contract_size": 100.0,
        "hedge": HedgeConfig(enabled=enabled, stop_loss_amount=stop_loss),
    }
    base.update(overrides)
    return GridConfig(**base)  # type: ignore[arg-type]


class TestIsBreached:
    """Tests for stop-loss detection."""

    def test_breach_at_stop_loss(self) -> None:
        """P&L at or below the stop-loss is a breach."""
        evaluator = HedgeEvaluator(make_config(stop_loss=-140.0))

        assert evaluator.is_breached(1950.0, 1980.0, 0.07)  # -210
        assert not evaluator.is_breached(1970.0, 1980.0, 0.07)  # -70

    def test_disabled_never_breaches(self) -> None:
        """Disabled hedge never triggers."""
        evaluator = HedgeEvaluator(make_config(enabled=False))

        assert not evaluator.is_breached(0.0, 1980.0, 0.07)

    @pytest.mark.parametrize("stop_loss", [0.0, 100.0])
    def test_non_negative_stop_loss_never_breaches(self, stop_loss: float) -> None:
        """Stop-loss must be negative to trigger."""
        evaluator = HedgeEvaluator(make_config(stop_loss=stop_loss))

        assert not evaluator.is_breached(0.0, 1980.0, 0.07)

    def test_empty_basket_never_breaches(self) -> None:
        """Zero lot cannot breach."""
        evaluator = HedgeEvaluator(make_config())

        assert not evaluator.is_breached(0.0, 2000.0, 0.0)

    def test_short_breach_above(self) -> None:
        """SHORT basket loses when price rises."""
        evaluator = HedgeEvaluator(make_config(direction=Direction.SHORT))

        assert evaluator.is_breached(2040.0, 2020.0, 0.07)
        assert not evaluator.is_breached(2000.0, 2020.0, 0.07)


class TestOpen:
    """Tests for opening the hedge."""

    def test_trigger_price_is_exact_crossing(self) -> None:
        """Trigger is where basket P&L equals the stop-loss."""
        evaluator = HedgeEvaluator(make_config())

        trigger = evaluator.trigger_price(1980.0, 0.07)

        assert trigger == pytest.approx(1965.714286)
        assert (trigger - 1980.0) * 0.07 * 100.0 == pytest.approx(-100.0)

    def test_hedge_record(self) -> None:
        """HEDGE record carries net lot and net average."""
        evaluator = HedgeEvaluator(make_config())

        pos = evaluator.open(1980.0, 0.07, Crossing.RUNG)

        assert pos.kind == OrderKind.HEDGE
        assert pos.label == "HEDGE"
        assert pos.lot == pytest.approx(0.14)
        assert pos.total_lot_after == pytest.approx(0.07)
        assert pos.avg_price_after == pytest.approx(1951.428571)
        assert pos.individual_pnl == pytest.approx(220.0)
        assert pos.cumulative_pnl == -100.0

    def test_fires_once(self) -> None:
        """A second open is rejected and further checks are False."""
        evaluator = HedgeEvaluator(make_config())
        evaluator.open(1980.0, 0.07, Crossing.RUNG)

        assert evaluator.fired
        assert not evaluator.is_breached(0.0, 1980.0, 0.07)
        with pytest.raises(RuntimeError, match="already fired"):
            evaluator.open(1980.0, 0.07, Crossing.RUNG)

    def test_logs_trigger(self, caplog: pytest.LogCaptureFixture) -> None:
        """Hedge trigger is logged at INFO with structured fields."""
        evaluator = HedgeEvaluator(make_config())

        with caplog.at_level(logging.INFO, logger="dcagrid.engine.hedge"):
            evaluator.open(1980.0, 0.07, Crossing.RUNG)

        records = [r for r in caplog.records if r.getMessage() == "Hedge triggered"]
        assert len(records) == 1
        assert records[0].crossing == "rung"  # type: ignore[attr-defined]
        assert records[0].hedge_lot == pytest.approx(0.14)  # type: ignore[attr-defined]


class TestNetting:
    """Tests for net lot and net average helpers."""

    def test_net_lot_long(self) -> None:
        """Hedge twice the basket leaves an equal net short."""
        assert net_lot(0.07, 0.14, 1) == pytest.approx(0.07)

    def test_net_lot_no_hedge(self) -> None:
        """Without hedge the net lot is the basket lot."""
        assert net_lot(0.16, 0.0, 1) == pytest.approx(0.16)
        assert net_lot(0.16, 0.0, -1) == pytest.approx(0.16)

    def test_fully_netted_average_is_zero(self) -> None:
        """Equal basket and hedge lots have no breakeven."""
        assert net_average_price(1980.0, 0.07, 1965.0, 0.07) == 0.0

    def test_net_average(self) -> None:
        """Net average solves the combined breakeven."""
        assert net_average_price(1980.0, 0.07, 1965.714286, 0.14) == pytest.approx(
            1951.428571, abs=1e-4
        )


class TestHedgeInSimulation:
    """End-to-end hedge behavior through the simulator."""

    def test_rung_crossing(self) -> None:
        """Stop-loss -100 fires before the 1960 rung."""
        result = simulate(make_config())
        s = result.summary

        assert s.is_hedged
        assert s.filled_order_count == 4
        assert s.hedge_trigger_price == pytest.approx(1965.714286)
        assert s.hedge_lot == pytest.approx(0.14)
        assert s.net_lot == pytest.approx(0.07)
        assert s.main_pnl == pytest.approx(-210.0)
        assert s.hedge_pnl == pytest.approx(220.0)
        assert s.net_pnl == pytest.approx(10.0)
        assert s.recovery_gap == pytest.approx(1.428571)

    def test_boundary_crossing(self) -> None:
        """Stop-loss crossed between the last fill and the boundary."""
        result = simulate(make_config(stop_loss=-150.0, boundary_price=1955.0))
        hedge = result.hedge_position

        assert hedge is not None
        assert result.summary.filled_order_count == 5
        assert hedge.price == pytest.approx(1959.090909)
        assert hedge.lot == pytest.approx(0.22)
        assert hedge.individual_pnl == pytest.approx(90.0)

    def test_unreachable_stop_loss(self) -> None:
        """Stop-loss deeper than the max basket loss never fires."""
        result = simulate(make_config(stop_loss=-500.0))

        assert not result.summary.is_hedged
        assert result.hedge_position is None
        assert result.summary.net_pnl == pytest.approx(-250.0)

    def test_short_mirror(self) -> None:
        """SHORT hedge mirrors LONG."""
        result = simulate(make_config(direction=Direction.SHORT, boundary_price=2050.0))
        s = result.summary

        assert s.is_hedged
        assert s.hedge_trigger_price == pytest.approx(2034.285714)
        assert s.net_average_price == pytest.approx(2048.571429)
        assert s.net_pnl == pytest.approx(10.0)

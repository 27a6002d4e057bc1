"""Tests for production time, setup time and cost estimates."""

import pytest

from moldplan.core.models import Machine, Material, Product, SchedulingSettings
from moldplan.engine.production_time import (
    calculate_estimated_cost,
    calculate_production_time,
    calculate_setup_time,
    round_half_up,
)


class TestRoundHalfUp:

    def test_half_goes_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(0.125, 2) == pytest.approx(0.13)

    def test_below_half_goes_down(self):
        assert round_half_up(3378.33) == 3378


class TestCalculateProductionTime:

    def test_large_batch(self):
        result = calculate_production_time(quantity=10000, cycle_time=20, cavity_count=1, setup_minutes=45)

        assert result.shots == 10000
        assert result.production_minutes == 3333
        assert result.total_minutes == 3378
        assert result.total_hours == pytest.approx(56.31)

    def test_shots_round_up_with_cavities(self):
        result = calculate_production_time(quantity=10, cycle_time=30, cavity_count=4, setup_minutes=0)
        assert result.shots == 3
        assert result.total_minutes == 2  # 90 s

    def test_total_rounded_once(self):
        # 0.4 min production + 0.4 min setup rounds to 1, not 0 + 0
        result = calculate_production_time(quantity=1, cycle_time=24, cavity_count=1, setup_minutes=0.4)
        assert result.total_minutes == 1

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"quantity": 0, "cycle_time": 20},
            {"quantity": 10, "cycle_time": 0},
            {"quantity": 10, "cycle_time": 20, "cavity_count": 0},
            {"quantity": 10, "cycle_time": 20, "setup_minutes": -1},
        ],
    )
    def test_invalid_inputs(self, kwargs):
        with pytest.raises(ValueError):
            calculate_production_time(**kwargs)


class TestCalculateSetupTime:

    def test_constant_setup_with_breakdown(self, product, machine):
        result = calculate_setup_time(product, machine)

        assert result.total_minutes == 45
        assert result.total_hours == pytest.approx(0.75)
        assert [step["type"] for step in result.breakdown] == ["base_setup", "quality_check"]
        assert sum(step["minutes"] for step in result.breakdown) == 45


class TestCalculateEstimatedCost:

    def test_material_plus_labor(self, product, machine):
        # material 10 g * 2.0/kg * 10000 = 200, labor 55.56 h * 120 = 6666.67
        assert calculate_estimated_cost(10000, product, machine) == pytest.approx(6866.67)

    def test_defaults_for_missing_data(self):
        product = Product(id="P1", cycle_time=20, cavity_count=1)
        machine = Machine(id="M1")

        # 2 h at the default 150/h, no weight
        assert calculate_estimated_cost(360, product, machine) == pytest.approx(300.0)

    def test_default_material_price(self):
        product = Product(
            id="P1",
            cycle_time=20,
            weight_per_unit=100,
            material=Material(id="X", cost_per_kg=None),
        )
        machine = Machine(id="M1", hourly_rate=0)

        assert calculate_estimated_cost(1000, product, machine) == pytest.approx(250.0)

    def test_settings_override_defaults(self):
        product = Product(id="P1", cycle_time=20)
        machine = Machine(id="M1")
        settings = SchedulingSettings(default_hourly_rate=100.0)

        assert calculate_estimated_cost(360, product, machine, settings) == pytest.approx(200.0)

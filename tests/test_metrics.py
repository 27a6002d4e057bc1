"""Tests for schedule metrics."""

import pytest
from datetime import datetime

from moldplan.core.models import ProductionBlock, SchedulingSettings
from moldplan.engine.block_splitter import create_multi_day_blocks
from moldplan.evaluation.metrics import (
    MetricsCalculator,
    blocks_to_dataframe,
    calculate_schedule_metrics,
    machine_utilization_frame,
    recalculate_metrics_after_edit,
)


@pytest.fixture
def large_run(now, machine, product, clock):
    return create_multi_day_blocks(
        total_minutes=3378,
        start_time=now,
        machine=machine,
        product=product,
        customer_id="C1",
        batch_size=10000,
        setup_minutes=45,
        clock=clock,
        order_id="O1",
    )


class TestMetricsCalculator:

    def test_work_days(self, large_run):
        # 2024-01-08 06:00 to 2024-01-11 14:18, both ends counted
        assert MetricsCalculator.calculate_work_days(large_run) == 5

    def test_work_days_single_block(self):
        b = ProductionBlock("M1", "P1", "C1", 10, datetime(2024, 1, 8, 6), datetime(2024, 1, 8, 8))
        assert MetricsCalculator.calculate_work_days([b]) == 2

    def test_oee_capped(self):
        assert MetricsCalculator.calculate_oee(200, 100) == 100.0
        assert MetricsCalculator.calculate_oee(10, 0) == 0.0

    def test_revenue_counts_first_blocks_only(self, large_run):
        assert MetricsCalculator.calculate_revenue(large_run, 5.0) == pytest.approx(50000)


class TestCalculateScheduleMetrics:

    def test_single_machine(self, now, large_run, machine):
        metrics = calculate_schedule_metrics(large_run, [machine], now=now)

        assert metrics.total_blocks == 4
        assert metrics.machines_used == 1
        assert metrics.work_days == 5
        assert metrics.total_production_hours == pytest.approx(56.3)
        assert metrics.total_setup_hours == pytest.approx(0.8)
        assert metrics.total_oee == pytest.approx(70.4)
        assert metrics.machine_oee == pytest.approx({"M1": 70.4})
        assert metrics.estimated_revenue == pytest.approx(50000)
        assert metrics.has_manual_edits is False
        assert metrics.last_calculated_at == now

    def test_idle_machines_lower_oee(self, now, large_run, machines):
        metrics = calculate_schedule_metrics(large_run, machines, now=now)

        assert metrics.total_oee == pytest.approx(35.2)
        assert metrics.machine_oee["M2"] == 0.0
        assert metrics.machines_used == 1

    def test_unit_price_from_settings(self, now, large_run, machine):
        metrics = calculate_schedule_metrics(large_run, [machine], SchedulingSettings(unit_price=2.0), now)
        assert metrics.estimated_revenue == pytest.approx(20000)

    def test_empty_schedule(self, now, machines):
        metrics = calculate_schedule_metrics([], machines, now=now)

        assert metrics.total_oee == 0
        assert metrics.total_blocks == 0
        assert metrics.work_days == 0
        assert metrics.machine_oee == {}

    def test_manual_edit_flag(self, now, large_run, machine):
        metrics = recalculate_metrics_after_edit(large_run, [machine], now=now)
        assert metrics.has_manual_edits is True
        assert metrics.total_oee == pytest.approx(70.4)

    def test_to_dict(self, now, large_run, machine):
        data = calculate_schedule_metrics(large_run, [machine], now=now).to_dict()
        assert data["last_calculated_at"] == "2024-01-08T06:00:00"
        assert data["total_blocks"] == 4


class TestDataFrames:

    def test_blocks_to_dataframe(self, large_run):
        df = blocks_to_dataframe(list(reversed(large_run)))

        assert len(df) == 4
        assert df["start_time"].is_monotonic_increasing
        assert df["duration_minutes"].sum() == pytest.approx(3378)
        assert df["batch_size"].tolist() == [10000, 0, 0, 0]

    def test_empty_dataframe(self):
        df = blocks_to_dataframe([])
        assert df.empty
        assert "duration_minutes" in df.columns

    def test_machine_utilization_frame(self, now, large_run, machines):
        metrics = calculate_schedule_metrics(large_run, machines, now=now)
        df = machine_utilization_frame(metrics, machines)

        assert df["machine_id"].tolist() == ["M1", "M2"]
        assert df["oee"].tolist() == pytest.approx([70.4, 0.0])

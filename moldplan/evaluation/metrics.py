"""
Evaluation metrics for production schedules

Computes the utilization summary shown on the schedule dashboard:
- Production and setup hours
- Work-day span
- Aggregate and per-machine OEE
- Estimated revenue

Mathematical formulations:

1. Production minutes: P = Σ (end_b - start_b) over all blocks, continuations included
2. Work days: D = max(1, ceil((max(end_b) - min(start_b)) / 1 day) + 1)
3. Available minutes: A = |machines| * D * H * 60 where H = work hours per day
4. OEE: min(100, round(P / A * 100, 1))
5. Machine OEE: min(100, round(P_m / (D * H * 60) * 100, 1)), D from the global span
6. Revenue: Σ batch_size_b * unit_price over first blocks (batch_size > 0)
"""

from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Sequence
import math

import pandas as pd

from moldplan.constants import MINUTES_PER_HOUR
from moldplan.core.models import Machine, ProductionBlock, ScheduleMetrics, SchedulingSettings
from moldplan.engine.production_time import round_half_up
from moldplan.utils.logging_config import get_logger

logger = get_logger("metrics")


class MetricsCalculator:
    """
    Computes utilization metrics for a set of production blocks

    All percentages are rounded to one decimal and capped at 100.
    """

    @staticmethod
    def calculate_production_minutes(blocks: Sequence[ProductionBlock]) -> Dict[str, float]:
        """
        Production minutes per machine

        Returns:
            Dictionary of {machine_id: minutes}
        """
        minutes: Dict[str, float] = defaultdict(float)
        for block in blocks:
            minutes[block.machine_id] += block.duration_minutes()
        return dict(minutes)

    @staticmethod
    def calculate_work_days(blocks: Sequence[ProductionBlock]) -> int:
        """
        Number of calendar days the schedule spans (both ends counted)

        Returns:
            0 for an empty schedule, otherwise at least 1
        """
        if not blocks:
            return 0
        earliest_start = min(block.start_time for block in blocks)
        latest_end = max(block.end_time for block in blocks)
        days = (latest_end - earliest_start).total_seconds() / 86400
        return max(1, math.ceil(days) + 1)

    @staticmethod
    def calculate_oee(production_minutes: float, available_minutes: float) -> float:
        if available_minutes <= 0:
            return 0.0
        return min(100.0, round_half_up(production_minutes / available_minutes * 100, 1))

    @staticmethod
    def calculate_revenue(blocks: Sequence[ProductionBlock], unit_price: float) -> float:
        """Only first blocks carry a batch size, so each run is counted once"""
        return sum(block.batch_size * unit_price for block in blocks if block.batch_size > 0)

    @staticmethod
    def calculate_all_metrics(
        blocks: Sequence[ProductionBlock],
        machines: Sequence[Machine],
        settings: Optional[SchedulingSettings] = None,
        now: Optional[datetime] = None,
    ) -> ScheduleMetrics:
        """
        Calculate all metrics for a schedule

        Args:
            blocks: Generated blocks
            machines: Full machine list, including idle machines
            settings: Settings snapshot. Defaults apply if None.
            now: Calculation timestamp. Current time if None.

        Returns:
            ScheduleMetrics with ``has_manual_edits`` False
        """
        settings = settings or SchedulingSettings()
        now = now or datetime.now()

        if not blocks:
            return ScheduleMetrics(last_calculated_at=now)

        minutes_by_machine = MetricsCalculator.calculate_production_minutes(blocks)
        total_production_minutes = sum(minutes_by_machine.values())
        total_setup_minutes = sum(block.setup_time_minutes for block in blocks)

        work_days = MetricsCalculator.calculate_work_days(blocks)
        machine_available = work_days * settings.work_hours_per_day * MINUTES_PER_HOUR
        available_minutes = len(machines) * machine_available

        machine_oee = {
            machine.id: MetricsCalculator.calculate_oee(
                minutes_by_machine.get(machine.id, 0.0), machine_available
            )
            for machine in machines
        }

        metrics = ScheduleMetrics(
            total_oee=MetricsCalculator.calculate_oee(total_production_minutes, available_minutes),
            total_production_hours=round_half_up(total_production_minutes / MINUTES_PER_HOUR, 1),
            total_setup_hours=round_half_up(total_setup_minutes / MINUTES_PER_HOUR, 1),
            total_blocks=len(blocks),
            machines_used=len(minutes_by_machine),
            machine_oee=machine_oee,
            estimated_revenue=MetricsCalculator.calculate_revenue(blocks, settings.unit_price),
            work_days=work_days,
            has_manual_edits=False,
            last_calculated_at=now,
        )

        logger.debug(
            f"Metrics: OEE {metrics.total_oee}% over {work_days} day(s), "
            f"{metrics.total_blocks} blocks on {metrics.machines_used} machine(s)"
        )
        return metrics


def calculate_schedule_metrics(
    blocks: Sequence[ProductionBlock],
    machines: Sequence[Machine],
    settings: Optional[SchedulingSettings] = None,
    now: Optional[datetime] = None,
) -> ScheduleMetrics:
    """Metrics right after generation (no manual edits)"""
    return MetricsCalculator.calculate_all_metrics(blocks, machines, settings, now)


def recalculate_metrics_after_edit(
    blocks: Sequence[ProductionBlock],
    machines: Sequence[Machine],
    settings: Optional[SchedulingSettings] = None,
    now: Optional[datetime] = None,
) -> ScheduleMetrics:
    """Metrics after a block was moved by hand; only regeneration clears the flag"""
    metrics = MetricsCalculator.calculate_all_metrics(blocks, machines, settings, now)
    metrics.has_manual_edits = True
    return metrics


def blocks_to_dataframe(blocks: Sequence[ProductionBlock]) -> pd.DataFrame:
    """
    Tabular view of blocks, sorted by machine and start time

    Returns:
        DataFrame with one row per block and a ``duration_minutes`` column
    """
    columns = [
        "id",
        "machine_id",
        "product_id",
        "customer_id",
        "order_id",
        "source",
        "batch_size",
        "start_time",
        "end_time",
        "duration_minutes",
        "setup_time_minutes",
        "estimated_cost",
    ]
    rows: List[Dict] = []
    for block in blocks:
        rows.append(
            {
                "id": block.id,
                "machine_id": block.machine_id,
                "product_id": block.product_id,
                "customer_id": block.customer_id,
                "order_id": block.order_id,
                "source": block.source.value if block.source else None,
                "batch_size": block.batch_size,
                "start_time": block.start_time,
                "end_time": block.end_time,
                "duration_minutes": block.duration_minutes(),
                "setup_time_minutes": block.setup_time_minutes,
                "estimated_cost": block.estimated_cost,
            }
        )

    df = pd.DataFrame(rows, columns=columns)
    if df.empty:
        return df
    return df.sort_values(["machine_id", "start_time"]).reset_index(drop=True)


def machine_utilization_frame(
    metrics: ScheduleMetrics, machines: Sequence[Machine]
) -> pd.DataFrame:
    """
    Per-machine OEE table, highest first

    Returns:
        DataFrame with machine_id, code, name, oee columns
    """
    rows = [
        {
            "machine_id": machine.id,
            "code": machine.code,
            "name": machine.name,
            "oee": metrics.machine_oee.get(machine.id, 0.0),
        }
        for machine in machines
    ]
    df = pd.DataFrame(rows, columns=["machine_id", "code", "name", "oee"])
    return df.sort_values("oee", ascending=False, kind="stable").reset_index(drop=True)

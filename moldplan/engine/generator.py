"""
Schedule Generator

Central coordinator of a generation run:
1. Builds the demand stream from confirmed orders and reliable predictions
2. Orders it by date, then priority (Earliest Due Date)
3. Assigns each item to the compatible machine that frees up first
4. Splits the run into work-day blocks and advances that machine's cursor

This is a greedy heuristic: no backtracking and no rebalancing once a machine
has been chosen. Items that cannot be scheduled are skipped and reported as
diagnostics; they never abort the run.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from moldplan.core.enums import DemandSource, DiagnosticReason
from moldplan.core.models import (
    DemandItem,
    Machine,
    Order,
    PredictedOrder,
    Product,
    ProductionBlock,
    ProductionRun,
    SchedulingSettings,
)
from moldplan.engine.block_splitter import create_multi_day_blocks
from moldplan.engine.compatibility import get_compatible_machines
from moldplan.engine.production_time import calculate_production_time
from moldplan.engine.work_hours import WorkHoursClock
from moldplan.utils.logging_config import get_logger

logger = get_logger("generator")


@dataclass(frozen=True)
class ScheduleDiagnostic:
    """A demand item the generator had to skip"""

    demand_id: str
    product_id: str
    reason: DiagnosticReason
    message: str


@dataclass
class ScheduleResult:
    """
    Output of one generation run

    Attributes:
        blocks: All generated blocks, in generation order
        runs: Blocks grouped per scheduled demand item
        diagnostics: Skipped demand items
    """

    blocks: List[ProductionBlock] = field(default_factory=list)
    runs: List[ProductionRun] = field(default_factory=list)
    diagnostics: List[ScheduleDiagnostic] = field(default_factory=list)

    def __iter__(self):
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    def blocks_by_machine(self) -> Dict[str, List[ProductionBlock]]:
        grouped: Dict[str, List[ProductionBlock]] = {}
        for block in sorted(self.blocks, key=lambda b: b.start_time):
            grouped.setdefault(block.machine_id, []).append(block)
        return grouped


def build_demand_stream(
    orders: Sequence[Order],
    predicted_orders: Sequence[PredictedOrder],
    reliability_threshold: float,
) -> List[DemandItem]:
    """
    Confirmed orders plus reliable predictions, sorted for scheduling

    Sorted by date ascending, ties broken by priority ascending (1 first).
    The sort is stable, so remaining ties keep input order with confirmed
    orders ahead of predictions.
    """
    demand = [DemandItem.from_order(order) for order in orders]
    demand.extend(
        DemandItem.from_prediction(prediction)
        for prediction in predicted_orders
        if prediction.is_reliable(reliability_threshold)
    )
    demand.sort(key=lambda item: (item.date, item.priority))
    return demand


class ScheduleGenerator:
    """
    Greedy multi-day production scheduler

    Machines are assumed idle from ``now`` (moved into work hours). Among the
    compatible machines the one with the earliest availability wins; on
    equal availability the first machine in input order is kept.
    """

    def __init__(
        self,
        settings: Optional[SchedulingSettings] = None,
        clock: Optional[WorkHoursClock] = None,
        now: Optional[datetime] = None,
    ):
        """
        Initialize generator

        Args:
            settings: Settings snapshot. Defaults apply if None.
            clock: Work-hours clock. Built from settings if None.
            now: Start of the planning horizon. Current time if None.

        Raises:
            SchedulingConfigError: if the settings describe an empty work day
        """
        self.settings = settings or SchedulingSettings()
        self.clock = clock or WorkHoursClock.from_settings(self.settings)
        self.now = now

    def generate(
        self,
        orders: Sequence[Order],
        predicted_orders: Sequence[PredictedOrder],
        machines: Sequence[Machine],
        products: Sequence[Product],
    ) -> ScheduleResult:
        """
        Generate production blocks for all schedulable demand

        Args:
            orders: Confirmed orders to schedule
            predicted_orders: Predictions; only reliable ones are scheduled
            machines: Machine pool; non-available machines are ignored
            products: Product catalog

        Returns:
            ScheduleResult with blocks, runs and diagnostics
        """
        now = (self.now or datetime.now()).replace(second=0, microsecond=0)
        result = ScheduleResult()

        available = [m for m in machines if m.is_available()]
        products_by_id = {p.id: p for p in products}
        demand = build_demand_stream(orders, predicted_orders, self.settings.reliability_threshold)

        logger.info(
            f"Generating schedule: {len(demand)} demand items, "
            f"{len(available)}/{len(machines)} machines available"
        )

        # Availability cursor per machine
        machine_end_times: Dict[str, datetime] = {
            m.id: self.clock.adjust_to_work_hours(now) for m in available
        }

        for item in demand:
            if item.quantity <= 0:
                self._skip(
                    result,
                    item,
                    DiagnosticReason.ZERO_QUANTITY,
                    f"Nothing to produce for {item.source.value} order {item.id}",
                )
                continue

            product = products_by_id.get(item.product_id)
            if product is None:
                self._skip(
                    result,
                    item,
                    DiagnosticReason.PRODUCT_NOT_FOUND,
                    f"Product {item.product_id} not found for {item.source.value} order {item.id}",
                )
                continue

            candidates = get_compatible_machines(product, available)
            if not candidates:
                self._skip(
                    result,
                    item,
                    DiagnosticReason.NO_COMPATIBLE_MACHINE,
                    f"No compatible machine for product {product.name or product.id} "
                    f"({item.source.value} order {item.id})",
                )
                continue

            machine = self._select_machine(candidates, machine_end_times)
            run = self._schedule_item(item, product, machine, machine_end_times[machine.id])

            result.runs.append(run)
            result.blocks.extend(run.blocks)
            machine_end_times[machine.id] = run.end_time

            logger.debug(
                f"{item.source.value} order {item.id} → Machine {machine.code or machine.id} "
                f"[{run.start_time.strftime('%Y-%m-%d %H:%M')} - "
                f"{run.end_time.strftime('%Y-%m-%d %H:%M')}] in {len(run.blocks)} block(s)"
            )

        logger.info(
            f"Schedule generated: {len(result.blocks)} blocks for {len(result.runs)} orders, "
            f"{len(result.diagnostics)} skipped"
        )
        return result

    def _select_machine(
        self, candidates: Sequence[Machine], machine_end_times: Dict[str, datetime]
    ) -> Machine:
        """Earliest cursor wins; strict comparison keeps the first on ties"""
        selected = candidates[0]
        earliest = machine_end_times[selected.id]
        for machine in candidates:
            if machine_end_times[machine.id] < earliest:
                earliest = machine_end_times[machine.id]
                selected = machine
        return selected

    def _schedule_item(
        self, item: DemandItem, product: Product, machine: Machine, cursor: datetime
    ) -> ProductionRun:
        setup_minutes = self.settings.setup_time_minutes
        production_time = calculate_production_time(
            quantity=item.quantity,
            cycle_time=product.cycle_time,
            cavity_count=product.cavity_count,
            setup_minutes=setup_minutes,
        )

        blocks = create_multi_day_blocks(
            total_minutes=production_time.total_minutes,
            start_time=self.clock.adjust_to_work_hours(cursor),
            machine=machine,
            product=product,
            customer_id=item.customer_id,
            batch_size=item.quantity,
            setup_minutes=setup_minutes,
            clock=self.clock,
            settings=self.settings,
            order_id=item.id,
            source=item.source,
        )

        return ProductionRun(
            demand_id=item.id,
            source=item.source,
            machine_id=machine.id,
            product_id=product.id,
            customer_id=item.customer_id,
            total_quantity=item.quantity,
            blocks=blocks,
        )

    def _skip(
        self, result: ScheduleResult, item: DemandItem, reason: DiagnosticReason, message: str
    ) -> None:
        logger.warning(message)
        result.diagnostics.append(
            ScheduleDiagnostic(
                demand_id=item.id,
                product_id=item.product_id,
                reason=reason,
                message=message,
            )
        )


def generate_schedule(
    orders: Sequence[Order],
    predicted_orders: Sequence[PredictedOrder],
    machines: Sequence[Machine],
    products: Sequence[Product],
    settings: Optional[SchedulingSettings] = None,
    now: Optional[datetime] = None,
) -> ScheduleResult:
    """
    Generate a production schedule for one snapshot

    Raises:
        SchedulingConfigError: if ``settings.work_hours_per_day`` is not positive
    """
    generator = ScheduleGenerator(settings=settings, now=now)
    return generator.generate(orders, predicted_orders, machines, products)

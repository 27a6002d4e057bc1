"""
Schedule Service

Coordinates the engine with storage:
- regenerate: full replan from the current snapshot
- move_block: manual edit of one block, metrics flagged as edited
- sync_order_statuses: recompute and persist order statuses
"""

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

from moldplan.constants import SCHEDULABLE_ORDER_STATUSES
from moldplan.core.enums import DemandSource, MachineStatus, OrderStatus
from moldplan.core.models import ProductionBlock, ScheduleMetrics, to_datetime
from moldplan.engine.generator import ScheduleDiagnostic, ScheduleGenerator
from moldplan.engine.order_status import calculate_demand_statuses
from moldplan.evaluation.metrics import calculate_schedule_metrics, recalculate_metrics_after_edit
from moldplan.storage.repository import ScheduleRepository
from moldplan.utils.logging_config import get_logger

logger = get_logger("service")


@dataclass
class RegenerationReport:
    """
    Outcome of a full regeneration

    Attributes:
        blocks_created: Number of blocks written
        orders_scheduled: Demand items that got a run
        metrics: Metrics of the new schedule
        statuses: Recomputed status per order / reliable prediction
        diagnostics: Demand items that were skipped
    """

    blocks_created: int
    orders_scheduled: int
    metrics: ScheduleMetrics
    statuses: Dict[str, OrderStatus] = field(default_factory=dict)
    diagnostics: List[ScheduleDiagnostic] = field(default_factory=list)


class ScheduleService:
    """Runs engine operations against a repository"""

    def __init__(
        self,
        repository: ScheduleRepository,
        now_provider: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize service

        Args:
            repository: Storage backend
            now_provider: Clock used for generation and status. datetime.now if None.
        """
        self.repository = repository
        self.now_provider = now_provider or datetime.now

    def regenerate(self) -> RegenerationReport:
        """
        Replace the whole schedule with a freshly generated one

        Only pending and scheduled orders are planned. In-production,
        completed and cancelled orders are left out of the new plan.

        Raises:
            SchedulingConfigError: if the stored settings describe an empty work day
        """
        now = self.now_provider()
        settings = self.repository.get_settings()

        orders = self.repository.list_orders(
            statuses=[OrderStatus(s) for s in SCHEDULABLE_ORDER_STATUSES]
        )
        predicted_orders = self.repository.list_predicted_orders()
        machines = self.repository.list_machines(status=MachineStatus.AVAILABLE)
        products = self.repository.list_products()

        logger.info(
            f"Regenerating schedule: {len(orders)} orders, {len(predicted_orders)} predictions, "
            f"{len(machines)} machines"
        )

        generator = ScheduleGenerator(settings=settings, now=now)
        result = generator.generate(orders, predicted_orders, machines, products)

        self.repository.replace_blocks(result.blocks)

        metrics = calculate_schedule_metrics(result.blocks, machines, settings, now)
        self.repository.save_metrics(metrics)

        statuses = self.sync_order_statuses()

        return RegenerationReport(
            blocks_created=len(result.blocks),
            orders_scheduled=len(result.runs),
            metrics=metrics,
            statuses=statuses,
            diagnostics=list(result.diagnostics),
        )

    def move_block(
        self,
        block_id: str,
        start_time,
        end_time,
        machine_id: Optional[str] = None,
    ) -> ProductionBlock:
        """
        Move a block by hand

        The edit is not checked against overlaps or work hours; the planner
        owns it. Metrics are recalculated and flagged as manually edited.

        Args:
            block_id: Block to move
            start_time: New start (datetime or ISO string)
            end_time: New end (datetime or ISO string)
            machine_id: New machine, unchanged if None

        Returns:
            The updated block

        Raises:
            RecordNotFoundError: if the block does not exist
            ValueError: if end_time is not after start_time
        """
        block = self.repository.get_block(block_id)
        start, end = to_datetime(start_time), to_datetime(end_time)
        if end <= start:
            raise ValueError("Block end time must be after start time")

        moved = dataclasses.replace(
            block,
            start_time=start,
            end_time=end,
            machine_id=machine_id or block.machine_id,
        )
        self.repository.update_block(moved)
        logger.info(
            f"Block {block_id} moved to machine {moved.machine_id} "
            f"[{start.strftime('%Y-%m-%d %H:%M')} - {end.strftime('%Y-%m-%d %H:%M')}]"
        )

        settings = self.repository.get_settings()
        machines = self.repository.list_machines(status=MachineStatus.AVAILABLE)
        metrics = recalculate_metrics_after_edit(
            self.repository.list_blocks(), machines, settings, self.now_provider()
        )
        self.repository.save_metrics(metrics)

        self.sync_order_statuses()
        return moved

    def sync_order_statuses(self) -> Dict[str, OrderStatus]:
        """
        Recompute the status of every order and reliable prediction

        Order and prediction statuses are written separately, so a shared id
        does not mix them up.

        Returns:
            Map of id to status, predictions included (an order wins a shared id)
        """
        settings = self.repository.get_settings()
        keyed = calculate_demand_statuses(
            self.repository.list_orders(),
            self.repository.list_predicted_orders(),
            self.repository.list_blocks(),
            now=self.now_provider(),
            reliability_threshold=settings.reliability_threshold,
        )
        order_statuses = {
            item_id: status for (source, item_id), status in keyed.items() if source == DemandSource.CONFIRMED
        }
        predicted_statuses = {
            item_id: status for (source, item_id), status in keyed.items() if source == DemandSource.PREDICTED
        }
        self.repository.update_order_statuses(order_statuses)
        self.repository.update_predicted_statuses(predicted_statuses)
        logger.debug(
            f"Synced {len(order_statuses)} order and {len(predicted_statuses)} prediction statuses"
        )
        return {**predicted_statuses, **order_statuses}

"""
Block splitter

Cuts a production run into contiguous per-day blocks that never cross the
end of the work window.

Example: a 48-hour run with a 16-hour work day (06:00-22:00) becomes
- Block 1: Day 1, 06:00-22:00 (16 hours)
- Block 2: Day 2, 06:00-22:00 (16 hours)
- Block 3: Day 3, 06:00-22:00 (16 hours)

Only the first block carries the batch size, setup minutes and estimated
cost. Continuation blocks carry zero so quantity sums are not double counted.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from moldplan.constants import FLOAT_TOLERANCE, MAX_BLOCKS_PER_RUN
from moldplan.core.enums import DemandSource
from moldplan.core.models import Machine, Product, ProductionBlock, SchedulingSettings
from moldplan.engine.production_time import calculate_estimated_cost
from moldplan.engine.work_hours import WorkHoursClock
from moldplan.exceptions import SchedulingConfigError, SchedulingError


def create_multi_day_blocks(
    total_minutes: float,
    start_time: datetime,
    machine: Machine,
    product: Product,
    customer_id: str,
    batch_size: int,
    setup_minutes: float,
    clock: WorkHoursClock,
    settings: Optional[SchedulingSettings] = None,
    order_id: Optional[str] = None,
    source: Optional[DemandSource] = None,
    max_blocks: int = MAX_BLOCKS_PER_RUN,
) -> List[ProductionBlock]:
    """
    Split a production run into work-day sized blocks

    Args:
        total_minutes: Production + setup minutes of the run
        start_time: Earliest start; moved into work hours before use
        machine: Machine the run is assigned to
        product: Product being molded
        customer_id: Customer the run is for
        batch_size: Full quantity of the run (first block only)
        setup_minutes: Setup minutes (first block only)
        clock: Work-hours clock
        settings: Settings used for the cost estimate
        order_id: Demand item the run fulfils
        source: Demand source of that item
        max_blocks: Upper bound on blocks for one run

    Returns:
        Contiguous blocks in time order

    Raises:
        SchedulingError: if the run would need more than ``max_blocks`` blocks
    """
    if total_minutes <= 0:
        raise ValueError("Total minutes must be positive")

    blocks: List[ProductionBlock] = []
    remaining_minutes = float(total_minutes)
    current_start = start_time

    while remaining_minutes > FLOAT_TOLERANCE:
        if len(blocks) >= max_blocks:
            raise SchedulingError(
                f"Run for order {order_id} on machine {machine.id} needs more than "
                f"{max_blocks} blocks ({total_minutes} minutes)"
            )

        current_start = clock.adjust_to_work_hours(current_start)
        minutes_until_day_end = clock.minutes_until_day_end(current_start)
        if minutes_until_day_end <= 0:
            raise SchedulingConfigError(f"No work time left after {current_start} with {clock!r}")

        block_minutes = min(remaining_minutes, minutes_until_day_end)
        block_end = current_start + timedelta(minutes=block_minutes)

        is_first_block = not blocks
        blocks.append(
            ProductionBlock(
                machine_id=machine.id,
                product_id=product.id,
                customer_id=customer_id,
                batch_size=batch_size if is_first_block else 0,
                start_time=current_start,
                end_time=block_end,
                setup_time_minutes=setup_minutes if is_first_block else 0,
                estimated_cost=(
                    calculate_estimated_cost(batch_size, product, machine, settings)
                    if is_first_block
                    else 0.0
                ),
                order_id=order_id,
                source=source,
            )
        )

        remaining_minutes -= block_minutes
        # Ending exactly at the window close rolls to the next day on the next pass
        current_start = block_end

    return blocks

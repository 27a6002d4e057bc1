"""
Order status derivation

Status of an order (or reliable prediction) is recomputed from scratch by
comparing its cumulative demand with the production coverage of its product:

- pending: no block for the product, or planned production does not cover it
- scheduled: planned production covers the cumulative demand
- in_production: a block is running now and finished + running production covers it
- completed: finished production covers it
- cancelled: manual state, kept as is and left out of everyone's demand

Cumulative demand follows a FIFO model: all demand for a product sorted by
date, summed up to and including the item. Earlier-dated demand is assumed
to be fulfilled first, as if each product had a single production queue.
"""

from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from moldplan.constants import RELIABILITY_THRESHOLD
from moldplan.core.enums import DemandSource, OrderStatus
from moldplan.core.models import DemandItem, Order, PredictedOrder, ProductionBlock
from moldplan.utils.logging_config import get_logger

logger = get_logger("order_status")


def cumulative_demand(item: DemandItem, product_demand: Sequence[DemandItem]) -> int:
    """Quantity of all non-cancelled demand up to and including ``item``"""
    total = 0
    for other in sorted(product_demand, key=lambda d: d.date):
        if not other.is_cancelled():
            total += other.quantity
        if other.id == item.id and other.source == item.source:
            break
    return total


def calculate_order_status(
    item: DemandItem,
    product_demand: Sequence[DemandItem],
    product_blocks: Sequence[ProductionBlock],
    now: Optional[datetime] = None,
) -> OrderStatus:
    """
    Derive the status of one demand item

    Args:
        item: The order or prediction
        product_demand: All demand for the same product (including ``item``)
        product_blocks: All blocks for the same product
        now: Reference time. Current time if None.

    Returns:
        Calculated status
    """
    if item.is_cancelled():
        return OrderStatus.CANCELLED

    if not product_blocks:
        return OrderStatus.PENDING

    now = now or datetime.now()
    needed = cumulative_demand(item, product_demand)

    completed = 0
    in_progress = 0
    scheduled = 0
    has_active_block = False

    for block in product_blocks:
        if block.end_time < now:
            completed += block.batch_size
        elif block.start_time <= now <= block.end_time:
            in_progress += block.batch_size
            has_active_block = True
        elif block.start_time > now:
            scheduled += block.batch_size

    if completed >= needed:
        return OrderStatus.COMPLETED
    if has_active_block and completed + in_progress >= needed:
        return OrderStatus.IN_PRODUCTION
    if completed + in_progress + scheduled >= needed:
        return OrderStatus.SCHEDULED
    return OrderStatus.PENDING


def calculate_demand_statuses(
    orders: Sequence[Order],
    predicted_orders: Sequence[PredictedOrder],
    production_blocks: Sequence[ProductionBlock],
    now: Optional[datetime] = None,
    reliability_threshold: float = RELIABILITY_THRESHOLD,
) -> Dict[Tuple[DemandSource, str], OrderStatus]:
    """
    Status of every order and reliable prediction, keyed by (source, id)

    Orders and predictions live in separate tables, so an order and a
    prediction may share an id; this map keeps both.

    Args:
        orders: All confirmed orders
        predicted_orders: All predictions
        production_blocks: All production blocks
        now: Reference time. Current time if None.
        reliability_threshold: Minimum confidence of a reliable prediction

    Returns:
        Map of (source, id) to status
    """
    now = now or datetime.now()

    demand: List[DemandItem] = [DemandItem.from_order(order) for order in orders]
    demand.extend(
        DemandItem.from_prediction(p) for p in predicted_orders if p.is_reliable(reliability_threshold)
    )

    demand_by_product: Dict[str, List[DemandItem]] = defaultdict(list)
    for item in demand:
        demand_by_product[item.product_id].append(item)

    blocks_by_product: Dict[str, List[ProductionBlock]] = defaultdict(list)
    for block in production_blocks:
        blocks_by_product[block.product_id].append(block)

    statuses: Dict[Tuple[DemandSource, str], OrderStatus] = {}
    for product_id, product_demand in demand_by_product.items():
        product_blocks = blocks_by_product.get(product_id, [])
        for item in product_demand:
            statuses[(item.source, item.id)] = calculate_order_status(
                item, product_demand, product_blocks, now
            )

    return statuses


def calculate_all_order_statuses(
    orders: Sequence[Order],
    predicted_orders: Sequence[PredictedOrder],
    production_blocks: Sequence[ProductionBlock],
    now: Optional[datetime] = None,
    reliability_threshold: float = RELIABILITY_THRESHOLD,
) -> Dict[str, OrderStatus]:
    """
    Status of every order and reliable prediction, keyed by id

    Unreliable predictions are display-only and get no entry. When an order
    and a prediction share an id the order's status is kept; use
    ``calculate_demand_statuses`` to get both.

    Returns:
        Map of order / prediction id to status
    """
    keyed = calculate_demand_statuses(
        orders, predicted_orders, production_blocks, now, reliability_threshold
    )

    statuses: Dict[str, OrderStatus] = {}
    for (source, item_id), status in keyed.items():
        if source == DemandSource.PREDICTED and (DemandSource.CONFIRMED, item_id) in keyed:
            logger.warning(f"Prediction {item_id} shares its id with an order; order status kept")
            continue
        statuses[item_id] = status

    return statuses

"""Scheduling engine: compatibility, timing, splitting, generation, status"""

from moldplan.engine.generator import ScheduleGenerator, ScheduleResult, generate_schedule
from moldplan.engine.order_status import calculate_all_order_statuses, calculate_demand_statuses

__all__ = [
    "ScheduleGenerator",
    "ScheduleResult",
    "generate_schedule",
    "calculate_all_order_statuses",
    "calculate_demand_statuses",
]

"""
MOLDPLAN - Injection Molding Production Planner

Scheduling engine for an injection-molding planning dashboard.

This package implements:
- Greedy multi-day scheduling of confirmed and predicted orders onto machines
- Work-hours aware splitting of production runs into per-day blocks
- OEE / utilization metrics over a generated schedule
- FIFO-coverage order status derivation
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Version information
VERSION = __version__

from moldplan.engine.generator import ScheduleResult, generate_schedule
from moldplan.engine.order_status import calculate_all_order_statuses
from moldplan.evaluation.metrics import calculate_schedule_metrics

__all__ = [
    "VERSION",
    "__version__",
    "ScheduleResult",
    "calculate_all_order_statuses",
    "calculate_schedule_metrics",
    "generate_schedule",
]

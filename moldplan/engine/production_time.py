"""
Production time, setup time and cost estimates

Mathematical formulations:

1. Shots: n = ceil(q / c) where q = quantity, c = cavity count
2. Production minutes: P = n * t / 60 where t = cycle time (seconds)
3. Total minutes: T = round(P + S) where S = setup minutes

T is rounded once, half up, and that integer feeds the block splitter.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import math

from moldplan.constants import (
    BASE_SETUP_MINUTES,
    DEFAULT_SETUP_TIME_MINUTES,
    MINUTES_PER_HOUR,
    QUALITY_CHECK_MINUTES,
    SECONDS_PER_HOUR,
)
from moldplan.core.models import Machine, Product, SchedulingSettings


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round with .5 going up, unlike Python's banker's rounding"""
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


@dataclass(frozen=True)
class ProductionTime:
    """Time needed to produce one batch"""

    shots: int
    production_minutes: float
    setup_minutes: float
    total_minutes: int
    total_hours: float


@dataclass
class SetupTime:
    """Setup time for one run with its breakdown"""

    total_minutes: float
    total_hours: float
    breakdown: List[Dict[str, float]] = field(default_factory=list)


def calculate_production_time(
    quantity: int,
    cycle_time: float,
    cavity_count: int = 1,
    setup_minutes: float = DEFAULT_SETUP_TIME_MINUTES,
) -> ProductionTime:
    """
    Calculate production time for a batch

    Args:
        quantity: Batch size (units)
        cycle_time: Seconds per molding cycle
        cavity_count: Units per cycle
        setup_minutes: Setup time added before production

    Returns:
        ProductionTime breakdown; ``production_minutes`` is reported rounded,
        ``total_minutes`` is rounded from the unrounded sum
    """
    if quantity <= 0:
        raise ValueError("Quantity must be positive")
    if cycle_time <= 0:
        raise ValueError("Cycle time must be positive")
    if cavity_count < 1:
        raise ValueError("Cavity count must be at least 1")
    if setup_minutes < 0:
        raise ValueError("Setup time cannot be negative")

    shots = math.ceil(quantity / cavity_count)
    production_minutes = shots * cycle_time / MINUTES_PER_HOUR
    total_minutes = production_minutes + setup_minutes

    return ProductionTime(
        shots=shots,
        production_minutes=round_half_up(production_minutes),
        setup_minutes=setup_minutes,
        total_minutes=int(round_half_up(total_minutes)),
        total_hours=round_half_up(total_minutes / MINUTES_PER_HOUR, 2),
    )


def calculate_setup_time(
    product: Product,
    machine: Machine,
    previous_product: Optional[Product] = None,
    default_setup_minutes: float = DEFAULT_SETUP_TIME_MINUTES,
) -> SetupTime:
    """
    Setup time for running ``product`` on ``machine``

    Uses a constant setup time; material or temperature changeovers from
    ``previous_product`` are not modelled.
    """
    breakdown = [
        {"type": "base_setup", "minutes": BASE_SETUP_MINUTES},
        {"type": "quality_check", "minutes": QUALITY_CHECK_MINUTES},
    ]
    return SetupTime(
        total_minutes=default_setup_minutes,
        total_hours=round_half_up(default_setup_minutes / MINUTES_PER_HOUR, 2),
        breakdown=breakdown,
    )


def calculate_estimated_cost(
    quantity: int,
    product: Product,
    machine: Machine,
    settings: Optional[SchedulingSettings] = None,
) -> float:
    """
    Estimated material + labor cost of a batch

    material = weight_per_unit (g) * cost_per_kg * quantity / 1000
    labor    = quantity / cavity_count * cycle_time / 3600 * hourly_rate

    Missing weight counts as 0; missing material price and machine rate fall
    back to the settings defaults.
    """
    settings = settings or SchedulingSettings()

    weight = product.weight_per_unit or 0
    cost_per_kg = settings.default_material_cost_per_kg
    if product.material is not None and product.material.cost_per_kg is not None:
        cost_per_kg = product.material.cost_per_kg
    material_cost = weight * cost_per_kg * quantity / 1000

    hourly_rate = machine.hourly_rate if machine.hourly_rate is not None else settings.default_hourly_rate
    production_hours = (quantity / product.cavity_count) * product.cycle_time / SECONDS_PER_HOUR
    labor_cost = production_hours * hourly_rate

    return round_half_up(material_cost + labor_cost, 2)

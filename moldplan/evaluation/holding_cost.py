"""
Holding cost of finished goods

Linear storage cost plus the capital tied up in inventory while goods wait
for delivery.
"""

from typing import Dict

from moldplan.constants import DEFAULT_INTEREST_RATE, DEFAULT_STORAGE_COST_PER_DAY
from moldplan.engine.production_time import round_half_up


def calculate_storage_cost(
    quantity: int,
    storage_cost_per_day: float = DEFAULT_STORAGE_COST_PER_DAY,
    days_in_storage: float = 0,
) -> Dict[str, float]:
    """
    Storage cost for a batch

    Args:
        quantity: Number of units
        storage_cost_per_day: Cost per unit per day
        days_in_storage: Days until delivery

    Returns:
        Dictionary with total_cost and cost_per_unit
    """
    if quantity <= 0:
        raise ValueError("Quantity must be positive")

    total_cost = quantity * storage_cost_per_day * days_in_storage
    return {
        "quantity": quantity,
        "storage_cost_per_day": storage_cost_per_day,
        "days_in_storage": days_in_storage,
        "total_cost": round_half_up(total_cost, 2),
        "cost_per_unit": round_half_up(total_cost / quantity, 2),
    }


def calculate_capital_cost(
    quantity: int,
    unit_cost: float,
    interest_rate: float = DEFAULT_INTEREST_RATE,
    days_in_storage: float = 0,
) -> Dict[str, float]:
    """
    Interest cost of capital tied up in stored goods

    Args:
        quantity: Number of units
        unit_cost: Cost per unit (material + production)
        interest_rate: Annual interest rate (decimal)
        days_in_storage: Days in storage
    """
    total_value = quantity * unit_cost
    daily_rate = interest_rate / 365
    return {
        "total_value": round_half_up(total_value, 2),
        "capital_cost": round_half_up(total_value * daily_rate * days_in_storage, 2),
        "daily_interest_cost": round_half_up(total_value * daily_rate, 2),
    }


def calculate_total_holding_cost(
    quantity: int,
    unit_cost: float,
    days_in_storage: float,
    storage_cost_per_day: float = DEFAULT_STORAGE_COST_PER_DAY,
    interest_rate: float = DEFAULT_INTEREST_RATE,
) -> Dict[str, float]:
    """Storage plus capital cost"""
    storage = calculate_storage_cost(quantity, storage_cost_per_day, days_in_storage)
    capital = calculate_capital_cost(quantity, unit_cost, interest_rate, days_in_storage)
    return {
        "storage_cost": storage["total_cost"],
        "capital_cost": capital["capital_cost"],
        "total_cost": round_half_up(storage["total_cost"] + capital["capital_cost"], 2),
        "days_in_storage": days_in_storage,
    }

"""Shared test fixtures for MOLDPLAN tests."""

import pytest
from datetime import datetime

from moldplan.core.models import (
    Machine,
    Material,
    Order,
    PredictedOrder,
    Product,
    SchedulingSettings,
)
from moldplan.engine.work_hours import WorkHoursClock


@pytest.fixture
def now():
    """Monday 2024-01-08, the moment the work window opens."""
    return datetime(2024, 1, 8, 6, 0)


@pytest.fixture
def settings():
    return SchedulingSettings()


@pytest.fixture
def clock():
    return WorkHoursClock()


@pytest.fixture
def material():
    return Material(id="PP", name="Polypropylene", cost_per_kg=2.0)


@pytest.fixture
def machine():
    return Machine(
        id="M1",
        code="IM-01",
        name="Injection Molder 1",
        max_pressure=2000,
        max_temperature=300,
        hourly_rate=120.0,
    )


@pytest.fixture
def machines(machine):
    """Two identical machines, M1 first."""
    return [
        machine,
        Machine(
            id="M2",
            code="IM-02",
            name="Injection Molder 2",
            max_pressure=2000,
            max_temperature=300,
            hourly_rate=120.0,
        ),
    ]


@pytest.fixture
def product(material):
    """20 s cycle, single cavity."""
    return Product(
        id="P1",
        name="Cap",
        sku="SKU-1",
        cycle_time=20,
        cavity_count=1,
        required_pressure=1500,
        required_temperature=240,
        weight_per_unit=10.0,
        material=material,
    )


@pytest.fixture
def large_order():
    """10000 units: 3378 minutes with default setup."""
    return Order(
        id="O1",
        customer_id="C1",
        product_id="P1",
        quantity=10000,
        due_date=datetime(2024, 1, 15),
        priority=5,
    )


@pytest.fixture
def small_orders():
    """Three orders for P1 of 360 units each (165 minutes with setup)."""
    return [
        Order(
            id=f"O{i}",
            customer_id="C1",
            product_id="P1",
            quantity=360,
            due_date=datetime(2024, 1, 10 + i),
        )
        for i in range(1, 4)
    ]


@pytest.fixture
def make_prediction():
    def _make(confidence, quantity=360, prediction_id="F1", date=datetime(2024, 2, 1)):
        return PredictedOrder(
            id=prediction_id,
            customer_id="C1",
            product_id="P1",
            predicted_quantity=quantity,
            predicted_date=date,
            confidence_score=confidence,
            basis="monthly_pattern",
        )

    return _make

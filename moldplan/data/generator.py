"""
Demo Data Generator for MOLDPLAN

Generates a reproducible planning snapshot for demos and manual testing:
- Material catalog with prices per kg
- Injection molding machines with pressure / temperature limits
- Product catalog with cycle parameters
- Confirmed order book
- Pre-seeded predicted orders with confidence scores

Predictions are drawn at random around each product's order pattern; they are
demo inputs, not forecasts.
"""

from datetime import datetime, timedelta
from typing import List, Optional
import numpy as np

from moldplan.constants import DEFAULT_RANDOM_SEED, PRIORITY_HIGHEST, PRIORITY_LOWEST
from moldplan.core.enums import MachineStatus, OrderInterval
from moldplan.core.models import (
    Machine,
    Material,
    Order,
    PredictedOrder,
    Product,
    SchedulingSettings,
)
from moldplan.data.loader import Snapshot

MATERIALS = [
    ("PP", "Polypropylene", 2.1),
    ("ABS", "Acrylonitrile butadiene styrene", 3.4),
    ("PA6", "Polyamide 6", 4.2),
    ("PC", "Polycarbonate", 5.0),
]


class DemoDataGenerator:
    """
    Generates synthetic planning snapshots

    Attributes:
        random_seed: Random seed for reproducibility
        rng: NumPy random number generator
    """

    def __init__(self, random_seed: int = DEFAULT_RANDOM_SEED):
        """
        Initialize data generator

        Args:
            random_seed: Random seed for reproducibility
        """
        self.random_seed = random_seed
        self.rng = np.random.RandomState(random_seed)

    def generate_materials(self) -> List[Material]:
        return [Material(id=code, name=name, cost_per_kg=price) for code, name, price in MATERIALS]

    def generate_machines(self, n_machines: int = 5) -> List[Machine]:
        """
        Generate machine pool

        Machines:
        - Clamp force 80-450 tons, pressure limit scales with it
        - 10% of machines are in maintenance

        Args:
            n_machines: Number of machines to generate

        Returns:
            List of Machine objects
        """
        machines = []

        for i in range(n_machines):
            clamp_force = float(self.rng.randint(80, 451))
            max_pressure = round(1200 + clamp_force * self.rng.uniform(1.5, 2.5), -1)
            max_temperature = float(self.rng.choice([280, 300, 320, 350]))
            hourly_rate = round(float(self.rng.uniform(120, 220)), 0)
            status = MachineStatus.MAINTENANCE if self.rng.random() < 0.1 else MachineStatus.AVAILABLE

            machines.append(
                Machine(
                    id=f"M{i+1:02d}",
                    code=f"IM-{i+1:02d}",
                    name=f"Injection Molder {i+1}",
                    max_clamp_force=clamp_force,
                    max_pressure=max_pressure,
                    max_temperature=max_temperature,
                    hourly_rate=hourly_rate,
                    status=status,
                )
            )

        return machines

    def generate_products(
        self,
        n_products: int = 8,
        materials: Optional[List[Material]] = None,
        machines: Optional[List[Machine]] = None,
    ) -> List[Product]:
        """
        Generate product catalog

        Cycle times 12-60 s, 1-8 cavities, part weights 5-250 g. Roughly one in
        four products is locked to an explicit machine list.

        Args:
            n_products: Number of products to generate
            materials: Materials to choose from (generated if None)
            machines: Machines for explicit allow-lists (none if None)

        Returns:
            List of Product objects
        """
        materials = materials or self.generate_materials()
        products = []

        for i in range(n_products):
            material = materials[self.rng.randint(0, len(materials))]
            compatible: List[str] = []
            if machines and self.rng.random() < 0.25:
                size = max(1, len(machines) // 2)
                compatible = self.rng.choice([m.id for m in machines], size=size, replace=False).tolist()

            products.append(
                Product(
                    id=f"P{i+1:03d}",
                    name=f"Part {chr(65 + (i % 26))}{i//26 + 1}",
                    sku=f"SKU-{1000 + i}",
                    cycle_time=float(self.rng.randint(12, 61)),
                    cavity_count=int(self.rng.choice([1, 2, 4, 8])),
                    required_pressure=round(float(self.rng.uniform(900, 1900)), -1),
                    required_temperature=float(self.rng.choice([220, 240, 260, 290, 310])),
                    weight_per_unit=round(float(self.rng.uniform(5, 250)), 1),
                    material=material,
                    compatible_machines=compatible,
                )
            )

        return products

    def generate_orders(
        self,
        products: List[Product],
        n_orders: int = 20,
        start_date: Optional[datetime] = None,
        horizon_days: int = 30,
        n_customers: int = 4,
    ) -> List[Order]:
        """
        Generate confirmed order book

        Quantities are log-normal (median ~1500 units), due dates uniform over
        the horizon, priorities uniform 1-10.
        """
        start_date = start_date or datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
        orders = []

        for i in range(n_orders):
            product = products[self.rng.randint(0, len(products))]
            quantity = int(self.rng.lognormal(mean=7.3, sigma=0.6))
            quantity = max(100, min(20000, quantity))

            orders.append(
                Order(
                    id=f"O{i+1:04d}",
                    customer_id=f"C{self.rng.randint(1, n_customers + 1):02d}",
                    product_id=product.id,
                    quantity=quantity,
                    due_date=start_date + timedelta(days=int(self.rng.randint(1, horizon_days + 1))),
                    priority=int(self.rng.randint(PRIORITY_HIGHEST, PRIORITY_LOWEST + 1)),
                )
            )

        return orders

    def generate_predicted_orders(
        self,
        orders: List[Order],
        interval: OrderInterval = OrderInterval.MONTHLY,
    ) -> List[PredictedOrder]:
        """
        Seed one prediction per confirmed order, one interval later

        Confidence scores are uniform in [0.5, 0.98]; about half end up
        reliable with the default threshold.
        """
        predictions = []

        for i, order in enumerate(orders):
            drift = self.rng.normal(loc=1.0, scale=0.15)
            predictions.append(
                PredictedOrder(
                    id=f"F{i+1:04d}",
                    customer_id=order.customer_id,
                    product_id=order.product_id,
                    predicted_quantity=max(1, int(order.quantity * drift)),
                    predicted_date=order.due_date + timedelta(days=interval.days),
                    confidence_score=round(float(self.rng.uniform(0.5, 0.98)), 2),
                    basis=f"{interval.value}_pattern",
                )
            )

        return predictions

    def generate_snapshot(
        self,
        n_machines: int = 5,
        n_products: int = 8,
        n_orders: int = 20,
        start_date: Optional[datetime] = None,
        horizon_days: int = 30,
        settings: Optional[SchedulingSettings] = None,
    ) -> Snapshot:
        """
        Generate a complete snapshot

        Returns:
            Snapshot with machines, products, orders, predictions and settings
        """
        materials = self.generate_materials()
        machines = self.generate_machines(n_machines)
        products = self.generate_products(n_products, materials, machines)
        orders = self.generate_orders(products, n_orders, start_date, horizon_days)
        predictions = self.generate_predicted_orders(orders)

        return Snapshot(
            orders=orders,
            predicted_orders=predictions,
            machines=machines,
            products=products,
            settings=settings or SchedulingSettings(),
        )

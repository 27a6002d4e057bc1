"""
Data loading utilities for MOLDPLAN

Parses storage rows (dicts with ISO dates, products optionally carrying a
nested material row) into domain models, and loads complete snapshots from
JSON files.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from moldplan.core.models import (
    Machine,
    Material,
    Order,
    PredictedOrder,
    Product,
    ProductionBlock,
    SchedulingSettings,
)


@dataclass
class Snapshot:
    """Everything a generation run needs, fully materialized"""

    orders: List[Order] = field(default_factory=list)
    predicted_orders: List[PredictedOrder] = field(default_factory=list)
    machines: List[Machine] = field(default_factory=list)
    products: List[Product] = field(default_factory=list)
    settings: SchedulingSettings = field(default_factory=SchedulingSettings)
    blocks: List[ProductionBlock] = field(default_factory=list)


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


class SnapshotLoader:
    """Loads scheduling snapshots from storage rows and files"""

    @staticmethod
    def parse_material(data: Optional[Dict[str, Any]]) -> Optional[Material]:
        if not data:
            return None
        return Material(
            id=str(data["id"]),
            name=data.get("name", ""),
            cost_per_kg=_optional_float(data.get("cost_per_kg")),
        )

    @staticmethod
    def parse_machine(data: Dict[str, Any]) -> Machine:
        return Machine(
            id=str(data["id"]),
            code=data.get("code") or "",
            name=data.get("name") or "",
            max_clamp_force=_optional_float(data.get("max_clamp_force")),
            max_pressure=_optional_float(data.get("max_pressure")),
            max_temperature=_optional_float(data.get("max_temperature")),
            hourly_rate=_optional_float(data.get("hourly_rate")),
            status=data.get("status") or "available",
        )

    @staticmethod
    def parse_product(data: Dict[str, Any]) -> Product:
        return Product(
            id=str(data["id"]),
            name=data.get("name") or "",
            sku=data.get("sku") or "",
            cycle_time=float(data.get("cycle_time") or 20),
            cavity_count=int(data.get("cavity_count") or 1),
            required_pressure=_optional_float(data.get("required_pressure")),
            required_temperature=_optional_float(data.get("required_temperature")),
            weight_per_unit=_optional_float(data.get("weight_per_unit")),
            material=SnapshotLoader.parse_material(data.get("material")),
            compatible_machines=[str(m) for m in data.get("compatible_machines") or []],
        )

    @staticmethod
    def parse_order(data: Dict[str, Any]) -> Order:
        return Order(
            id=str(data["id"]),
            customer_id=str(data["customer_id"]),
            product_id=str(data["product_id"]),
            quantity=int(data["quantity"]),
            due_date=data["due_date"],
            priority=int(data.get("priority") or 5),
            status=data.get("status") or "pending",
            notes=data.get("notes") or "",
        )

    @staticmethod
    def parse_predicted_order(data: Dict[str, Any]) -> PredictedOrder:
        return PredictedOrder(
            id=str(data["id"]),
            customer_id=str(data["customer_id"]),
            product_id=str(data["product_id"]),
            predicted_quantity=int(data["predicted_quantity"]),
            predicted_date=data["predicted_date"],
            confidence_score=float(data["confidence_score"]),
            basis=data.get("basis") or "",
        )

    @staticmethod
    def parse_block(data: Dict[str, Any]) -> ProductionBlock:
        return ProductionBlock(
            id=str(data.get("id") or ""),
            machine_id=str(data["machine_id"]),
            product_id=str(data["product_id"]),
            customer_id=str(data["customer_id"]),
            batch_size=int(data.get("batch_size") or 0),
            start_time=data["start_time"],
            end_time=data["end_time"],
            setup_time_minutes=float(data.get("setup_time_minutes") or 0),
            estimated_cost=float(data.get("estimated_cost") or 0),
            order_id=data.get("order_id"),
            source=data.get("source"),
        )

    @staticmethod
    def parse_settings(data: Optional[Dict[str, Any]]) -> SchedulingSettings:
        return SchedulingSettings.from_dict(data)

    @staticmethod
    def parse_snapshot(data: Dict[str, Any]) -> Snapshot:
        """
        Build a snapshot from a dictionary of row lists

        Args:
            data: Dictionary with orders, predicted_orders, machines,
                products, settings and (optionally) production_blocks

        Returns:
            Snapshot
        """

        def rows(key: str) -> Iterable[Dict[str, Any]]:
            return data.get(key) or []

        return Snapshot(
            orders=[SnapshotLoader.parse_order(row) for row in rows("orders")],
            predicted_orders=[
                SnapshotLoader.parse_predicted_order(row) for row in rows("predicted_orders")
            ],
            machines=[SnapshotLoader.parse_machine(row) for row in rows("machines")],
            products=[SnapshotLoader.parse_product(row) for row in rows("products")],
            settings=SnapshotLoader.parse_settings(data.get("settings")),
            blocks=[SnapshotLoader.parse_block(row) for row in rows("production_blocks")],
        )

    @staticmethod
    def load_snapshot(file_path: str) -> Snapshot:
        """Load a snapshot from a JSON file"""
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return SnapshotLoader.parse_snapshot(data)

"""
Storage contract for the scheduling engine

The engine itself is pure; the service layer reads a snapshot through a
``ScheduleRepository`` and writes back blocks, metrics and order statuses.
``InMemoryScheduleRepository`` keeps everything in dictionaries and is used
by the CLI script and the tests.
"""

import copy
from typing import Dict, Iterable, List, MutableMapping, Optional, Protocol, Sequence

from moldplan.core.enums import MachineStatus, OrderStatus
from moldplan.core.models import (
    Machine,
    Order,
    PredictedOrder,
    Product,
    ProductionBlock,
    ScheduleMetrics,
    SchedulingSettings,
)
from moldplan.exceptions import RecordNotFoundError


class ScheduleRepository(Protocol):
    """Everything the service layer needs from persistent storage"""

    def list_orders(self, statuses: Optional[Iterable[OrderStatus]] = None) -> List[Order]:
        ...

    def list_predicted_orders(self) -> List[PredictedOrder]:
        ...

    def list_machines(self, status: Optional[MachineStatus] = None) -> List[Machine]:
        ...

    def list_products(self) -> List[Product]:
        ...

    def get_settings(self) -> SchedulingSettings:
        ...

    def list_blocks(self) -> List[ProductionBlock]:
        ...

    def get_block(self, block_id: str) -> ProductionBlock:
        ...

    def replace_blocks(self, blocks: Sequence[ProductionBlock]) -> None:
        """Delete every block, then insert ``blocks``, as one unit"""
        ...

    def update_block(self, block: ProductionBlock) -> None:
        ...

    def save_metrics(self, metrics: ScheduleMetrics) -> None:
        ...

    def get_metrics(self) -> Optional[ScheduleMetrics]:
        ...

    def update_order_statuses(self, statuses: Dict[str, OrderStatus]) -> None:
        ...

    def update_predicted_statuses(self, statuses: Dict[str, OrderStatus]) -> None:
        ...


class InMemoryScheduleRepository:
    """Dictionary-backed repository"""

    def __init__(
        self,
        orders: Optional[Iterable[Order]] = None,
        predicted_orders: Optional[Iterable[PredictedOrder]] = None,
        machines: Optional[Iterable[Machine]] = None,
        products: Optional[Iterable[Product]] = None,
        settings: Optional[SchedulingSettings] = None,
        blocks: Optional[Iterable[ProductionBlock]] = None,
    ) -> None:
        self._orders: MutableMapping[str, Order] = {o.id: o for o in orders or []}
        self._predicted: MutableMapping[str, PredictedOrder] = {
            p.id: p for p in predicted_orders or []
        }
        self._machines: MutableMapping[str, Machine] = {m.id: m for m in machines or []}
        self._products: MutableMapping[str, Product] = {p.id: p for p in products or []}
        self._blocks: MutableMapping[str, ProductionBlock] = {b.id: b for b in blocks or []}
        self._settings = settings or SchedulingSettings()
        self._metrics: Optional[ScheduleMetrics] = None
        # Statuses of reliable predictions; predictions carry no status field
        self.predicted_statuses: Dict[str, OrderStatus] = {}

    @classmethod
    def from_snapshot(cls, snapshot) -> "InMemoryScheduleRepository":
        """Build a repository from a ``moldplan.data.loader.Snapshot``"""
        return cls(
            orders=snapshot.orders,
            predicted_orders=snapshot.predicted_orders,
            machines=snapshot.machines,
            products=snapshot.products,
            settings=snapshot.settings,
            blocks=snapshot.blocks,
        )

    def list_orders(self, statuses: Optional[Iterable[OrderStatus]] = None) -> List[Order]:
        if statuses is None:
            return list(self._orders.values())
        wanted = {OrderStatus(s) for s in statuses}
        return [o for o in self._orders.values() if o.status in wanted]

    def list_predicted_orders(self) -> List[PredictedOrder]:
        return list(self._predicted.values())

    def list_machines(self, status: Optional[MachineStatus] = None) -> List[Machine]:
        if status is None:
            return list(self._machines.values())
        return [m for m in self._machines.values() if m.status == MachineStatus(status)]

    def list_products(self) -> List[Product]:
        return list(self._products.values())

    def get_settings(self) -> SchedulingSettings:
        return self._settings

    def set_settings(self, settings: SchedulingSettings) -> None:
        self._settings = settings

    def list_blocks(self) -> List[ProductionBlock]:
        return sorted(self._blocks.values(), key=lambda b: (b.start_time, b.machine_id))

    def get_block(self, block_id: str) -> ProductionBlock:
        try:
            return self._blocks[block_id]
        except KeyError as exc:
            raise RecordNotFoundError(f"Production block {block_id!r} not found") from exc

    def replace_blocks(self, blocks: Sequence[ProductionBlock]) -> None:
        # Build the new table first so a bad block leaves the old one intact
        replacement = {}
        for block in blocks:
            if block.id in replacement:
                raise ValueError(f"Duplicate production block id {block.id!r}")
            replacement[block.id] = block
        self._blocks = replacement

    def update_block(self, block: ProductionBlock) -> None:
        if block.id not in self._blocks:
            raise RecordNotFoundError(f"Production block {block.id!r} not found")
        self._blocks[block.id] = block

    def save_metrics(self, metrics: ScheduleMetrics) -> None:
        self._metrics = copy.deepcopy(metrics)

    def get_metrics(self) -> Optional[ScheduleMetrics]:
        return copy.deepcopy(self._metrics)

    def update_order_statuses(self, statuses: Dict[str, OrderStatus]) -> None:
        missing = [order_id for order_id in statuses if order_id not in self._orders]
        if missing:
            raise RecordNotFoundError(f"Orders not found: {missing!r}")
        for order_id, status in statuses.items():
            self._orders[order_id].status = OrderStatus(status)

    def update_predicted_statuses(self, statuses: Dict[str, OrderStatus]) -> None:
        missing = [p_id for p_id in statuses if p_id not in self._predicted]
        if missing:
            raise RecordNotFoundError(f"Predicted orders not found: {missing!r}")
        for p_id, status in statuses.items():
            self.predicted_statuses[p_id] = OrderStatus(status)


__all__ = ["ScheduleRepository", "InMemoryScheduleRepository"]

"""
Core domain models for MOLDPLAN

Defines the fundamental data structures used throughout the scheduling system:
- Material: Raw material with a price per kg
- Machine: Injection molding machine with capability limits
- Product: Molded product with cycle parameters
- Order / PredictedOrder: Confirmed and forecast demand
- DemandItem: Unified view of an order or prediction for the engine
- ProductionBlock: One contiguous slot of production on one machine
- ProductionRun: All blocks produced for one demand item
- ScheduleMetrics: Utilization summary of a schedule
- SchedulingSettings: Immutable settings snapshot for a generation run

All models use dataclasses; the mutable ones validate their attributes in
``__post_init__`` and raise ``ValueError`` on bad input.
"""

from dataclasses import dataclass, field, fields, asdict
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Union
import uuid

from moldplan.constants import (
    DEFAULT_CAVITY_COUNT,
    DEFAULT_CYCLE_TIME_SECONDS,
    DEFAULT_DELIVERY_BUFFER_DAYS,
    DEFAULT_HOURLY_RATE,
    DEFAULT_MATERIAL_COST_PER_KG,
    DEFAULT_PREDICTION_ERROR_THRESHOLD,
    DEFAULT_SETUP_TIME_MINUTES,
    DEFAULT_SHIFTS_PER_DAY,
    DEFAULT_UNIT_PRICE,
    HOURS_PER_DAY,
    PRIORITY_DEFAULT,
    PRIORITY_HIGHEST,
    PRIORITY_LOWEST,
    WORK_HOURS_PER_DAY,
    WORK_START_HOUR,
)
from moldplan.core.enums import DemandSource, MachineStatus, OrderStatus


def to_datetime(value: Union[date, datetime, str]) -> datetime:
    """Normalize a date, datetime or ISO string to a naive datetime"""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    raise TypeError(f"Cannot convert {value!r} to datetime")


@dataclass
class Material:
    """Raw material used by a product"""

    id: str
    name: str = ""
    cost_per_kg: Optional[float] = None


@dataclass
class Machine:
    """
    Injection molding machine

    Attributes:
        id: Unique identifier
        code: Human-readable machine code (e.g. "IM-01")
        name: Machine name
        max_clamp_force: Maximum clamp force (tons)
        max_pressure: Maximum injection pressure (bar)
        max_temperature: Maximum barrel temperature (°C)
        hourly_rate: Machine cost per hour (SEK)
        status: Operational status
    """

    id: str
    code: str = ""
    name: str = ""
    max_clamp_force: Optional[float] = None
    max_pressure: Optional[float] = None
    max_temperature: Optional[float] = None
    hourly_rate: Optional[float] = None
    status: MachineStatus = MachineStatus.AVAILABLE

    def __post_init__(self):
        if isinstance(self.status, str):
            self.status = MachineStatus(self.status)
        if self.hourly_rate is not None and self.hourly_rate < 0:
            raise ValueError("Hourly rate cannot be negative")

    def is_available(self) -> bool:
        """Only available machines take part in scheduling"""
        return self.status == MachineStatus.AVAILABLE


@dataclass
class Product:
    """
    Molded product

    Attributes:
        id: Unique identifier
        name: Product name
        sku: Article number
        cycle_time: Seconds per molding cycle
        cavity_count: Units produced per cycle
        required_pressure: Injection pressure needed (bar)
        required_temperature: Melt temperature needed (°C)
        weight_per_unit: Weight of one unit (grams)
        material: Material the product is molded from
        compatible_machines: Explicit allow-list of machine ids (empty = any)
    """

    id: str
    name: str = ""
    sku: str = ""
    cycle_time: float = DEFAULT_CYCLE_TIME_SECONDS
    cavity_count: int = DEFAULT_CAVITY_COUNT
    required_pressure: Optional[float] = None
    required_temperature: Optional[float] = None
    weight_per_unit: Optional[float] = None
    material: Optional[Material] = None
    compatible_machines: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.cycle_time <= 0:
            raise ValueError("Cycle time must be positive")
        if self.cavity_count < 1:
            raise ValueError("Cavity count must be at least 1")

    def has_explicit_machines(self) -> bool:
        return bool(self.compatible_machines)


@dataclass
class Order:
    """
    Confirmed customer order

    Attributes:
        id: Unique identifier
        customer_id: Customer reference
        product_id: Product reference
        quantity: Number of units ordered
        due_date: Delivery date
        priority: 1 (highest) .. 10 (lowest)
        status: Lifecycle status
        notes: Free text
    """

    id: str
    customer_id: str
    product_id: str
    quantity: int
    due_date: datetime
    priority: int = PRIORITY_DEFAULT
    status: OrderStatus = OrderStatus.PENDING
    notes: str = ""

    def __post_init__(self):
        self.due_date = to_datetime(self.due_date)
        if isinstance(self.status, str):
            self.status = OrderStatus(self.status)
        if self.quantity <= 0:
            raise ValueError("Quantity must be positive")
        if not (PRIORITY_HIGHEST <= self.priority <= PRIORITY_LOWEST):
            raise ValueError(f"Priority must be between {PRIORITY_HIGHEST} and {PRIORITY_LOWEST}")

    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED


@dataclass
class PredictedOrder:
    """
    Pre-seeded demand prediction

    Attributes:
        id: Unique identifier
        customer_id: Customer reference
        product_id: Product reference
        predicted_quantity: Expected quantity
        predicted_date: Expected order date
        confidence_score: Confidence in [0, 1]
        basis: How the prediction was made (e.g. "weekly_pattern")
    """

    id: str
    customer_id: str
    product_id: str
    predicted_quantity: int
    predicted_date: datetime
    confidence_score: float
    basis: str = ""

    def __post_init__(self):
        self.predicted_date = to_datetime(self.predicted_date)
        if self.predicted_quantity < 0:
            raise ValueError("Predicted quantity cannot be negative")
        if not (0.0 <= self.confidence_score <= 1.0):
            raise ValueError("Confidence score must be between 0 and 1")

    def is_reliable(self, threshold: float) -> bool:
        """Reliable predictions are scheduled and get a status (boundary inclusive)"""
        return self.confidence_score >= threshold


@dataclass(frozen=True)
class DemandItem:
    """
    Order or reliable prediction, as seen by the scheduling engine

    Attributes:
        id: Id of the underlying order or prediction
        source: Confirmed order or prediction
        customer_id: Customer reference
        product_id: Product reference
        quantity: Units demanded
        date: Due date (orders) or predicted date (predictions)
        priority: Order priority, default for predictions
        status: Current status of a confirmed order, None for predictions
    """

    id: str
    source: DemandSource
    customer_id: str
    product_id: str
    quantity: int
    date: datetime
    priority: int = PRIORITY_DEFAULT
    status: Optional[OrderStatus] = None

    @classmethod
    def from_order(cls, order: Order) -> "DemandItem":
        return cls(
            id=order.id,
            source=DemandSource.CONFIRMED,
            customer_id=order.customer_id,
            product_id=order.product_id,
            quantity=order.quantity,
            date=order.due_date,
            priority=order.priority or PRIORITY_DEFAULT,
            status=order.status,
        )

    @classmethod
    def from_prediction(cls, prediction: PredictedOrder) -> "DemandItem":
        return cls(
            id=prediction.id,
            source=DemandSource.PREDICTED,
            customer_id=prediction.customer_id,
            product_id=prediction.product_id,
            quantity=prediction.predicted_quantity,
            date=prediction.predicted_date,
        )

    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED


@dataclass
class ProductionBlock:
    """
    One contiguous slot of production on a machine

    Only the first block of a multi-day run carries the batch size, setup
    time and estimated cost; continuation blocks carry zero for all three.

    Attributes:
        machine_id: Machine the block runs on
        product_id: Product being molded
        customer_id: Customer the run is for
        batch_size: Units of the run (first block only)
        start_time: Block start
        end_time: Block end (exclusive)
        setup_time_minutes: Setup minutes (first block only)
        estimated_cost: Material + labor cost (first block only)
        order_id: Order or prediction the block was generated for
        source: Demand source of that order
        id: Unique identifier
    """

    machine_id: str
    product_id: str
    customer_id: str
    batch_size: int
    start_time: datetime
    end_time: datetime
    setup_time_minutes: float = 0
    estimated_cost: float = 0.0
    order_id: Optional[str] = None
    source: Optional[DemandSource] = None
    id: str = ""

    def __post_init__(self):
        if not self.id:
            self.id = str(uuid.uuid4())
        self.start_time = to_datetime(self.start_time)
        self.end_time = to_datetime(self.end_time)
        if isinstance(self.source, str):
            self.source = DemandSource(self.source)
        if self.end_time <= self.start_time:
            raise ValueError("Block end time must be after start time")
        if self.batch_size < 0:
            raise ValueError("Batch size cannot be negative")
        if self.setup_time_minutes < 0:
            raise ValueError("Setup time cannot be negative")

    def duration_minutes(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 60

    def is_continuation(self) -> bool:
        return self.batch_size == 0

    def overlaps(self, other: "ProductionBlock") -> bool:
        return self.start_time < other.end_time and other.start_time < self.end_time

    def to_record(self) -> Dict[str, Any]:
        """Row shape used by the storage layer (ISO timestamps)"""
        return {
            "id": self.id,
            "machine_id": self.machine_id,
            "product_id": self.product_id,
            "customer_id": self.customer_id,
            "batch_size": self.batch_size,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "setup_time_minutes": self.setup_time_minutes,
            "estimated_cost": self.estimated_cost,
            "order_id": self.order_id,
            "source": self.source.value if self.source else None,
        }


@dataclass
class ProductionRun:
    """
    All blocks generated for one demand item, on one machine

    ``total_quantity`` is the authoritative quantity of the run; the
    per-block batch sizes follow the first-block convention of the store.
    """

    demand_id: str
    source: DemandSource
    machine_id: str
    product_id: str
    customer_id: str
    total_quantity: int
    blocks: List[ProductionBlock] = field(default_factory=list)

    @property
    def start_time(self) -> Optional[datetime]:
        return self.blocks[0].start_time if self.blocks else None

    @property
    def end_time(self) -> Optional[datetime]:
        return self.blocks[-1].end_time if self.blocks else None

    def total_minutes(self) -> float:
        return sum(block.duration_minutes() for block in self.blocks)

    def first_block(self) -> Optional[ProductionBlock]:
        return self.blocks[0] if self.blocks else None


@dataclass
class ScheduleMetrics:
    """
    Utilization summary of a schedule

    Attributes:
        total_oee: Aggregate OEE (%), capped at 100
        total_production_hours: Sum of block durations (hours)
        total_setup_hours: Sum of setup time (hours)
        total_blocks: Number of blocks
        machines_used: Distinct machines with at least one block
        machine_oee: OEE (%) per machine id, for every machine
        estimated_revenue: Batch sizes times unit price
        work_days: Days spanned by the schedule
        has_manual_edits: Set when a block was moved after generation
        last_calculated_at: When the metrics were computed
    """

    total_oee: float = 0.0
    total_production_hours: float = 0.0
    total_setup_hours: float = 0.0
    total_blocks: int = 0
    machines_used: int = 0
    machine_oee: Dict[str, float] = field(default_factory=dict)
    estimated_revenue: float = 0.0
    work_days: int = 0
    has_manual_edits: bool = False
    last_calculated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["last_calculated_at"] = self.last_calculated_at.isoformat()
        return data


@dataclass(frozen=True)
class SchedulingSettings:
    """
    Settings snapshot read once per generation run

    Attributes:
        setup_time_minutes: Setup minutes added to every run
        work_hours_per_day: Length of the daily work window (hours)
        work_start_hour: Hour the daily work window opens
        delivery_buffer_days: Days of slack before delivery
        prediction_error_threshold: Max prediction error (%) still reliable
        shifts_per_day: Number of shifts worked per day
        unit_price: Placeholder revenue per unit (SEK)
        default_hourly_rate: Machine rate when a machine has none (SEK/h)
        default_material_cost_per_kg: Material price when a product has none
    """

    setup_time_minutes: float = DEFAULT_SETUP_TIME_MINUTES
    work_hours_per_day: float = WORK_HOURS_PER_DAY
    work_start_hour: int = WORK_START_HOUR
    delivery_buffer_days: int = DEFAULT_DELIVERY_BUFFER_DAYS
    prediction_error_threshold: float = DEFAULT_PREDICTION_ERROR_THRESHOLD
    shifts_per_day: int = DEFAULT_SHIFTS_PER_DAY
    unit_price: float = DEFAULT_UNIT_PRICE
    default_hourly_rate: float = DEFAULT_HOURLY_RATE
    default_material_cost_per_kg: float = DEFAULT_MATERIAL_COST_PER_KG

    @property
    def reliability_threshold(self) -> float:
        """Minimum confidence score of a reliable prediction"""
        return round(1 - self.prediction_error_threshold / 100, 6)

    @property
    def work_end_hour(self) -> float:
        """Hour the work window closes, never past midnight"""
        return min(HOURS_PER_DAY, self.work_start_hour + self.work_hours_per_day)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SchedulingSettings":
        """Build settings from a storage row, ignoring unknown keys and nulls"""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known and v is not None}
        return cls(**values)

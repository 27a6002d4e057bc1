"""
Enumerations for MOLDPLAN

Defines enum types for order and machine status, demand sources and
compatibility diagnostics. Values match the strings persisted by the storage
layer, so ``OrderStatus("pending")`` round-trips a stored row.
"""

from enum import Enum


class OrderStatus(Enum):
    """Lifecycle status of an order or reliable prediction"""

    PENDING = "pending"
    SCHEDULED = "scheduled"
    IN_PRODUCTION = "in_production"
    COMPLETED = "completed"
    CANCELLED = "cancelled"  # Manual override, never recomputed


class MachineStatus(Enum):
    """Operational status of a machine"""

    AVAILABLE = "available"  # Only these participate in scheduling
    IN_USE = "in_use"
    MAINTENANCE = "maintenance"
    OFFLINE = "offline"


class DemandSource(Enum):
    """Where a demand-stream item came from"""

    CONFIRMED = "confirmed"  # Customer order
    PREDICTED = "predicted"  # Reliable predicted order


class IssueType(Enum):
    """Reason a machine cannot produce a product"""

    NOT_IN_COMPATIBLE_LIST = "not_in_compatible_list"
    PRESSURE = "pressure"
    TEMPERATURE = "temperature"


class DiagnosticReason(Enum):
    """Why the generator skipped a demand item"""

    PRODUCT_NOT_FOUND = "product_not_found"
    NO_COMPATIBLE_MACHINE = "no_compatible_machine"
    ZERO_QUANTITY = "zero_quantity"


class ConfidenceLevel(Enum):
    """Bucketed prediction confidence"""

    HIGH = "HIGH"  # >= 0.75, reliable
    MEDIUM = "MEDIUM"  # >= 0.5
    LOW = "LOW"  # < 0.5


class OrderInterval(Enum):
    """Recurrence interval of predicted orders"""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @property
    def days(self) -> int:
        return {
            "daily": 1,
            "weekly": 7,
            "biweekly": 14,
            "monthly": 30,
            "quarterly": 90,
            "yearly": 365,
        }[self.value]

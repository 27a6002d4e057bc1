"""
Prediction helpers

Predictions are pre-seeded inputs; nothing here forecasts demand. These
helpers classify predictions and merge them with confirmed orders into a
single timeline for display.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from moldplan.constants import (
    CONFIDENCE_THRESHOLDS,
    DEFAULT_PREDICTION_ERROR_THRESHOLD,
    RELIABILITY_THRESHOLD,
)
from moldplan.core.enums import ConfidenceLevel, DemandSource
from moldplan.core.models import Order, PredictedOrder
from moldplan.engine.production_time import round_half_up


@dataclass
class TimelineItem:
    """One confirmed order or prediction on the demand timeline"""

    id: str
    source: DemandSource
    customer_id: str
    product_id: str
    quantity: int
    date: datetime
    confidence: float
    is_reliable: bool
    status: Optional[str] = None
    error_percent: Optional[float] = None
    quantity_range: Optional[Dict[str, float]] = None


def is_reliable_prediction(confidence_score: float, threshold: float = RELIABILITY_THRESHOLD) -> bool:
    return confidence_score >= threshold


def confidence_level(confidence_score: float) -> ConfidenceLevel:
    if confidence_score >= CONFIDENCE_THRESHOLDS["HIGH"]:
        return ConfidenceLevel.HIGH
    if confidence_score >= CONFIDENCE_THRESHOLDS["MEDIUM"]:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def calculate_prediction_error(prediction: PredictedOrder) -> float:
    """Error percentage, the complement of confidence (0-100)"""
    return round_half_up((1 - prediction.confidence_score) * 100, 2)


def get_prediction_range(prediction: PredictedOrder) -> Dict[str, float]:
    """
    Quantity band implied by the prediction's error rate

    Returns:
        Dictionary with min, expected, max quantities and error_percent
    """
    expected = prediction.predicted_quantity
    error_rate = 1 - prediction.confidence_score
    return {
        "min": round_half_up(expected * (1 - error_rate)),
        "expected": expected,
        "max": round_half_up(expected * (1 + error_rate)),
        "error_percent": round_half_up(error_rate * 100),
    }


def combine_orders_and_predictions(
    orders: Sequence[Order],
    predictions: Sequence[PredictedOrder],
    error_threshold: float = DEFAULT_PREDICTION_ERROR_THRESHOLD,
) -> List[TimelineItem]:
    """
    Merge confirmed orders and predictions into one timeline sorted by date

    A prediction is reliable when its error percentage is at most
    ``error_threshold``. Confirmed orders are always reliable.
    """
    combined: List[TimelineItem] = []

    for order in orders:
        combined.append(
            TimelineItem(
                id=order.id,
                source=DemandSource.CONFIRMED,
                customer_id=order.customer_id,
                product_id=order.product_id,
                quantity=order.quantity,
                date=order.due_date,
                confidence=1.0,
                is_reliable=True,
                status=order.status.value,
            )
        )

    for prediction in predictions:
        error_percent = calculate_prediction_error(prediction)
        combined.append(
            TimelineItem(
                id=prediction.id,
                source=DemandSource.PREDICTED,
                customer_id=prediction.customer_id,
                product_id=prediction.product_id,
                quantity=prediction.predicted_quantity,
                date=prediction.predicted_date,
                confidence=prediction.confidence_score,
                is_reliable=error_percent <= error_threshold,
                status=prediction.basis or None,
                error_percent=error_percent,
                quantity_range=get_prediction_range(prediction),
            )
        )

    combined.sort(key=lambda item: item.date)
    return combined


def filter_timeline(
    items: Sequence[TimelineItem],
    customer_id: Optional[str] = None,
    product_id: Optional[str] = None,
) -> List[TimelineItem]:
    """Keep items matching the given customer and/or product"""
    return [
        item
        for item in items
        if (not customer_id or item.customer_id == customer_id)
        and (not product_id or item.product_id == product_id)
    ]

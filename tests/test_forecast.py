"""Tests for prediction helpers and the demand timeline."""

import pytest
from datetime import datetime

from moldplan.core.enums import ConfidenceLevel, DemandSource
from moldplan.core.models import Order
from moldplan.engine.forecast import (
    calculate_prediction_error,
    combine_orders_and_predictions,
    confidence_level,
    filter_timeline,
    get_prediction_range,
    is_reliable_prediction,
)


class TestClassification:

    def test_reliability_boundary(self):
        assert is_reliable_prediction(0.75)
        assert not is_reliable_prediction(0.74)
        assert is_reliable_prediction(0.6, threshold=0.6)

    @pytest.mark.parametrize(
        "score, level",
        [(0.9, ConfidenceLevel.HIGH), (0.75, ConfidenceLevel.HIGH), (0.6, ConfidenceLevel.MEDIUM), (0.2, ConfidenceLevel.LOW)],
    )
    def test_confidence_level(self, score, level):
        assert confidence_level(score) == level

    def test_prediction_error(self, make_prediction):
        assert calculate_prediction_error(make_prediction(0.8)) == pytest.approx(20.0)

    def test_prediction_range(self, make_prediction):
        band = get_prediction_range(make_prediction(0.8, quantity=1000))

        assert band["expected"] == 1000
        assert band["min"] == pytest.approx(800)
        assert band["max"] == pytest.approx(1200)
        assert band["error_percent"] == pytest.approx(20)


class TestTimeline:

    @pytest.fixture
    def timeline(self, make_prediction):
        orders = [
            Order(id="O1", customer_id="C1", product_id="P1", quantity=100, due_date="2024-01-20"),
            Order(id="O2", customer_id="C2", product_id="P2", quantity=50, due_date="2024-01-05"),
        ]
        predictions = [
            make_prediction(0.9, prediction_id="F1", date=datetime(2024, 1, 10)),
            make_prediction(0.6, prediction_id="F2", date=datetime(2024, 2, 1)),
        ]
        return combine_orders_and_predictions(orders, predictions)

    def test_sorted_by_date(self, timeline):
        assert [item.id for item in timeline] == ["O2", "F1", "O1", "F2"]

    def test_confirmed_orders_always_reliable(self, timeline):
        confirmed = [item for item in timeline if item.source == DemandSource.CONFIRMED]
        assert all(item.is_reliable and item.confidence == 1.0 for item in confirmed)
        assert confirmed[0].status == "pending"

    def test_prediction_reliability_from_error(self, timeline):
        by_id = {item.id: item for item in timeline}
        assert by_id["F1"].is_reliable
        assert not by_id["F2"].is_reliable
        assert by_id["F2"].error_percent == pytest.approx(40.0)
        assert by_id["F1"].quantity_range["expected"] == 360

    def test_filter_by_customer_and_product(self, timeline):
        assert [i.id for i in filter_timeline(timeline, customer_id="C2")] == ["O2"]
        assert [i.id for i in filter_timeline(timeline, customer_id="C1", product_id="P1")] == ["F1", "O1", "F2"]
        assert len(filter_timeline(timeline)) == 4

"""Tests for the schedule service and the in-memory repository."""

import pytest
from datetime import datetime

from moldplan.core.enums import MachineStatus, OrderStatus
from moldplan.core.models import Machine, Order, ProductionBlock, SchedulingSettings
from moldplan.exceptions import RecordNotFoundError, SchedulingConfigError
from moldplan.service import ScheduleService
from moldplan.storage.repository import InMemoryScheduleRepository

BEFORE_SHIFT = datetime(2024, 1, 8, 5, 0)


@pytest.fixture
def repository(machines, product, small_orders, make_prediction):
    cancelled = Order(
        id="OX", customer_id="C1", product_id="P1", quantity=999, due_date="2024-01-09", status="cancelled"
    )
    broken = Machine(id="M3", status=MachineStatus.OFFLINE)
    return InMemoryScheduleRepository(
        orders=small_orders + [cancelled],
        predicted_orders=[
            make_prediction(0.9, prediction_id="F1"),
            make_prediction(0.5, prediction_id="F2"),
        ],
        machines=machines + [broken],
        products=[product],
    )


@pytest.fixture
def service(repository):
    return ScheduleService(repository, now_provider=lambda: BEFORE_SHIFT)


class TestRegenerate:

    def test_schedules_open_orders_and_reliable_predictions(self, service, repository):
        report = service.regenerate()

        assert report.orders_scheduled == 4
        assert report.blocks_created == len(repository.list_blocks())
        assert {b.order_id for b in repository.list_blocks()} == {"O1", "O2", "O3", "F1"}
        assert {b.machine_id for b in repository.list_blocks()} <= {"M1", "M2"}
        assert report.diagnostics == []

    def test_saves_metrics(self, service, repository):
        report = service.regenerate()

        stored = repository.get_metrics()
        assert stored.has_manual_edits is False
        assert stored.total_blocks == report.blocks_created
        assert stored.total_oee == report.metrics.total_oee

    def test_syncs_statuses(self, service, repository):
        report = service.regenerate()

        assert report.statuses["O1"] == OrderStatus.SCHEDULED
        assert report.statuses["OX"] == OrderStatus.CANCELLED
        assert "F2" not in report.statuses
        assert repository.predicted_statuses == {"F1": OrderStatus.SCHEDULED}
        assert {o.id for o in repository.list_orders([OrderStatus.SCHEDULED])} == {"O1", "O2", "O3"}

    def test_replaces_previous_schedule(self, service, repository):
        first = service.regenerate()
        second = service.regenerate()

        assert second.blocks_created == first.blocks_created
        assert len(repository.list_blocks()) == first.blocks_created

    def test_empty_work_day_keeps_existing_blocks(self, service, repository):
        service.regenerate()
        before = repository.list_blocks()

        repository.set_settings(SchedulingSettings(work_hours_per_day=0))
        with pytest.raises(SchedulingConfigError):
            service.regenerate()

        assert repository.list_blocks() == before


class TestMoveBlock:

    def test_move_flags_manual_edit(self, service, repository):
        service.regenerate()
        block = repository.list_blocks()[0]

        moved = service.move_block(block.id, "2024-01-09T10:00:00", "2024-01-09T12:00:00", machine_id="M2")

        assert moved.id == block.id
        assert moved.machine_id == "M2"
        assert moved.batch_size == block.batch_size
        assert repository.get_block(block.id).start_time == datetime(2024, 1, 9, 10, 0)
        assert repository.get_metrics().has_manual_edits is True

    def test_regenerate_clears_manual_edit_flag(self, service, repository):
        service.regenerate()
        block = repository.list_blocks()[0]
        service.move_block(block.id, datetime(2024, 1, 9, 10), datetime(2024, 1, 9, 12))

        service.regenerate()

        assert repository.get_metrics().has_manual_edits is False

    def test_end_before_start_rejected(self, service, repository):
        service.regenerate()
        block = repository.list_blocks()[0]

        with pytest.raises(ValueError):
            service.move_block(block.id, datetime(2024, 1, 9, 12), datetime(2024, 1, 9, 10))

    def test_unknown_block(self, service):
        with pytest.raises(RecordNotFoundError):
            service.move_block("missing", datetime(2024, 1, 9, 10), datetime(2024, 1, 9, 12))


class TestInMemoryScheduleRepository:

    def test_list_filters(self, repository):
        assert {o.id for o in repository.list_orders([OrderStatus.CANCELLED])} == {"OX"}
        assert len(repository.list_orders()) == 4
        assert [m.id for m in repository.list_machines(MachineStatus.AVAILABLE)] == ["M1", "M2"]

    def test_replace_blocks_rejects_duplicates(self, repository):
        block = ProductionBlock("M1", "P1", "C1", 10, datetime(2024, 1, 8, 6), datetime(2024, 1, 8, 7), id="B1")
        repository.replace_blocks([block])

        with pytest.raises(ValueError):
            repository.replace_blocks([block, block])

        assert repository.list_blocks() == [block]

    def test_update_unknown_block(self, repository):
        block = ProductionBlock("M1", "P1", "C1", 10, datetime(2024, 1, 8, 6), datetime(2024, 1, 8, 7), id="B9")
        with pytest.raises(RecordNotFoundError):
            repository.update_block(block)

    def test_update_unknown_order_status(self, repository):
        with pytest.raises(RecordNotFoundError):
            repository.update_order_statuses({"nope": OrderStatus.COMPLETED})

    def test_metrics_empty_until_saved(self, repository):
        assert repository.get_metrics() is None


class TestStatusSync:

    def test_shared_id_statuses_stored_separately(self, product, machine, make_prediction):
        done = ProductionBlock(
            "M1", "P1", "C1", 50, datetime(2024, 1, 4, 6), datetime(2024, 1, 4, 10), id="B1"
        )
        repository = InMemoryScheduleRepository(
            orders=[Order(id="1", customer_id="C1", product_id="P1", quantity=50, due_date="2024-01-05")],
            predicted_orders=[make_prediction(0.9, quantity=50, prediction_id="1", date=datetime(2024, 1, 8))],
            machines=[machine],
            products=[product],
            blocks=[done],
        )
        service = ScheduleService(repository, now_provider=lambda: datetime(2024, 1, 12, 12, 0))

        statuses = service.sync_order_statuses()

        assert repository.list_orders()[0].status == OrderStatus.COMPLETED
        assert repository.predicted_statuses == {"1": OrderStatus.PENDING}
        assert statuses == {"1": OrderStatus.COMPLETED}

    def test_unknown_prediction_status(self, repository):
        with pytest.raises(RecordNotFoundError):
            repository.update_predicted_statuses({"nope": OrderStatus.PENDING})

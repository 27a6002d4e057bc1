"""Tests for machine / product compatibility."""

import pytest

from moldplan.core.enums import IssueType
from moldplan.core.models import Machine, Product
from moldplan.engine.compatibility import check_machine_compatibility, get_compatible_machines


class TestCheckMachineCompatibility:

    def test_pressure_exceeds_machine_limit(self):
        machine = Machine(id="M1", code="IM-01", max_pressure=400)
        product = Product(id="P1", required_pressure=500)

        result = check_machine_compatibility(machine, product)

        assert result.compatible is False
        assert len(result.issues) == 1
        assert result.issues[0].type == IssueType.PRESSURE

    def test_temperature_and_pressure_both_reported(self):
        machine = Machine(id="M1", max_pressure=400, max_temperature=200)
        product = Product(id="P1", required_pressure=500, required_temperature=250)

        result = check_machine_compatibility(machine, product)

        assert {issue.type for issue in result.issues} == {IssueType.PRESSURE, IssueType.TEMPERATURE}

    def test_equal_limits_are_compatible(self):
        machine = Machine(id="M1", max_pressure=500, max_temperature=250)
        product = Product(id="P1", required_pressure=500, required_temperature=250)
        assert check_machine_compatibility(machine, product).compatible

    def test_missing_limits_place_no_constraint(self):
        machine = Machine(id="M1", max_pressure=None, max_temperature=100)
        product = Product(id="P1", required_pressure=5000, required_temperature=None)
        assert check_machine_compatibility(machine, product).compatible

    def test_explicit_list_overrides_physical_limits(self):
        weak = Machine(id="M1", max_pressure=100)
        strong = Machine(id="M2", max_pressure=5000)
        product = Product(id="P1", required_pressure=1000, compatible_machines=["M1"])

        assert check_machine_compatibility(weak, product).compatible
        result = check_machine_compatibility(strong, product)
        assert not result.compatible
        assert result.issues[0].type == IssueType.NOT_IN_COMPATIBLE_LIST


class TestGetCompatibleMachines:

    def test_preserves_input_order(self):
        machines = [Machine(id="M3"), Machine(id="M1"), Machine(id="M2", max_pressure=10)]
        product = Product(id="P1", required_pressure=100)

        compatible = get_compatible_machines(product, machines)

        assert [m.id for m in compatible] == ["M3", "M1"]

    def test_empty_pool(self):
        assert get_compatible_machines(Product(id="P1"), []) == []

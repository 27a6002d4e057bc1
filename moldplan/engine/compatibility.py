"""
Machine / product compatibility

A product declaring an explicit list of compatible machines is only produced
on those machines; the allow-list is then the sole determinant. Without a list
the physical limits decide: required pressure and temperature must not exceed
the machine maximum. A limit missing on either side places no constraint.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from moldplan.core.enums import IssueType
from moldplan.core.models import Machine, Product


@dataclass(frozen=True)
class CompatibilityIssue:
    """One failed compatibility check"""

    type: IssueType
    message: str


@dataclass
class CompatibilityResult:
    """Outcome of checking one machine against one product"""

    compatible: bool
    machine_id: str
    machine_code: str
    product_id: str
    issues: List[CompatibilityIssue] = field(default_factory=list)


def _exceeds(required, limit) -> bool:
    if required is None or limit is None:
        return False
    return required > limit


def check_machine_compatibility(machine: Machine, product: Product) -> CompatibilityResult:
    """
    Check if a machine can produce a product

    Args:
        machine: Machine to check
        product: Product to produce

    Returns:
        CompatibilityResult with every failing check listed in ``issues``
    """
    issues: List[CompatibilityIssue] = []
    label = machine.code or machine.id

    if product.has_explicit_machines():
        if machine.id not in product.compatible_machines:
            issues.append(
                CompatibilityIssue(
                    type=IssueType.NOT_IN_COMPATIBLE_LIST,
                    message=f"Machine {label} is not in product's compatible machines list",
                )
            )
    else:
        if _exceeds(product.required_pressure, machine.max_pressure):
            issues.append(
                CompatibilityIssue(
                    type=IssueType.PRESSURE,
                    message=(
                        f"Required pressure {product.required_pressure} exceeds "
                        f"machine max {machine.max_pressure}"
                    ),
                )
            )
        if _exceeds(product.required_temperature, machine.max_temperature):
            issues.append(
                CompatibilityIssue(
                    type=IssueType.TEMPERATURE,
                    message=(
                        f"Required temperature {product.required_temperature} exceeds "
                        f"machine max {machine.max_temperature}"
                    ),
                )
            )

    return CompatibilityResult(
        compatible=not issues,
        machine_id=machine.id,
        machine_code=machine.code,
        product_id=product.id,
        issues=issues,
    )


def get_compatible_machines(product: Product, machines: Sequence[Machine]) -> List[Machine]:
    """Machines able to produce ``product``, in input order"""
    return [m for m in machines if check_machine_compatibility(m, product).compatible]

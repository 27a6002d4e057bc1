"""
Schedule validation

Hard-constraint checks over a set of blocks:
- No Overlaps: blocks on the same machine never overlap
- Work Hours: every block lies inside one day's work window
- Runs: each run has exactly one first block on a single machine, and its
  batch sizes sum to the run quantity
"""

from typing import Dict, List, Optional, Sequence, Tuple

from moldplan.core.models import ProductionBlock, ProductionRun
from moldplan.engine.work_hours import WorkHoursClock
from moldplan.utils.logging_config import get_logger

logger = get_logger("validation")


class ScheduleValidator:
    """Validates a schedule against its hard constraints"""

    def __init__(self, clock: Optional[WorkHoursClock] = None):
        self.clock = clock or WorkHoursClock()

    def validate(
        self,
        blocks: Sequence[ProductionBlock],
        runs: Optional[Sequence[ProductionRun]] = None,
    ) -> Tuple[bool, List[str]]:
        """
        Validate all constraints

        Returns:
            (is_valid, list_of_violations)
        """
        violations = []
        violations.extend(self._check_no_overlaps(blocks))
        violations.extend(self._check_work_hours(blocks))
        if runs is not None:
            violations.extend(self._check_runs(runs))

        for violation in violations:
            logger.warning(violation)

        return not violations, violations

    def _check_no_overlaps(self, blocks: Sequence[ProductionBlock]) -> List[str]:
        """Check that blocks on same machine don't overlap"""
        violations = []

        by_machine: Dict[str, List[ProductionBlock]] = {}
        for block in blocks:
            by_machine.setdefault(block.machine_id, []).append(block)

        for machine_id, machine_blocks in by_machine.items():
            ordered = sorted(machine_blocks, key=lambda b: b.start_time)
            for previous, current in zip(ordered, ordered[1:]):
                if current.start_time < previous.end_time:
                    violations.append(
                        f"Blocks {previous.id} and {current.id} overlap on machine {machine_id} "
                        f"({previous.id} ends at {previous.end_time.strftime('%Y-%m-%d %H:%M')}, "
                        f"{current.id} starts at {current.start_time.strftime('%Y-%m-%d %H:%M')})"
                    )

        return violations

    def _check_work_hours(self, blocks: Sequence[ProductionBlock]) -> List[str]:
        """Check that blocks stay inside the daily work window"""
        violations = []
        for block in blocks:
            if not self.clock.is_within_work_hours(block.start_time, block.end_time):
                violations.append(
                    f"Block {block.id}: outside work hours on machine {block.machine_id} "
                    f"({block.start_time.strftime('%Y-%m-%d %H:%M')} - "
                    f"{block.end_time.strftime('%Y-%m-%d %H:%M')})"
                )
        return violations

    def _check_runs(self, runs: Sequence[ProductionRun]) -> List[str]:
        violations = []
        for run in runs:
            first_blocks = [b for b in run.blocks if b.batch_size > 0]
            if len(first_blocks) != 1 or run.blocks[0] is not first_blocks[0]:
                violations.append(f"Run {run.demand_id}: expected exactly one leading first block")

            quantity = sum(b.batch_size for b in run.blocks)
            if quantity != run.total_quantity:
                violations.append(
                    f"Run {run.demand_id}: batch sizes sum to {quantity}, expected {run.total_quantity}"
                )

            if any(b.setup_time_minutes for b in run.blocks[1:]):
                violations.append(f"Run {run.demand_id}: setup time on a continuation block")

            if {b.machine_id for b in run.blocks} != {run.machine_id}:
                violations.append(f"Run {run.demand_id}: blocks spread over several machines")

        return violations

"""
Run scheduling example

Demonstrates the complete MOLDPLAN workflow:
1. Load a snapshot (or generate a demo one)
2. Regenerate the production schedule
3. Validate hard constraints
4. Display metrics, machine utilization and order statuses
"""

import argparse
import os
from datetime import datetime

import pandas as pd

from moldplan.config import Config
from moldplan.data.generator import DemoDataGenerator
from moldplan.data.loader import SnapshotLoader
from moldplan.engine.work_hours import WorkHoursClock
from moldplan.evaluation.metrics import blocks_to_dataframe, machine_utilization_frame
from moldplan.evaluation.validation import ScheduleValidator
from moldplan.service import ScheduleService
from moldplan.storage.repository import InMemoryScheduleRepository


def parse_args():
    parser = argparse.ArgumentParser(description="Generate an injection molding production schedule")
    parser.add_argument("--config", default=None, help="Path to YAML configuration")
    parser.add_argument("--snapshot", default=None, help="JSON snapshot; demo data if omitted")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for demo data")
    parser.add_argument("--output", default=None, help="Write blocks to this CSV file")
    return parser.parse_args()


def main():
    args = parse_args()
    config = Config(args.config)
    config.configure_logging()
    settings = config.scheduling_settings()

    print("=" * 80)
    print("MOLDPLAN - Injection Molding Production Planner")
    print("=" * 80)
    print()

    # Step 1: Snapshot
    print("[1/4] Loading snapshot...")
    snapshot_path = args.snapshot or config.get("data.snapshot_path")
    if snapshot_path and os.path.exists(snapshot_path):
        snapshot = SnapshotLoader.load_snapshot(snapshot_path)
    else:
        generator = DemoDataGenerator(random_seed=args.seed)
        snapshot = generator.generate_snapshot(settings=settings)
    print(
        f"  {len(snapshot.orders)} orders, {len(snapshot.predicted_orders)} predictions, "
        f"{len(snapshot.machines)} machines, {len(snapshot.products)} products"
    )
    print()

    # Step 2: Regenerate
    print("[2/4] Generating schedule...")
    repository = InMemoryScheduleRepository.from_snapshot(snapshot)
    service = ScheduleService(repository, now_provider=datetime.now)
    report = service.regenerate()
    print(f"  {report.blocks_created} blocks for {report.orders_scheduled} orders")
    for diagnostic in report.diagnostics:
        print(f"  skipped {diagnostic.demand_id}: {diagnostic.reason.value}")
    print()

    # Step 3: Validate
    print("[3/4] Validating...")
    blocks = repository.list_blocks()
    validator = ScheduleValidator(WorkHoursClock.from_settings(repository.get_settings()))
    is_valid, violations = validator.validate(blocks)
    print(f"  {'valid' if is_valid else f'{len(violations)} violation(s)'}")
    print()

    # Step 4: Results
    print("[4/4] Results")
    print("=" * 80)
    metrics = report.metrics
    print(f"  OEE:               {metrics.total_oee}%")
    print(f"  Production hours:  {metrics.total_production_hours}")
    print(f"  Setup hours:       {metrics.total_setup_hours}")
    print(f"  Work days:         {metrics.work_days}")
    print(f"  Machines used:     {metrics.machines_used}")
    print(f"  Estimated revenue: {metrics.estimated_revenue:,.0f} SEK")
    print()
    print(machine_utilization_frame(metrics, repository.list_machines()).to_string(index=False))
    print()

    status_counts = pd.Series([s.value for s in report.statuses.values()]).value_counts()
    print("Order statuses:")
    print(status_counts.to_string())
    print()

    df = blocks_to_dataframe(blocks)
    if args.output:
        df.to_csv(args.output, index=False)
        print(f"Blocks written to {args.output}")
    else:
        print(df.head(20).to_string(index=False))
    print("=" * 80)


if __name__ == "__main__":
    main()

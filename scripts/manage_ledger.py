#!/usr/bin/env python3
"""Inspect or adjust the processing solution ledger from the command line.

Usage:
  # show current inventory and metrics
  python3 scripts/manage_ledger.py status

  # add 3 barrels (600 L)
  python3 scripts/manage_ledger.py refill 3

  # change settings
  python3 scripts/manage_ledger.py settings --recycling-rate 0.75 --cost-per-square-meter 430
"""
import sys
from pathlib import Path
import argparse

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from plateworks.db import SessionLocal, Base, engine
from plateworks.core.workflow import WorkflowFacade
from plateworks.exceptions import PlateworksError


def print_status(status):
    metrics = status["metrics"]
    print(f"Current liters:   {status['current_liters']:.2f} / {metrics['max_capacity']:.2f} L "
          f"({metrics['fill_percentage']}%)")
    print(f"Total barrels:    {status['total_barrels']}")
    days = metrics["estimated_days_remaining"]
    print(f"Days remaining:   {days if days is not None else 'n/a'}")
    for field in ("cost_per_barrel", "recycling_cost_per_barrel", "cost_per_square_meter",
                  "liters_per_square_meter", "recycling_rate", "recycling_frequency"):
        print(f"{field}: {status[field]}")


def main():
    parser = argparse.ArgumentParser(description='Inspect or adjust the processing solution ledger')
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Show ledger status")

    refill = sub.add_parser("refill", help="Add whole barrels")
    refill.add_argument("barrels", type=int)

    settings_cmd = sub.add_parser("settings", help="Update cost/consumption settings")
    settings_cmd.add_argument("--cost-per-barrel", type=float)
    settings_cmd.add_argument("--recycling-cost-per-barrel", type=float)
    settings_cmd.add_argument("--cost-per-square-meter", type=float)
    settings_cmd.add_argument("--liters-per-square-meter", type=float)
    settings_cmd.add_argument("--recycling-rate", type=float)
    settings_cmd.add_argument("--recycling-frequency", type=int)
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)

    with SessionLocal() as db:
        workflow = WorkflowFacade(db)
        try:
            if args.command == "refill":
                result = workflow.refill_resource(args.barrels)
                print(f"Refilled: {result['new_total_barrels']} barrel(s), {result['new_current_liters']:.2f} L")
            elif args.command == "settings":
                changes = {
                    k: v for k, v in vars(args).items()
                    if k not in ("command",) and v is not None
                }
                print_status(workflow.update_resource_settings(changes))
            else:
                print_status(workflow.resource_status())
        except PlateworksError as exc:
            print(f"Error: {exc}")
            sys.exit(1)


if __name__ == '__main__':
    main()

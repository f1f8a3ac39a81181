#!/usr/bin/env python3
"""Seed built-in workflow templates and the resource ledger row.

This script is runnable directly (python scripts/seed_templates.py) and also import-safe.
If you see `ModuleNotFoundError: No module named 'plateworks'`, run from the project root or set PYTHONPATH=. before running.
"""
import sys
from pathlib import Path
import argparse

# Ensure project root is on sys.path when running the script directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy.exc import SQLAlchemyError

from plateworks.db import SessionLocal, Base, engine
from plateworks import crud
from plateworks.core.templates import ensure_builtin_templates, list_templates
from plateworks.core.workflow import WorkflowFacade


def main():
    parser = argparse.ArgumentParser(description='Seed built-in workflow templates and the resource ledger.')
    parser.add_argument('--no-ledger', action='store_true', help='Skip creating the resource ledger row')
    parser.add_argument('--refill', type=int, default=0, help='Add this many barrels to a freshly created ledger')
    args = parser.parse_args()

    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as exc:
        print("Warning: could not create tables on startup:", exc)

    with SessionLocal() as db:
        created = ensure_builtin_templates(db)
        if created:
            print(f"Seeded {created} workflow template(s)")
        else:
            print("Workflow templates already seeded")
        for template in list_templates(db):
            print(f"  {template.key}: {', '.join(template.sub_processes)} (trigger: {template.trigger_sub_process})")

        if not args.no_ledger:
            ledger = crud.get_or_create_ledger(db)
            db.commit()
            if args.refill and ledger.total_barrels == 0:
                WorkflowFacade(db).refill_resource(args.refill)
                db.refresh(ledger)
            print(f"Ledger ready: {ledger.total_barrels} barrel(s), {ledger.current_liters:.2f} L")


if __name__ == '__main__':
    main()

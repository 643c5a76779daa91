"""
main.py
-------
Command-line entry point for the Tax Filing & Document Manager.

Usage:
    python main.py init [--reset]     create the schema (or drop and re-create it)
    python main.py seed               load the sample data set
    python main.py report [--user N]  print the filing summary and due reminders
"""

import argparse
import sys
from datetime import date

from db.connection import init_pool, close_pool
from db.init_db import create_tables, reset_schema
from db.seed import load_sample_data
from services.filing_service import FilingService
from services.reminder_service import ReminderService
from utils.logger import get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tax-filing-manager", description="Tax filing & document manager")
    sub = parser.add_subparsers(dest="command", required=True)

    init_cmd = sub.add_parser("init", help="create the database schema")
    init_cmd.add_argument("--reset", action="store_true", help="drop all tables first (destroys data)")

    sub.add_parser("seed", help="load sample data")

    report_cmd = sub.add_parser("report", help="print filing summary and due reminders")
    report_cmd.add_argument("--user", type=int, default=None, help="only this user id")
    return parser


def run_report(user_id: int | None) -> str:
    """Filing summary followed by reminders due today."""
    lines = ["Filing summary", FilingService().summary_report(user_id), "", "Due reminders"]
    due = ReminderService().due_reminders(date.today())
    if user_id is not None:
        due = [r for r in due if r.user_id == user_id]
    if due:
        lines.extend(f"  user {r.user_id}: {r}" for r in due)
    else:
        lines.append("  none")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    # ── 1. Database setup ─────────────────────────────────
    init_pool()
    try:
        # ── 2. Dispatch ───────────────────────────────────
        if args.command == "init":
            if args.reset:
                reset_schema()
            else:
                create_tables()
        elif args.command == "seed":
            create_tables()
            load_sample_data()
        elif args.command == "report":
            print(run_report(args.user))
    finally:
        # ── 3. Cleanup ────────────────────────────────────
        close_pool()
    return 0


if __name__ == "__main__":
    sys.exit(main())

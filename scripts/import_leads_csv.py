"""Import a CSV export of leads: normalize, persist, score, and print a tally.

Usage:
    python scripts/import_leads_csv.py leads.csv
    python scripts/import_leads_csv.py leads.csv --dry-run
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import pandas as pd
from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))
load_dotenv(PROJECT_ROOT / ".env")


def _log(message: str) -> None:
    print(f"[NAYBOURHOOD-IMPORT] {message}")


def read_rows(path: Path) -> list[dict[str, Any]]:
    """Read a CSV as strings, turning blank cells into None."""
    frame = pd.read_csv(path, dtype=str, skipinitialspace=True)
    frame.columns = [str(column).strip() for column in frame.columns]
    frame = frame.astype(object).where(pd.notna(frame), None)
    return frame.to_dict(orient="records")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import and score leads from a CSV file.")
    parser.add_argument("path", type=Path, help="CSV file with one lead per row")
    parser.add_argument("--dry-run", action="store_true", help="Score rows without writing to the database")
    parser.add_argument("--json", action="store_true", help="Print the full import report as JSON")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if not args.path.is_file():
        _log(f"File not found: {args.path}")
        return 2

    from naybourhood.core.logging_config import configure_logging
    from naybourhood.database.db import init_db
    from naybourhood.services.scoring_service import ScoringService

    configure_logging()
    rows = read_rows(args.path)
    _log(f"Read {len(rows)} rows from {args.path}")

    if not args.dry_run:
        init_db()
    report = ScoringService().import_rows(rows, persist=not args.dry_run)

    if args.json:
        print(json.dumps(report, indent=2, default=str))
    else:
        for classification, count in sorted(report["by_classification"].items()):
            _log(f"{classification}: {count}")
        for error in report["errors"]:
            _log(f"Row {error['row']} failed: {error['error']}")
    _log(f"Imported {report['imported']} / {report['total']} (failed: {report['failed']}, dry_run={args.dry_run})")
    return 0 if report["failed"] == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())

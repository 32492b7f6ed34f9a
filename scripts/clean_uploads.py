"""Remove files in the upload directory that no listing references."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure the project root is on sys.path so ``garage_sale`` can be imported when the script is executed directly.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from garage_sale.database import SessionLocal
from garage_sale.models import images, sales, users  # noqa: F401
from garage_sale.services.storage import sweep_orphan_uploads


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--dry-run", action="store_true", help="List orphaned files without deleting them")
    parser.add_argument(
        "--min-age",
        type=int,
        default=300,
        help="Skip files modified less than this many seconds ago (default: 300)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")

    db = SessionLocal()
    try:
        removed = sweep_orphan_uploads(db, dry_run=args.dry_run, min_age_seconds=args.min_age)
    finally:
        db.close()

    verb = "Would remove" if args.dry_run else "Removed"
    print(f"{verb} {len(removed)} file(s)")
    for name in removed:
        print(f"  {name}")


if __name__ == "__main__":
    main()

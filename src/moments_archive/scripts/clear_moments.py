"""Delete every published moment.

Usage:
    python -m moments_archive.scripts.clear_moments --yes
"""

from __future__ import annotations

import argparse
import logging
import sys

from moments_archive.db.session import SessionLocal
from moments_archive.services.moments import MomentService

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Remove all moments from the archive.")
    parser.add_argument("--yes", action="store_true", help="confirm the deletion")
    args = parser.parse_args(argv)

    if not args.yes:
        print("Refusing to delete without --yes", file=sys.stderr)
        return 1

    logging.basicConfig(level=logging.INFO)
    db = SessionLocal()
    try:
        count = MomentService(db).delete_all()
    finally:
        db.close()
    print(f"Deleted {count} moments")
    return 0


if __name__ == "__main__":
    sys.exit(main())

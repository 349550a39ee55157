#!/usr/bin/env python
"""Seed the catalog structure and sample questions without going through HTTP."""

import argparse
import json
import logging
import sys
from pathlib import Path

# run from anywhere: the service modules live one level up
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import settings  # noqa: E402
from catalog import reload_catalog  # noqa: E402
from db import SessionLocal  # noqa: E402
from seeding import seed_questions, seed_structure  # noqa: E402


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--catalog-dir",
        type=Path,
        default=None,
        help=f"seed data directory (default: {settings.CATALOG_DIR})",
    )
    parser.add_argument(
        "--structure-only",
        action="store_true",
        help="create subjects, systems and marks sections but no questions",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL)
    loaded = reload_catalog(args.catalog_dir)
    logging.getLogger("seed_catalog").info("loaded %d seed questions", loaded)

    with SessionLocal() as db:
        report = {"structure": seed_structure(db)}
        if not args.structure_only:
            report["questions"] = seed_questions(db)

    print(json.dumps(report, indent=2))
    failed = any(part["errors"] for part in report.values())
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())

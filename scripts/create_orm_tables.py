from __future__ import annotations

import argparse
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from sqlalchemy import create_engine, inspect  # noqa: E402

from skillgap.config import build_sqlalchemy_db_url, settings  # noqa: E402
from skillgap.database import Base, mask_db_url  # noqa: E402
import skillgap.models  # noqa: F401,E402


def _select_tables(names: list[str] | None):
    if not names:
        return list(Base.metadata.sorted_tables)
    unknown = sorted(set(names) - set(Base.metadata.tables))
    if unknown:
        raise SystemExit(f"unknown table(s): {', '.join(unknown)}")
    # Keep dependency order so foreign keys resolve.
    return [table for table in Base.metadata.sorted_tables if table.name in names]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Create the users, resumes, job description, analysis and learning tables."
    )
    parser.add_argument("--db-url", default=None, help="Defaults to DB_URL / DB_* settings.")
    parser.add_argument("--only", nargs="+", metavar="TABLE", help="Create just these tables.")
    parser.add_argument("--dry-run", action="store_true", help="List missing tables without creating them.")
    parser.add_argument("--yes", action="store_true", help="Confirm DDL against a non-sqlite database.")
    args = parser.parse_args(argv)

    url = args.db_url or build_sqlalchemy_db_url(settings)
    is_sqlite = str(url).startswith("sqlite")
    tables = _select_tables(args.only)
    if not is_sqlite and not (args.yes or args.dry_run):
        print("Pass --yes to create tables on a shared database:", mask_db_url(url))
        return 2

    connect_args = {"check_same_thread": False} if is_sqlite else {}
    engine = create_engine(url, pool_pre_ping=True, future=True, connect_args=connect_args)
    existing = set(inspect(engine).get_table_names())
    missing = [table for table in tables if table.name not in existing]

    print("target:", mask_db_url(url))
    print("missing:", ", ".join(t.name for t in missing) or "none")
    if args.dry_run or not missing:
        return 0

    Base.metadata.create_all(bind=engine, tables=missing)
    print("created:", ", ".join(t.name for t in missing))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from pydantic import ValidationError  # noqa: E402

from skillgap.database import Base, SessionLocal, engine  # noqa: E402
from skillgap.models.learning_resource import LearningResource  # noqa: E402
from skillgap.schemas.learning import ResourceCreate  # noqa: E402


DEFAULT_CATALOG = Path(__file__).resolve().parents[1] / "skillgap" / "data" / "learning_resources.json"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the learning resource catalog from a JSON file.")
    parser.add_argument("--catalog", default=str(DEFAULT_CATALOG))
    parser.add_argument("--truncate", action="store_true")
    args = parser.parse_args(argv)

    Base.metadata.create_all(bind=engine)

    catalog_path = Path(args.catalog)
    items = json.loads(catalog_path.read_text(encoding="utf-8"))

    inserted = 0
    skipped = 0
    with SessionLocal() as db:
        if args.truncate:
            db.query(LearningResource).delete()
            db.commit()

        for item in items:
            try:
                entry = ResourceCreate.model_validate(item)
            except ValidationError as exc:
                print("skipping invalid entry", item.get("title"), exc.error_count(), "errors")
                skipped += 1
                continue
            url = str(entry.url)
            # Re-running the seed must not duplicate entries.
            if db.query(LearningResource).filter(LearningResource.url == url).first():
                skipped += 1
                continue
            db.add(LearningResource(**entry.model_dump(exclude={"url"}), url=url))
            inserted += 1

        db.commit()

    print("seeded", inserted, "skipped", skipped, "from", catalog_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

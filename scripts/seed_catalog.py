"""Create the entity store tables and seed the sample product catalog.

Connects to ``--database-url`` (or ``DATABASE_URL`` from the environment or a
project ``.env``), falling back to a SQLite file or an in-memory database, and
prints the full view of every seeded entity.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

CURRENT_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = CURRENT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

load_dotenv(PROJECT_ROOT / ".env")

from entity_store.db.engine import create_engine, create_session_factory
from entity_store.db.schema import Base, create_all
from entity_store.startup import seed_catalog
from entity_store.store import create_entity_store


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the sample product catalog")
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="SQLAlchemy URL (defaults to DATABASE_URL).",
    )
    parser.add_argument(
        "--sqlite-path",
        type=Path,
        default=None,
        help="SQLite database file used when no URL is configured.",
    )
    parser.add_argument(
        "--reset-schema",
        action="store_true",
        help="Drop and recreate all tables before seeding.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    logging.basicConfig(
        level=logging.INFO if not args.quiet else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )
    logger = logging.getLogger("seed_catalog")

    database_url = args.database_url or os.getenv("DATABASE_URL")
    if database_url:
        logger.info("Using database: %s", database_url)
        engine = create_engine(database_url)
    elif args.sqlite_path:
        logger.info("Using database: %s", args.sqlite_path)
        engine = create_engine(sqlite_path=args.sqlite_path)
    else:
        logger.info("Using database: sqlite://:memory:")
        engine = create_engine()

    if args.reset_schema:
        Base.metadata.drop_all(engine)
    create_all(engine)

    store = create_entity_store(create_session_factory(engine))
    schemas = seed_catalog(store)
    logger.info("Schemas ready: %s", ", ".join(sorted(schemas)))

    for entity_type in schemas:
        views, page = store.list_entity_views(entity_type, per_page=100)
        logger.info("%s: %d entit(y/ies)", entity_type, page.total_count)
        for view in views:
            print(json.dumps(view, indent=2, default=str))


if __name__ == "__main__":
    main()

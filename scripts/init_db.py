"""Create the configured database and apply schema.sql (and seed.sql with --seed).

Usage: APP_ENV=development python scripts/init_db.py [--seed]
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.institute_system.institute_system.common.app_logger import get_logger, setup_logging
from src.institute_system.institute_system.database.bootstrap import apply_schema, apply_seed_sql, list_tables

SQL_DIR = REPO_ROOT / "database"


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--seed", action="store_true", help="also load demo data from seed.sql")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger = get_logger("scripts")
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=SQL_DIR / "schema.sql")
    if args.seed:
        apply_seed_sql(db_config, seed_path=SQL_DIR / "seed.sql")

    logger.info(
        "database ready: %s@%s/%s (tables=%s, seeded=%s)",
        db_config["user"], db_config["host"], db_config["database"], len(list_tables(db_config)), args.seed,
    )


if __name__ == "__main__":
    main()

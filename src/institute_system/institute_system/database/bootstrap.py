"""Apply database/schema.sql and database/seed.sql to the configured server."""

from __future__ import annotations

import re
from contextlib import closing
from pathlib import Path
from typing import Iterator, Optional

import mysql.connector

from ..common.app_logger import get_logger
from .connection import DBConfig

logger = get_logger("bootstrap")

_DB_SELECTION = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")


def _connect(db_config: dict, *, with_database: bool = True):
    target = DBConfig.from_dict(db_config)
    return mysql.connector.connect(use_pure=True, **target.connect_kwargs(with_database=with_database))


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on ``;`` outside quoted literals."""

    start = 0
    quote: Optional[str] = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if ch == "\\" and quote:
            i += 2
            continue
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = sql[start:].strip()
    if tail:
        yield tail


def _prepare_script(path: Path) -> str:
    # The target database comes from DB_CONFIG, not from the script.
    sql = path.read_text(encoding="utf-8")
    return _LINE_COMMENT.sub("", _DB_SELECTION.sub("", sql))


def ensure_database_exists(db_config: dict) -> None:
    name = DBConfig.from_dict(db_config).database
    with closing(_connect(db_config, with_database=False)) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute(
                f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
            )
        conn.commit()


def _run_script(db_config: dict, path: Path) -> int:
    statements = list(iter_sql_statements(_prepare_script(path)))
    with closing(_connect(db_config)) as conn:
        with closing(conn.cursor()) as cur:
            for stmt in statements:
                cur.execute(stmt)
        conn.commit()
    return len(statements)


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, Path(schema_path))
    logger.info("applied %s schema statements from %s", count, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, Path(seed_path))
    logger.info("applied %s seed statements from %s", count, seed_path)


def list_tables(db_config: dict) -> list[str]:
    with closing(_connect(db_config)) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute("SHOW TABLES")
            return [row[0] for row in cur.fetchall()]

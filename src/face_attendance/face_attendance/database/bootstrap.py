from __future__ import annotations

import logging

from .connection import DatabaseConnection
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)

KV_TABLE = "kv_store"

KV_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS `{KV_TABLE}` (
    name VARCHAR(191) NOT NULL PRIMARY KEY,
    body LONGTEXT NOT NULL,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
) CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci
"""


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    database = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection) -> None:
    """Create the database and key-value table if missing (idempotent)."""

    ensure_database_exists(conn_factory)
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute(KV_SCHEMA)
    logger.info("Key-value schema ready in %s", conn_factory.config.database)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [str(r[0]) for r in cur.fetchall()]

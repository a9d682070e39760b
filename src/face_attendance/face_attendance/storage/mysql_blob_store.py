from __future__ import annotations

import logging
from typing import Mapping, Optional

import mysql.connector

from ..core.exceptions import StorageError
from ..database.bootstrap import KV_TABLE
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone

logger = logging.getLogger(__name__)


class MySQLBlobStore:
    """Blob records as rows of the ``kv_store`` table; ``set_many`` runs in one transaction."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, name: str) -> Optional[str]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"SELECT body FROM `{KV_TABLE}` WHERE name=%s", (name,))
                row = fetchone(cur)
                return None if not row else str(row["body"])
        except mysql.connector.Error as e:
            logger.error("Reading %s failed: %s", name, e)
            raise StorageError(f"Cannot read {name}") from e

    def set(self, name: str, body: str) -> None:
        self.set_many({name: body})

    def delete(self, name: str) -> None:
        self.set_many({name: None})

    def set_many(self, records: Mapping[str, Optional[str]]) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                for name, body in records.items():
                    if body is None:
                        cur.execute(f"DELETE FROM `{KV_TABLE}` WHERE name=%s", (name,))
                    else:
                        cur.execute(
                            f"""
                            INSERT INTO `{KV_TABLE}`(name, body) VALUES(%s, %s)
                            ON DUPLICATE KEY UPDATE body=VALUES(body)
                            """,
                            (name, str(body)),
                        )
        except mysql.connector.Error as e:
            logger.error("Writing %s failed: %s", ", ".join(records), e)
            raise StorageError("Cannot write records") from e

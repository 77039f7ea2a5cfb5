from __future__ import annotations

import re
from typing import Optional

import mysql.connector

from ..core.exceptions import StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .base import KeyValueStore

_SAFE_TABLE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class MySQLKeyValueStore(KeyValueStore):
    def __init__(self, conn_factory: DatabaseConnection, *, table: str = "kv_store"):
        if not _SAFE_TABLE.match(table):
            raise ValueError(f"Invalid table name: {table!r}")
        self._conn_factory = conn_factory
        self._table = table

    def get(self, key: str) -> Optional[str]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"SELECT store_value FROM `{self._table}` WHERE store_key=%s",
                    (key,),
                )
                row = fetchone(cur)
        except mysql.connector.Error as e:
            raise StorageError(f"Cannot read key {key!r}: {e}") from e
        return row["store_value"] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    INSERT INTO `{self._table}`(store_key, store_value)
                    VALUES(%s,%s)
                    ON DUPLICATE KEY UPDATE store_value=VALUES(store_value)
                    """,
                    (key, value),
                )
        except mysql.connector.Error as e:
            raise StorageError(f"Cannot write key {key!r}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"DELETE FROM `{self._table}` WHERE store_key=%s", (key,))
        except mysql.connector.Error as e:
            raise StorageError(f"Cannot delete key {key!r}: {e}") from e

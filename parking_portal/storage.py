"""Key-value repositories standing in for the browser's local storage.

Values are opaque strings (JSON text in practice); decoding them is the job of
``parking_portal.state``.
"""
from __future__ import annotations

import sqlite3
from abc import ABC, abstractmethod
from logging import getLogger

SHARED_NAMESPACE = 'shared'

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS kv (
    namespace TEXT NOT NULL,
    key TEXT NOT NULL,
    value TEXT NOT NULL,
    PRIMARY KEY (namespace, key)
);
"""


def init_db(conn: sqlite3.Connection):
    conn.executescript(SCHEMA_SQL)
    conn.commit()


class KeyValueStore(ABC):
    """Narrow repository interface: get, set, remove"""

    @abstractmethod
    def get(self, key: str) -> str | None:
        pass

    @abstractmethod
    def set(self, key: str, value: str):
        pass

    @abstractmethod
    def remove(self, key: str):
        pass

    def purge(self, key: str):
        """Remove a key from every namespace sharing this store's backend"""
        self.remove(key)


class MemoryStore(KeyValueStore):
    """Dictionary backed store, used in tests"""

    def __init__(self, data: dict[str, str] | None = None):
        self.data = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str):
        self.data[key] = value

    def remove(self, key: str):
        self.data.pop(key, None)


class SQLiteStore(KeyValueStore):
    """One namespace of the ``kv`` table"""

    def __init__(self, conn: sqlite3.Connection, namespace: str = SHARED_NAMESPACE):
        self.conn = conn
        self.namespace = namespace

    def get(self, key: str) -> str | None:
        row = self.conn.execute('SELECT value FROM kv WHERE namespace=? AND key=?',
                                (self.namespace, key)).fetchone()
        if row is None:
            return None
        return row[0]

    def set(self, key: str, value: str):
        self.conn.execute(
            'INSERT INTO kv(namespace, key, value) VALUES (?,?,?) '
            'ON CONFLICT(namespace, key) DO UPDATE SET value=excluded.value',
            (self.namespace, key, value))
        self.conn.commit()

    def remove(self, key: str):
        self.conn.execute('DELETE FROM kv WHERE namespace=? AND key=?', (self.namespace, key))
        self.conn.commit()

    def purge(self, key: str):
        cur = self.conn.execute('DELETE FROM kv WHERE key=?', (key,))
        self.conn.commit()
        getLogger(__name__).info('Purged %i record(s) stored under %s', cur.rowcount, key)

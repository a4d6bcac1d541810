from __future__ import annotations

import re


def _squash(sql: str) -> str:
    return re.sub(r"\s+", " ", sql).strip()


class RecordingCursor:
    def __init__(self, db):
        self.db = db
        self.lastrowid = None
        self.rowcount = 0

    def execute(self, sql, params=None):
        sql = _squash(sql)
        self.db.log.append(("execute", sql, params))
        self.db.raise_if_scheduled(sql)
        if sql.startswith("INSERT"):
            self.db.next_id += 1
            self.lastrowid = self.db.next_id
        self.rowcount = self.db.rowcount

    def fetchone(self):
        return None

    def fetchall(self):
        return []

    def close(self):
        self.db.log.append(("cursor.close",))


class RecordingConnection:
    def __init__(self, db):
        self.db = db

    def cursor(self, dictionary=False):
        return RecordingCursor(self.db)

    def commit(self):
        self.db.log.append(("commit",))

    def rollback(self):
        self.db.log.append(("rollback",))

    def close(self):
        self.db.log.append(("conn.close",))


class RecordingDB:
    """Connection factory that records every statement and transaction step.

    ``fail(prefix, nth, error)`` makes the nth statement starting with
    ``prefix`` raise ``error``.
    """

    def __init__(self, *, rowcount: int = 1):
        self.log = []
        self.next_id = 100
        self.rowcount = rowcount
        self._failures = {}
        self._seen = {}

    def fail(self, prefix: str, nth: int, error: Exception) -> None:
        self._failures[(prefix, nth)] = error

    def raise_if_scheduled(self, sql: str) -> None:
        for prefix in {p for p, _ in self._failures}:
            if sql.startswith(prefix):
                self._seen[prefix] = self._seen.get(prefix, 0) + 1
                error = self._failures.pop((prefix, self._seen[prefix]), None)
                if error is not None:
                    raise error

    def connect(self):
        return RecordingConnection(self)

    def statements(self):
        return [e[1] for e in self.log if e[0] == "execute"]

    def steps(self):
        return [e[0] for e in self.log]

from __future__ import annotations

import threading

import pytest
from mysql.connector import errors as mysql_errors

from src.team_tasks.team_tasks.core.exceptions import InternalError
from src.team_tasks.team_tasks.database.connection import DatabaseConnection, DBConfig


class FakeConnection:
    def __init__(self, pool):
        self.pool = pool
        self.closed = False

    def cursor(self, dictionary=False):
        return "cursor"

    def close(self):
        self.closed = True
        self.pool.in_use -= 1


class FakeMySQLPool:
    """Fails like MySQLConnectionPool when every connection is handed out."""

    def __init__(self, size, fail=False):
        self.size = size
        self.in_use = 0
        self.fail = fail

    def get_connection(self):
        if self.fail:
            raise mysql_errors.InterfaceError("server gone")
        if self.in_use >= self.size:
            raise mysql_errors.PoolError("Failed getting connection; pool exhausted")
        self.in_use += 1
        return FakeConnection(self)


def _db(size=2, timeout=0.05, fail=False):
    config = DBConfig(host="h", port=3306, user="u", password="p", database="d", pool_size=size, pool_timeout=timeout)
    pool = FakeMySQLPool(size, fail=fail)
    return DatabaseConnection(config, pool=pool), pool


def test_connections_delegate_and_free_their_slot():
    db, pool = _db(size=1)

    conn = db.connect()
    assert conn.cursor(dictionary=True) == "cursor"
    conn.close()
    conn.close()

    assert pool.in_use == 0
    again = db.connect()
    again.close()


def test_exhausted_pool_times_out_with_domain_error():
    db, pool = _db(size=1, timeout=0.05)
    held = db.connect()

    with pytest.raises(InternalError) as exc:
        db.connect()
    assert exc.value.status_code == 500
    assert pool.in_use == 1

    held.close()


def test_waiting_request_gets_connection_once_one_is_returned():
    db, _ = _db(size=1, timeout=2)
    held = db.connect()
    got = []

    worker = threading.Thread(target=lambda: got.append(db.connect()))
    worker.start()
    threading.Timer(0.05, held.close).start()
    worker.join(timeout=3)

    assert len(got) == 1
    got[0].close()


def test_failed_checkout_does_not_leak_a_slot():
    db, pool = _db(size=1, fail=True)

    for _ in range(3):
        with pytest.raises(mysql_errors.InterfaceError):
            db.connect()

    pool.fail = False
    db.connect().close()

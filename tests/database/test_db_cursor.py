from __future__ import annotations

import pytest
from mysql.connector import errors as mysql_errors

from src.team_tasks.team_tasks.core.constants import UQ_TEAMS_MANAGER_CODE, UQ_USERS_EMAIL
from src.team_tasks.team_tasks.core.exceptions import DuplicateRecordError
from src.team_tasks.team_tasks.database.mysql_base import (
    db_cursor,
    is_duplicate_key,
    placeholders,
    translate_duplicates,
)


class FakeCursor:
    def __init__(self, log):
        self.log = log

    def execute(self, sql, params=None):
        self.log.append(("execute", sql))

    def close(self):
        self.log.append(("cursor.close",))


class FakeConnection:
    def __init__(self, log):
        self.log = log

    def cursor(self, dictionary=False):
        self.log.append(("cursor", dictionary))
        return FakeCursor(self.log)

    def commit(self):
        self.log.append(("commit",))

    def rollback(self):
        self.log.append(("rollback",))

    def close(self):
        self.log.append(("conn.close",))


class FakePool:
    def __init__(self):
        self.log = []

    def connect(self):
        return FakeConnection(self.log)


def _events(log):
    return [e[0] for e in log]


def test_commits_and_releases_on_success():
    pool = FakePool()
    with db_cursor(pool) as (_, cur):
        cur.execute("INSERT 1")
        cur.execute("INSERT 2")

    assert _events(pool.log) == ["cursor", "execute", "execute", "commit", "cursor.close", "conn.close"]
    assert pool.log[0] == ("cursor", True)


def test_rolls_back_and_releases_on_error():
    pool = FakePool()
    with pytest.raises(RuntimeError):
        with db_cursor(pool) as (_, cur):
            cur.execute("INSERT 1")
            raise RuntimeError("boom")

    events = _events(pool.log)
    assert "commit" not in events
    assert "rollback" in events
    assert events[-1] == "conn.close"
    assert "cursor.close" in events


def _dup(key):
    return mysql_errors.IntegrityError(msg=f"Duplicate entry 'x' for key 'users.{key}'", errno=1062)


def test_is_duplicate_key():
    assert is_duplicate_key(_dup(UQ_USERS_EMAIL))
    assert is_duplicate_key(_dup(UQ_USERS_EMAIL), UQ_USERS_EMAIL)
    assert not is_duplicate_key(_dup(UQ_USERS_EMAIL), UQ_TEAMS_MANAGER_CODE)
    assert not is_duplicate_key(mysql_errors.IntegrityError(msg="fk", errno=1452))
    assert not is_duplicate_key(ValueError("nope"))


def test_translate_duplicates_names_the_constraint():
    with pytest.raises(DuplicateRecordError) as exc:
        with translate_duplicates([UQ_USERS_EMAIL, UQ_TEAMS_MANAGER_CODE]):
            raise _dup(UQ_TEAMS_MANAGER_CODE)
    assert exc.value.key == UQ_TEAMS_MANAGER_CODE


def test_translate_duplicates_passes_other_integrity_errors():
    with pytest.raises(mysql_errors.IntegrityError):
        with translate_duplicates([UQ_USERS_EMAIL]):
            raise mysql_errors.IntegrityError(msg="fk", errno=1452)


def test_placeholders():
    assert placeholders([1, 2, 3]) == "%s,%s,%s"
    with pytest.raises(ValueError):
        placeholders([])

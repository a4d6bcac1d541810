from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Sequence

from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

from ..core.exceptions import DuplicateRecordError

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory, *, dictionary: bool = True):
    """One pooled connection, one transaction.

    Commits when the block exits normally, rolls back and re-raises on any
    exception, and always hands the connection back to the pool.
    """
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def placeholders(values: Sequence[Any]) -> str:
    """``%s,%s,...`` for an IN (...) clause. Callers must pass a non-empty sequence."""
    if not values:
        raise ValueError("placeholders() needs at least one value")
    return ",".join(["%s"] * len(values))


def is_duplicate_key(err: Exception, key: Optional[str] = None) -> bool:
    if not isinstance(err, mysql_errors.IntegrityError):
        return False
    if getattr(err, "errno", None) != errorcode.ER_DUP_ENTRY:
        return False
    return key is None or key in str(getattr(err, "msg", "") or err)


@contextmanager
def translate_duplicates(keys: Iterable[str]):
    """Turn MySQL duplicate-key errors on the named constraints into DuplicateRecordError."""
    keys = tuple(keys)
    try:
        yield
    except mysql_errors.IntegrityError as e:
        for key in keys:
            if is_duplicate_key(e, key):
                logger.debug("duplicate key on %s", key)
                raise DuplicateRecordError(key) from e
        raise

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from mysql.connector import pooling

from ..core.exceptions import InternalError

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 10
    pool_name: str = "team_tasks"
    pool_timeout: float = 5.0


class PooledConnection:
    """A pooled connection that frees its slot when closed."""

    def __init__(self, conn, release: Callable[[], None]):
        self._conn = conn
        self._release: Optional[Callable[[], None]] = release

    def close(self) -> None:
        try:
            self._conn.close()
        finally:
            release, self._release = self._release, None
            if release is not None:
                release()

    def __getattr__(self, name):
        return getattr(self._conn, name)


class DatabaseConnection:
    """Bounded connection pool shared by every repository.

    The pool is created on first use so the app can be built without a
    reachable database. ``connect()`` hands out a pooled connection,
    waiting up to ``pool_timeout`` seconds when every connection is in
    use; closing it returns it to the pool.
    """

    def __init__(self, config: DBConfig, pool=None):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = pool
        self._lock = threading.Lock()
        self._slots = threading.BoundedSemaphore(int(config.pool_size))

    @property
    def config(self) -> DBConfig:
        return self._config

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        if self._pool is None:
            with self._lock:
                if self._pool is None:
                    self._pool = pooling.MySQLConnectionPool(
                        pool_name=self._config.pool_name,
                        pool_size=int(self._config.pool_size),
                        pool_reset_session=True,
                        host=self._config.host,
                        port=int(self._config.port),
                        user=self._config.user,
                        password=self._config.password,
                        database=self._config.database,
                        autocommit=False,
                    )
        return self._pool

    def connect(self) -> PooledConnection:
        if not self._slots.acquire(timeout=self._config.pool_timeout):
            logger.warning("no pooled connection free after %ss", self._config.pool_timeout)
            raise InternalError("Database is busy, try again later")
        try:
            conn = self._get_pool().get_connection()
        except Exception:
            self._slots.release()
            raise
        return PooledConnection(conn, self._slots.release)

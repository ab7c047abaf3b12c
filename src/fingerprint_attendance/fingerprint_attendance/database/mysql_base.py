from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """One connection + cursor; commit on success, rollback and re-raise on error.

    Inside ``conn_factory.transaction()`` the thread's open connection is used
    and commit/rollback are left to the transaction.
    """

    shared = conn_factory.current()
    if shared is not None:
        cur = shared.cursor(dictionary=dictionary)
        try:
            yield shared, cur
        finally:
            cur.close()
        return

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        logger.exception("Database operation failed, rolling back")
        conn.rollback()
        raise
    finally:
        conn.close()


class MySQLTransactionManager:
    """Runs one employee's unit of work in a single MySQL transaction."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self, employee_code: str) -> Iterator[None]:
        try:
            with self._conn_factory.transaction():
                yield
        except Exception:
            logger.warning("Rolled back unit of work for %s", employee_code)
            raise


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])

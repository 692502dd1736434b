from __future__ import annotations

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.constants import MYSQL_NO_SUCH_TABLE
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
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


def is_missing_table(exc: BaseException) -> bool:
    return isinstance(exc, mysql.connector.Error) and getattr(exc, "errno", None) == MYSQL_NO_SUCH_TABLE


@contextmanager
def tolerate_missing_table(what: str):
    """Degrade an optional lookup to an empty result when its table is absent."""
    try:
        yield
    except mysql.connector.Error as exc:
        if not is_missing_table(exc):
            raise
        logger.warning("%s unavailable (table missing): %s", what, exc)


def as_float(value: Any) -> float:
    """Normalize MySQL DECIMAL/None/str values to float."""

    if value is None:
        return 0.0
    if isinstance(value, Decimal):
        return float(value)
    return float(value)

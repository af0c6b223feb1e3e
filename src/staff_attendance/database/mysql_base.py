from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from .connection import DatabaseConnection

Row = Dict[str, Any]


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """Yield (connection, cursor) for one unit of work.

    Commits when the block exits cleanly and rolls back on any exception.
    """
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def is_duplicate_key(exc: BaseException) -> bool:
    return isinstance(exc, IntegrityError) and exc.errno == errorcode.ER_DUP_ENTRY


def fetchone(cur) -> Optional[Row]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Row]:
    return list(cur.fetchall() or [])


def to_float(value: Any) -> Optional[float]:
    """DOUBLE/DECIMAL column -> float, keeping NULL as None."""
    return None if value is None else float(value)

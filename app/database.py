"""Thin query helpers over the Flask-SQLAlchemy engine pool.

``query`` runs one parameterized statement and commits it. ``transaction``
hands a callback a :class:`Transaction` whose statements share a single
BEGIN/COMMIT; any exception rolls everything back and is re-raised.
"""
import logging
import time
from typing import Any, Callable, Dict, List, NamedTuple, Optional, TypeVar

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db

logger = logging.getLogger(__name__)

T = TypeVar("T")


class QueryResult(NamedTuple):
    rows: List[Dict[str, Any]]
    row_count: int

    def first(self) -> Optional[Dict[str, Any]]:
        return self.rows[0] if self.rows else None


def _execute(sql: str, params: Optional[Dict[str, Any]] = None) -> QueryResult:
    start = time.perf_counter()
    result = db.session.execute(text(sql), params or {})
    if result.returns_rows:
        rows = [dict(row._mapping) for row in result]
        row_count = len(rows)
    else:
        rows = []
        row_count = max(result.rowcount, 0)
    elapsed = (time.perf_counter() - start) * 1000
    logger.debug("[DB Query] %.1fms - %s", elapsed, sql.strip().split("\n")[0])
    return QueryResult(rows=rows, row_count=row_count)


def query(sql: str, params: Optional[Dict[str, Any]] = None) -> QueryResult:
    try:
        result = _execute(sql, params)
        db.session.commit()
        return result
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Database query error")
        raise


class Transaction:
    """Statement runner bound to an open transaction."""

    def query(self, sql: str, params: Optional[Dict[str, Any]] = None) -> QueryResult:
        return _execute(sql, params)


def transaction(fn: Callable[[Transaction], T]) -> T:
    try:
        result = fn(Transaction())
        db.session.commit()
        return result
    except Exception:
        db.session.rollback()
        logger.warning("Transaction rolled back", exc_info=True)
        raise

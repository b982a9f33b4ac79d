# backend/core/query_logger.py

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict

from sqlalchemy import event
from sqlalchemy.engine import Engine

from core.config import get_settings

logger = logging.getLogger("sqlalchemy.engine")
query_logger = logging.getLogger("query_performance")

settings = get_settings()


class QueryStats:
    """Running counters for executed statements"""

    def __init__(self, slow_query_threshold: float):
        self.slow_query_threshold = slow_query_threshold
        self.reset()

    def reset(self):
        self.total_queries = 0
        self.slow_queries = 0
        self.total_time = 0.0

    def record(self, elapsed: float) -> bool:
        """Record one statement; returns True when it was slow."""
        self.total_queries += 1
        self.total_time += elapsed
        if elapsed > self.slow_query_threshold:
            self.slow_queries += 1
            return True
        return False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "total_queries": self.total_queries,
            "slow_queries": self.slow_queries,
            "total_time": round(self.total_time, 3),
            "average_time": round(
                self.total_time / max(self.total_queries, 1), 3
            ),
        }


query_stats = QueryStats(settings.SLOW_QUERY_THRESHOLD_SECONDS)


def setup_query_logging(engine: Engine):
    """
    Setup query logging for an SQLAlchemy engine

    Args:
        engine: SQLAlchemy engine instance
    """

    @event.listens_for(engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

        if settings.LOG_SQL_QUERIES:
            logger.debug("Start Query: %s", statement)

    @event.listens_for(engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        total_time = time.perf_counter() - conn.info["query_start_time"].pop(-1)

        if query_stats.record(total_time):
            query_logger.warning(
                "SLOW QUERY (%.3fs): %s...", total_time, statement[:200]
            )

        if settings.LOG_SQL_QUERIES:
            logger.debug("Query Complete in %.3fs", total_time)


@contextmanager
def log_query_performance(operation_name: str):
    """
    Context manager to log performance of a database operation

    Example:
        with log_query_performance("scrap_request"):
            ...
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if elapsed > query_stats.slow_query_threshold:
            query_logger.warning("Slow operation %s took %.3fs", operation_name, elapsed)
        else:
            query_logger.debug("Operation %s took %.3fs", operation_name, elapsed)

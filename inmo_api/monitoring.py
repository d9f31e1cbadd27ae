"""Slow statement logging for the async engine.

Listing filters combine several optional predicates, so the statements behind
a single page can vary a lot in cost.  Anything slower than
``SLOW_QUERY_THRESHOLD`` is logged together with the id of the request that
issued it.
"""

import logging
import time
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine

from inmo_api.utils.request_context import get_request_id

logger = logging.getLogger(__name__)

_MAX_LOGGED_STATEMENT_CHARS = 500
_START_KEY = "inmo_query_start"


def _shorten(statement: str) -> str:
    if len(statement) <= _MAX_LOGGED_STATEMENT_CHARS:
        return statement
    return statement[:_MAX_LOGGED_STATEMENT_CHARS] + "..."


def setup_query_monitoring(engine: AsyncEngine, slow_query_threshold: float) -> None:
    """Attach cursor timing listeners to the engine's synchronous core."""

    sync_engine = engine.sync_engine

    @event.listens_for(sync_engine, "before_cursor_execute")
    def _start_timer(
        conn: Any,
        cursor: Any,
        statement: str,
        parameters: Any,
        context: Any,
        executemany: bool,
    ) -> None:
        conn.info.setdefault(_START_KEY, []).append(time.perf_counter())

    @event.listens_for(sync_engine, "after_cursor_execute")
    def _log_if_slow(
        conn: Any,
        cursor: Any,
        statement: str,
        parameters: Any,
        context: Any,
        executemany: bool,
    ) -> None:
        started = conn.info.get(_START_KEY)
        if not started:
            return
        elapsed = time.perf_counter() - started.pop()
        if elapsed < slow_query_threshold:
            return

        request_id = get_request_id()
        logger.warning(
            f"Slow query ({elapsed:.3f}s, request {request_id}): "
            f"{_shorten(statement)}",
            extra={
                "duration_seconds": elapsed,
                "request_id": request_id,
                "threshold_seconds": slow_query_threshold,
            },
        )

    logger.info(f"Slow query logging enabled (threshold: {slow_query_threshold}s)")


__all__ = ["setup_query_monitoring"]

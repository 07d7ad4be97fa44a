# boardshelf/services/db_monitor.py
"""
Connection health and query metrics for the async engine.

`DatabaseMetrics` only counts; it is attached to engine events and knows
nothing about health. `DatabaseMonitor` owns the health check, the startup
retry loop and the pool / server statistics used by `/health`.
"""
import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine

from boardshelf.config import Settings
from boardshelf.errors import UNAVAILABLE_ERRORS, Unavailable
from boardshelf.utils.logging import log_error, log_info, log_success, log_warning

logger = logging.getLogger(__name__)

_START_KEY = "boardshelf_query_start"


class DatabaseMetrics:
    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.total_queries = 0
        self.successful_queries = 0
        self.failed_queries = 0
        self.average_query_time = 0.0  # ms
        self.started_at = time.monotonic()

    def record_query(self, success: bool, elapsed_ms: float) -> None:
        self.total_queries += 1
        if success:
            self.successful_queries += 1
        else:
            self.failed_queries += 1
        # running mean
        total_time = self.average_query_time * (self.total_queries - 1) + elapsed_ms
        self.average_query_time = total_time / self.total_queries

    @property
    def success_rate(self) -> float:
        if not self.total_queries:
            return 0.0
        return self.successful_queries / self.total_queries * 100

    def snapshot(self) -> Dict[str, Any]:
        return {
            "totalQueries": self.total_queries,
            "successfulQueries": self.successful_queries,
            "failedQueries": self.failed_queries,
            "successRate": round(self.success_rate, 2),
            "averageQueryTime": round(self.average_query_time, 3),
            "uptime": round(time.monotonic() - self.started_at, 3),
        }

    def attach(self, engine: AsyncEngine) -> None:
        """Record every statement the engine executes."""
        sync_engine = engine.sync_engine

        @event.listens_for(sync_engine, "before_cursor_execute")
        def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            conn.info.setdefault(_START_KEY, []).append(time.perf_counter())

        @event.listens_for(sync_engine, "after_cursor_execute")
        def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            self.record_query(True, _elapsed_ms(conn))

        @event.listens_for(sync_engine, "handle_error")
        def handle_error(exception_context):
            conn = exception_context.connection
            self.record_query(False, _elapsed_ms(conn) if conn is not None else 0.0)


def _elapsed_ms(conn) -> float:
    starts = conn.info.get(_START_KEY)
    if not starts:
        return 0.0
    return (time.perf_counter() - starts.pop()) * 1000


class DatabaseMonitor:
    def __init__(self, engine: AsyncEngine, settings: Settings, metrics: Optional[DatabaseMetrics] = None) -> None:
        self.engine = engine
        self.settings = settings
        self.metrics = metrics
        self.connected = False
        self.last_health_check: Optional[datetime] = None

    async def _select_one(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def check_health(self) -> bool:
        try:
            await asyncio.wait_for(self._select_one(), timeout=self.settings.DB_QUERY_TIMEOUT)
        except (*UNAVAILABLE_ERRORS, OSError) as exc:
            if self.connected:
                log_error(f"Database health check failed: {exc!r}")
            self.connected = False
            return False

        self.connected = True
        self.last_health_check = datetime.now(timezone.utc)
        return True

    async def connect_with_retry(self) -> None:
        """Exponential backoff: backoff * 2**attempt seconds between attempts."""
        max_retries = max(1, self.settings.DB_MAX_RETRIES)
        for attempt in range(1, max_retries + 1):
            if await self.check_health():
                log_success("✅ Database connected successfully")
                return

            log_warning(f"❌ Database connection attempt {attempt}/{max_retries} failed")
            if attempt == max_retries:
                break
            delay = self.settings.DB_RETRY_BACKOFF * (2 ** attempt)
            log_info(f"⏳ Retrying connection in {delay:.1f}s...")
            await asyncio.sleep(delay)

        log_error("❌ Max connection retries reached. Database connection failed.")
        raise Unavailable("Could not connect to the database")

    def pool_status(self) -> Dict[str, Any]:
        pool = self.engine.sync_engine.pool
        status: Dict[str, Any] = {
            "class": type(pool).__name__,
            "configuredSize": self.settings.DB_POOL_SIZE,
            "maxConnections": self.settings.DB_MAX_CONNECTIONS,
        }
        # only QueuePool-style pools expose counters
        if hasattr(pool, "checkedout"):
            size = pool.size()
            checked_out = pool.checkedout()
            capacity = size + max(0, self.settings.max_overflow)
            status.update(
                {
                    "size": size,
                    "checkedIn": pool.checkedin(),
                    "checkedOut": checked_out,
                    "overflow": pool.overflow(),
                    "utilization": round(checked_out / capacity * 100, 2) if capacity else 0.0,
                }
            )
        return status

    async def performance_metrics(self) -> Dict[str, Any]:
        if self.engine.dialect.name != "postgresql":
            return {}
        query = text(
            """
            SELECT
                datname AS database_name,
                numbackends AS active_connections,
                xact_commit AS committed_transactions,
                xact_rollback AS rolled_back_transactions,
                blks_read AS blocks_read,
                blks_hit AS blocks_hit,
                tup_returned AS tuples_returned,
                tup_fetched AS tuples_fetched,
                tup_inserted AS tuples_inserted,
                tup_updated AS tuples_updated,
                tup_deleted AS tuples_deleted
            FROM pg_stat_database
            WHERE datname = current_database()
            """
        )
        try:
            async with self.engine.connect() as conn:
                result = await asyncio.wait_for(conn.execute(query), timeout=self.settings.DB_QUERY_TIMEOUT)
                row = result.mappings().first()
        except (*UNAVAILABLE_ERRORS, OSError) as exc:
            logger.error("Failed to get performance metrics: %r", exc)
            return {"error": str(exc)}

        if row is None:
            return {"error": "No database statistics available"}

        blocks_total = row["blocks_hit"] + row["blocks_read"]
        hit_ratio = row["blocks_hit"] / blocks_total * 100 if blocks_total else 0.0
        return {
            "database": row["database_name"],
            "connections": {"active": row["active_connections"]},
            "transactions": {
                "committed": row["committed_transactions"],
                "rolledBack": row["rolled_back_transactions"],
                "total": row["committed_transactions"] + row["rolled_back_transactions"],
            },
            "cache": {
                "hitRatio": round(hit_ratio, 2),
                "blocksHit": row["blocks_hit"],
                "blocksRead": row["blocks_read"],
            },
            "operations": {
                "returned": row["tuples_returned"],
                "fetched": row["tuples_fetched"],
                "inserted": row["tuples_inserted"],
                "updated": row["tuples_updated"],
                "deleted": row["tuples_deleted"],
            },
        }

    async def dispose(self) -> None:
        log_info("🔄 Disconnecting from database...")
        await self.engine.dispose()
        self.connected = False
        log_success("✅ Database disconnected successfully")

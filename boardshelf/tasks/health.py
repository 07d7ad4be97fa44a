# boardshelf/tasks/health.py

import os
import platform
import sys
import time
from datetime import datetime, timezone
from typing import Tuple

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from boardshelf.services.db_monitor import DatabaseMonitor
from boardshelf.utils.logging import log_info

_PROCESS_STARTED = time.monotonic()


def setup_health_scheduler(monitor: DatabaseMonitor, interval_seconds: int) -> AsyncIOScheduler:
    log_info(f"🕒 Scheduler started: database health check every {interval_seconds}s.")
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        monitor.check_health,
        IntervalTrigger(seconds=interval_seconds),
        id="database_health_check",
        replace_existing=True,
    )
    scheduler.start()
    return scheduler


def _system_info() -> dict:
    return {
        "uptime": round(time.monotonic() - _PROCESS_STARTED, 3),
        "pid": os.getpid(),
        "pythonVersion": sys.version.split()[0],
        "platform": platform.platform(),
    }


async def get_health_report(monitor: DatabaseMonitor) -> Tuple[bool, dict]:
    """Returns `(healthy, body)`; the route turns `healthy` into 200/503."""
    healthy = await monitor.check_health()
    database = {
        "connected": monitor.connected,
        "healthy": healthy,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "lastHealthCheck": monitor.last_health_check.isoformat() if monitor.last_health_check else None,
        "connectionPool": monitor.pool_status(),
    }
    if monitor.metrics is not None:
        database["metrics"] = monitor.metrics.snapshot()
    if healthy:
        database["performance"] = await monitor.performance_metrics()

    return healthy, {
        "status": "healthy" if healthy else "unhealthy",
        "database": database,
        "system": _system_info(),
    }

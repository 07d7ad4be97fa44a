# boardshelf/routes/health.py

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from boardshelf.dependencies import get_monitor
from boardshelf.services.db_monitor import DatabaseMonitor
from boardshelf.tasks.health import get_health_report

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health(monitor: DatabaseMonitor = Depends(get_monitor)):
    healthy, body = await get_health_report(monitor)
    return JSONResponse(status_code=200 if healthy else 503, content=body)


@router.post("/metrics/reset")
async def reset_metrics(monitor: DatabaseMonitor = Depends(get_monitor)):
    if monitor.metrics is not None:
        monitor.metrics.reset()
    return {"status": "ok"}

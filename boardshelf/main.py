# boardshelf/main.py

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from boardshelf.config import Settings, get_settings
from boardshelf.database import build_engine, build_session_factory, create_tables
from boardshelf.dependencies import ensure_database_connection
from boardshelf.errors import register_exception_handlers
from boardshelf.routes.game_files import router as files_router
from boardshelf.routes.games import router as games_router
from boardshelf.routes.health import router as health_router
from boardshelf.routes.play_sessions import router as sessions_router
from boardshelf.routes.players import router as players_router
from boardshelf.routes.tags import router as tags_router
from boardshelf.routes.wishlist import router as wishlist_router
from boardshelf.services.db_monitor import DatabaseMetrics, DatabaseMonitor
from boardshelf.tasks.health import setup_health_scheduler
from boardshelf.utils.logging import log_info, log_success, setup_logging

# every model must be imported before create_all
from boardshelf.models import game, game_file, play_session, player, tag, wishlist  # noqa: F401

logger = logging.getLogger("boardshelf.http")


@asynccontextmanager
async def lifespan(app: FastAPI):
    monitor: DatabaseMonitor = app.state.monitor
    settings: Settings = app.state.settings

    await monitor.connect_with_retry()
    await create_tables(monitor.engine)
    scheduler = setup_health_scheduler(monitor, settings.DB_HEALTH_CHECK_INTERVAL)
    log_success("✅ Application started and health scheduler initialized.")

    yield

    scheduler.shutdown(wait=False)
    await monitor.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    engine = build_engine(settings)
    metrics = DatabaseMetrics()
    metrics.attach(engine)

    app = FastAPI(
        title="BoardShelf API",
        description="Personal board-game collection: games, play sessions, players, tags, wishlist and files",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_factory = build_session_factory(engine)
    app.state.monitor = DatabaseMonitor(engine, settings, metrics)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.ORIGIN],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    register_exception_handlers(app)

    # Router registration
    api_dependencies = [Depends(ensure_database_connection)]
    for router in (games_router, wishlist_router, sessions_router, tags_router, players_router, files_router):
        app.include_router(router, prefix="/api", dependencies=api_dependencies)
    app.include_router(health_router)

    @app.get("/")
    async def read_root():
        return {"message": "BoardShelf API is running!", "status": "ok"}

    log_info(f"BoardShelf configured for {engine.dialect.name} database")
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("boardshelf.main:create_app", factory=True, host="127.0.0.1", port=8000, reload=True)

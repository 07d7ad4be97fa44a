"""
Tests for database monitoring and the /health endpoint
"""
import httpx
import pytest

from boardshelf.config import Settings
from boardshelf.errors import Unavailable
from boardshelf.main import create_app
from boardshelf.services.db_monitor import DatabaseMetrics


@pytest.fixture
def down_settings():
    """A SQLite file in a directory that does not exist: every connect fails"""
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:////nonexistent-dir/boardshelf.db",
        DB_MAX_RETRIES=2,
        DB_RETRY_BACKOFF=0,
        DB_QUERY_TIMEOUT=5,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
async def down_app(down_settings):
    app = create_app(down_settings)
    yield app
    await app.state.monitor.engine.dispose()


@pytest.fixture
async def down_client(down_app):
    transport = httpx.ASGITransport(app=down_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestDatabaseMetrics:

    def test_running_average(self):
        metrics = DatabaseMetrics()
        metrics.record_query(True, 10.0)
        metrics.record_query(True, 20.0)
        metrics.record_query(False, 30.0)

        assert metrics.total_queries == 3
        assert metrics.successful_queries == 2
        assert metrics.failed_queries == 1
        assert metrics.average_query_time == pytest.approx(20.0)
        assert metrics.success_rate == pytest.approx(200 / 3)

    def test_empty_success_rate(self):
        assert DatabaseMetrics().success_rate == 0.0

    def test_reset(self):
        metrics = DatabaseMetrics()
        metrics.record_query(True, 5.0)
        metrics.reset()

        snapshot = metrics.snapshot()
        assert snapshot["totalQueries"] == 0
        assert snapshot["averageQueryTime"] == 0.0

    async def test_attached_metrics_count_queries(self, client, app):
        metrics = app.state.monitor.metrics
        metrics.reset()

        await client.get("/api/games")

        assert metrics.total_queries > 0
        assert metrics.failed_queries == 0


class TestHealthEndpoint:

    async def test_healthy(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"]["connected"] is True
        assert body["database"]["lastHealthCheck"] is not None
        assert "totalQueries" in body["database"]["metrics"]
        assert body["database"]["connectionPool"]["class"] == "StaticPool"
        assert body["system"]["pid"] > 0

    async def test_reset_metrics(self, client, app):
        await client.get("/api/games")

        response = await client.post("/health/metrics/reset")

        assert response.status_code == 200
        assert app.state.monitor.metrics.total_queries == 0

    async def test_unhealthy(self, down_client):
        response = await down_client.get("/health")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["database"]["connected"] is False
        assert "performance" not in body["database"]


class TestUnavailableDatabase:

    async def test_api_answers_503(self, down_client):
        response = await down_client.get("/api/games")

        assert response.status_code == 503
        assert response.json()["error"] == "DATABASE_UNAVAILABLE"

    async def test_health_check_reports_failure(self, down_app):
        assert await down_app.state.monitor.check_health() is False
        assert down_app.state.monitor.connected is False

    async def test_connect_with_retry_gives_up(self, down_app):
        with pytest.raises(Unavailable):
            await down_app.state.monitor.connect_with_retry()

    async def test_connect_with_retry_succeeds(self, app):
        await app.state.monitor.connect_with_retry()
        assert app.state.monitor.connected is True


class TestHealthScheduler:

    async def test_registers_periodic_check(self, app):
        from boardshelf.tasks.health import setup_health_scheduler

        scheduler = setup_health_scheduler(app.state.monitor, 30)
        try:
            job = scheduler.get_job("database_health_check")
            assert job is not None
            assert job.trigger.interval.total_seconds() == 30
        finally:
            scheduler.shutdown(wait=False)

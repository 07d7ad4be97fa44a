# boardshelf/dependencies.py

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from boardshelf.database import get_db
from boardshelf.errors import Unavailable
from boardshelf.services.data_access import DataAccess
from boardshelf.services.db_monitor import DatabaseMonitor
from boardshelf.services.resolver import EntityResolver
from boardshelf.services.wishlist import WishlistManager
from boardshelf.utils.logging import log_warning


def get_monitor(request: Request) -> DatabaseMonitor:
    return request.app.state.monitor


async def get_data_access(request: Request, db: AsyncSession = Depends(get_db)) -> DataAccess:
    return DataAccess(db, timeout=request.app.state.settings.DB_QUERY_TIMEOUT)


def get_resolver(data: DataAccess = Depends(get_data_access)) -> EntityResolver:
    return EntityResolver(data)


def get_wishlist_manager(data: DataAccess = Depends(get_data_access)) -> WishlistManager:
    return WishlistManager(data)


async def ensure_database_connection(monitor: DatabaseMonitor = Depends(get_monitor)) -> None:
    """Reject API calls with 503 while the database is known to be down."""
    if monitor.connected:
        return
    log_warning("⚠️ Database connection not confirmed, checking health...")
    if not await monitor.check_health():
        raise Unavailable("The database is currently unavailable. Please try again later.")

# boardshelf/services/data_access.py
"""
Data-access boundary used by the wishlist manager and the entity resolver.

One `DataAccess` wraps one `AsyncSession` (one request). Every call is bounded
by the configured query timeout; timeouts and connection failures surface as
`Unavailable`, never as a hang. Nothing here retries.
"""
import asyncio
import enum
import logging
from typing import Awaitable, Iterable, List, Optional, TypeVar

from sqlalchemy import delete, inspect, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from boardshelf.errors import UNAVAILABLE_ERRORS, Conflict, Unavailable
from boardshelf.models.game import Game
from boardshelf.models.player import Player
from boardshelf.models.tag import Tag
from boardshelf.models.wishlist import Wishlist

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EntityKind(enum.Enum):
    """Lookup tables keyed by a unique human-readable label."""

    TAG = (Tag, "title")
    PLAYER = (Player, "name")

    @property
    def model(self):
        return self.value[0]

    @property
    def key_column(self):
        return getattr(self.model, self.value[1])

    @property
    def key_name(self) -> str:
        return self.value[1]


class DataAccess:
    def __init__(self, session: AsyncSession, timeout: Optional[float] = None) -> None:
        self.session = session
        self.timeout = timeout

    async def _guard(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except UNAVAILABLE_ERRORS as exc:
            logger.error("Data access '%s' failed: %r", operation, exc)
            raise Unavailable(f"Database unavailable during {operation}") from exc

    async def execute(self, stmt, operation: str = "query"):
        """Run a statement on the request session under the query timeout."""
        return await self._guard(operation, self.session.execute(stmt))

    async def get(self, model, ident, operation: str = "get"):
        return await self._guard(operation, self.session.get(model, ident))

    def add(self, instance) -> None:
        self.session.add(instance)

    # ----------------------------- GAMES -----------------------------

    async def find_game_by_id(self, game_id: int, for_update: bool = False) -> Optional[Game]:
        stmt = (
            select(Game)
            .where(Game.id == game_id)
            .options(selectinload(Game.tags), selectinload(Game.wishlist))
        )
        if for_update:
            stmt = stmt.with_for_update()
        # refresh objects already sitting in the identity map
        stmt = stmt.execution_options(populate_existing=True)
        result = await self._guard("find_game_by_id", self.session.execute(stmt))
        return result.scalars().first()

    # ----------------------------- WISHLIST -----------------------------

    async def find_wishlist(self, game_id: int) -> Optional[Wishlist]:
        stmt = (
            select(Wishlist)
            .where(Wishlist.game_id == game_id)
            .options(
                selectinload(Wishlist.game).selectinload(Game.tags),
                selectinload(Wishlist.game).selectinload(Game.wishlist),
            )
        )
        result = await self._guard("find_wishlist", self.session.execute(stmt))
        return result.scalars().first()

    async def create_wishlist(self, game: Game, reason: str = "") -> Wishlist:
        """Insert and commit a wishlist row; the unique game_id backs up the caller's check."""
        # rollback expires `game`; its attributes cannot be read afterwards
        game_id = game.id
        entry = Wishlist(game_id=game_id, reason=reason, game=game)
        self.session.add(entry)
        try:
            await self._guard("create_wishlist", self.session.commit())
        except IntegrityError as exc:
            await self.session.rollback()
            raise Conflict(f"Game {game_id} is already on the wishlist") from exc
        return entry

    async def delete_wishlist_and_mark_owned(self, game_id: int) -> None:
        """Drop the wishlist row and flip `is_owned` in a single commit."""
        try:
            await self._guard(
                "delete_wishlist_and_mark_owned",
                self._delete_wishlist_and_mark_owned(game_id),
            )
        except Exception:
            await self.session.rollback()
            raise

    async def _delete_wishlist_and_mark_owned(self, game_id: int) -> None:
        await self.session.execute(delete(Wishlist).where(Wishlist.game_id == game_id))
        await self.session.execute(
            update(Game)
            .where(Game.id == game_id)
            .values(is_owned=True)
        )
        await self.session.commit()

    async def find_wishlisted_games(self) -> List[Game]:
        stmt = (
            select(Game)
            .join(Wishlist, Wishlist.game_id == Game.id)
            .where(Game.is_owned.is_(False))
            .options(selectinload(Game.tags), selectinload(Game.wishlist))
            .order_by(Wishlist.created_at.desc(), Game.title.asc())
        )
        result = await self._guard("find_wishlisted_games", self.session.execute(stmt))
        return list(result.scalars().all())

    async def delete_wishlist(self, game_id: int) -> bool:
        result = await self._guard(
            "delete_wishlist",
            self.session.execute(delete(Wishlist).where(Wishlist.game_id == game_id)),
        )
        return result.rowcount > 0

    # ----------------------------- TAGS / PLAYERS -----------------------------

    async def find_entity_by_key(self, kind: EntityKind, key: str):
        stmt = select(kind.model).where(kind.key_column == key)
        result = await self._guard("find_entity_by_key", self.session.execute(stmt))
        return result.scalars().first()

    async def create_entity(self, kind: EntityKind, key: str):
        """Insert inside a SAVEPOINT so a lost race does not poison the outer transaction."""
        entity = kind.model(**{kind.key_name: key})
        try:
            async with self.session.begin_nested():
                self.session.add(entity)
                await self._guard("create_entity", self.session.flush())
        except IntegrityError as exc:
            raise Conflict(f"{kind.model.__name__} '{key}' already exists") from exc
        return entity

    async def replace_associations(self, owner, relation: str, entities: Iterable) -> None:
        """Full replacement: the owner ends up linked to exactly `entities`."""
        await self._load_relation(owner, relation)
        setattr(owner, relation, list(entities))
        await self._guard("replace_associations", self.session.flush())

    async def add_associations(self, owner, relation: str, entities: Iterable) -> None:
        await self._load_relation(owner, relation)
        current = getattr(owner, relation)
        for entity in entities:
            if entity not in current:
                current.append(entity)
        await self._guard("add_associations", self.session.flush())

    async def _load_relation(self, owner, relation: str) -> None:
        # collections must be loaded before mutation; lazy loads are not allowed under asyncio
        if owner in self.session.new or relation not in inspect(owner).unloaded:
            return
        await self._guard("load_relation", self.session.refresh(owner, attribute_names=[relation]))

    # ----------------------------- TRANSACTIONS -----------------------------

    async def commit(self) -> None:
        await self._guard("commit", self.session.commit())

    async def rollback(self) -> None:
        await self.session.rollback()

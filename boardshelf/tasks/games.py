# boardshelf/tasks/games.py

from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from boardshelf.errors import Conflict, InvalidInput, NotFound
from boardshelf.models.game import Game
from boardshelf.models.tag import Tag
from boardshelf.models.wishlist import Wishlist
from boardshelf.schemas.game import GAME_WRITABLE_FIELDS, GameCreate, GameUpdate
from boardshelf.services.data_access import DataAccess, EntityKind
from boardshelf.services.resolver import EntityResolver
from boardshelf.utils.logging import log_info
from boardshelf.utils.model_helpers import apply_model_fields


async def list_games(data: DataAccess, owned: Optional[bool] = None, tag: Optional[str] = None) -> List[Game]:
    stmt = (
        select(Game)
        .options(selectinload(Game.tags), selectinload(Game.wishlist))
        .order_by(Game.title.asc(), Game.id.asc())
    )
    if owned is not None:
        stmt = stmt.where(Game.is_owned.is_(owned))
    if tag is not None:
        stmt = stmt.where(Game.tags.any(Tag.title == tag))

    result = await data.execute(stmt, "list_games")
    return list(result.scalars().all())


async def get_game(data: DataAccess, game_id: int) -> Game:
    game = await data.find_game_by_id(game_id)
    if game is None:
        raise NotFound(f"Game {game_id} not found")
    return game


async def create_game(data: DataAccess, resolver: EntityResolver, payload: GameCreate) -> Game:
    # resolve first: a tag insert that loses a race rolls back its savepoint,
    # and the new game must not be pending inside it
    tags = await resolver.resolve_many(EntityKind.TAG, [t.title for t in payload.tags])

    game = Game(**payload.model_dump(include=set(GAME_WRITABLE_FIELDS)))
    data.add(game)
    await data.add_associations(game, "tags", tags)
    await data.commit()

    log_info(f"🎲 Game created: {game.title} (id={game.id})")
    return await get_game(data, game.id)


async def update_game(data: DataAccess, resolver: EntityResolver, game_id: int, payload: GameUpdate) -> Game:
    # same row lock WishlistManager takes
    game = await data.find_game_by_id(game_id, for_update=True)
    if game is None:
        raise NotFound(f"Game {game_id} not found")
    changes = payload.model_dump(exclude_unset=True, include=set(GAME_WRITABLE_FIELDS))

    # nullable in the schema for partial updates, but not in the table
    for field in ("title", "is_owned"):
        if field in changes and changes[field] is None:
            raise InvalidInput(f"{field} cannot be null")

    min_players = changes.get("min_players", game.min_players)
    max_players = changes.get("max_players", game.max_players)
    if min_players is not None and max_players is not None and min_players > max_players:
        raise InvalidInput("minPlayers cannot be greater than maxPlayers")

    tags = None
    if payload.tags is not None:
        tags = await resolver.resolve_many(EntityKind.TAG, [t.title for t in payload.tags])

    apply_model_fields(game, changes, GAME_WRITABLE_FIELDS)

    # an owned game cannot stay on the wishlist
    if changes.get("is_owned") and game.wishlist is not None:
        await data.delete_wishlist(game_id)
        log_info(f"Game {game_id} marked as owned, wishlist entry removed")

    if tags is not None:
        await data.replace_associations(game, "tags", tags)

    await data.commit()
    return await get_game(data, game_id)


async def delete_game(data: DataAccess, game_id: int) -> None:
    """Tag links go with the game; sessions, files and a wishlist row block the delete."""
    try:
        result = await data.execute(delete(Game).where(Game.id == game_id), "delete_game")
    except IntegrityError as exc:
        await data.rollback()
        raise Conflict(
            f"Game {game_id} still has sessions, files or a wishlist entry and cannot be deleted"
        ) from exc

    if result.rowcount == 0:
        await data.rollback()
        raise NotFound(f"Game {game_id} not found")

    await data.commit()
    log_info(f"🗑️ Game {game_id} deleted")


async def get_game_stats(data: DataAccess) -> dict:
    count = (await data.execute(select(func.count()).select_from(Game))).scalar()
    owned = (await data.execute(select(func.count()).select_from(Game).where(Game.is_owned.is_(True)))).scalar()
    wishlisted = (
        await data.execute(
            select(func.count())
            .select_from(Game)
            .join(Wishlist, Wishlist.game_id == Game.id)
            .where(Game.is_owned.is_(False))
        )
    ).scalar()
    last_update = (await data.execute(select(func.max(Game.updated_at)))).scalar()

    return {
        "count": count or 0,
        "owned": owned or 0,
        "wishlisted": wishlisted or 0,
        "last_update": str(last_update) if last_update else "n/a",
    }

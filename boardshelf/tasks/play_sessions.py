# boardshelf/tasks/play_sessions.py

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import selectinload

from boardshelf.errors import InvalidInput, NotFound
from boardshelf.models.play_session import PlaySession
from boardshelf.schemas.play_session import SESSION_WRITABLE_FIELDS, SessionCreate, SessionUpdate
from boardshelf.services.data_access import DataAccess, EntityKind
from boardshelf.services.resolver import EntityResolver
from boardshelf.utils.model_helpers import apply_model_fields


async def list_sessions(data: DataAccess, game_id: Optional[int] = None) -> List[PlaySession]:
    stmt = (
        select(PlaySession)
        .options(selectinload(PlaySession.players))
        .order_by(PlaySession.date.desc(), PlaySession.id.desc())
    )
    if game_id is not None:
        stmt = stmt.where(PlaySession.game_id == game_id)

    result = await data.execute(stmt, "list_sessions")
    return list(result.scalars().all())


async def get_session(data: DataAccess, session_id: int) -> PlaySession:
    stmt = (
        select(PlaySession)
        .where(PlaySession.id == session_id)
        .options(selectinload(PlaySession.players))
        .execution_options(populate_existing=True)
    )
    play = (await data.execute(stmt, "get_session")).scalars().first()
    if play is None:
        raise NotFound(f"Session {session_id} not found")
    return play


async def create_session(data: DataAccess, resolver: EntityResolver, payload: SessionCreate) -> PlaySession:
    if await data.find_game_by_id(payload.game_id) is None:
        raise NotFound(f"Game {payload.game_id} not found")

    players = await resolver.resolve_many(EntityKind.PLAYER, [p.name for p in payload.players])

    play = PlaySession(game_id=payload.game_id, **payload.model_dump(include=set(SESSION_WRITABLE_FIELDS)))
    data.add(play)
    await data.add_associations(play, "players", players)
    await data.commit()
    return await get_session(data, play.id)


async def update_session(
    data: DataAccess, resolver: EntityResolver, session_id: int, payload: SessionUpdate
) -> PlaySession:
    play = await get_session(data, session_id)
    changes = payload.model_dump(exclude_unset=True, include=set(SESSION_WRITABLE_FIELDS))
    if "date" in changes and changes["date"] is None:
        raise InvalidInput("date cannot be null")

    players = None
    if payload.players is not None:
        players = await resolver.resolve_many(EntityKind.PLAYER, [p.name for p in payload.players])

    apply_model_fields(play, changes, SESSION_WRITABLE_FIELDS)
    if players is not None:
        await data.replace_associations(play, "players", players)

    await data.commit()
    return await get_session(data, session_id)


async def delete_session(data: DataAccess, session_id: int) -> None:
    result = await data.execute(delete(PlaySession).where(PlaySession.id == session_id), "delete_session")
    if result.rowcount == 0:
        await data.rollback()
        raise NotFound(f"Session {session_id} not found")
    await data.commit()

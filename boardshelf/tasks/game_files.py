from typing import List

from sqlalchemy import delete, select

from boardshelf.errors import NotFound
from boardshelf.models.game import Game
from boardshelf.models.game_file import GameFile
from boardshelf.schemas.game_file import FILE_WRITABLE_FIELDS, FileCreate, FileUpdate
from boardshelf.services.data_access import DataAccess
from boardshelf.utils.model_helpers import apply_model_fields


async def _ensure_game(data: DataAccess, game_id: int) -> None:
    if await data.get(Game, game_id) is None:
        raise NotFound(f"Game {game_id} not found")


async def list_files(data: DataAccess, game_id: int) -> List[GameFile]:
    await _ensure_game(data, game_id)
    result = await data.execute(
        select(GameFile).where(GameFile.game_id == game_id).order_by(GameFile.title.asc())
    )
    return list(result.scalars().all())


async def get_file(data: DataAccess, file_id: int) -> GameFile:
    game_file = await data.get(GameFile, file_id)
    if game_file is None:
        raise NotFound(f"File {file_id} not found")
    return game_file


async def create_file(data: DataAccess, game_id: int, payload: FileCreate) -> GameFile:
    await _ensure_game(data, game_id)
    game_file = GameFile(game_id=game_id, **payload.model_dump(include=set(FILE_WRITABLE_FIELDS)))
    data.add(game_file)
    await data.commit()
    return game_file


async def update_file(data: DataAccess, file_id: int, payload: FileUpdate) -> GameFile:
    game_file = await get_file(data, file_id)
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    apply_model_fields(game_file, changes, FILE_WRITABLE_FIELDS)
    await data.commit()
    return game_file


async def delete_file(data: DataAccess, file_id: int) -> None:
    result = await data.execute(delete(GameFile).where(GameFile.id == file_id), "delete_file")
    if result.rowcount == 0:
        await data.rollback()
        raise NotFound(f"File {file_id} not found")
    await data.commit()

# boardshelf/routes/games.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from boardshelf.dependencies import get_data_access, get_resolver
from boardshelf.schemas.game import GameCreate, GameRead, GameStats, GameUpdate
from boardshelf.services.data_access import DataAccess
from boardshelf.services.resolver import EntityResolver
from boardshelf.tasks import games

router = APIRouter(prefix="/games", tags=["Games"])


@router.get("/stats", response_model=GameStats)
async def stats(data: DataAccess = Depends(get_data_access)):
    return await games.get_game_stats(data)


@router.get("", response_model=List[GameRead])
async def list_games(
    owned: Optional[bool] = Query(None, description="Filter by ownership"),
    tag: Optional[str] = Query(None, description="Only games carrying this exact tag title"),
    data: DataAccess = Depends(get_data_access),
):
    return await games.list_games(data, owned=owned, tag=tag)


@router.get("/{game_id}", response_model=GameRead)
async def get_game(game_id: int, data: DataAccess = Depends(get_data_access)):
    return await games.get_game(data, game_id)


@router.post("", response_model=GameRead, status_code=status.HTTP_201_CREATED)
async def create_game(
    payload: GameCreate,
    data: DataAccess = Depends(get_data_access),
    resolver: EntityResolver = Depends(get_resolver),
):
    return await games.create_game(data, resolver, payload)


@router.put("/{game_id}", response_model=GameRead)
async def update_game(
    game_id: int,
    payload: GameUpdate,
    data: DataAccess = Depends(get_data_access),
    resolver: EntityResolver = Depends(get_resolver),
):
    """Partial update. Sending `tags` replaces the whole tag list; `[]` clears it."""
    return await games.update_game(data, resolver, game_id, payload)


@router.delete("/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_game(game_id: int, data: DataAccess = Depends(get_data_access)):
    await games.delete_game(data, game_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

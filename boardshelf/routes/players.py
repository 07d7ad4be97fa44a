from typing import List

from fastapi import APIRouter, Depends, Response, status

from boardshelf.dependencies import get_data_access, get_resolver
from boardshelf.schemas.player import PlayerCreate, PlayerRead, PlayerUpdate
from boardshelf.services.data_access import DataAccess, EntityKind
from boardshelf.services.resolver import EntityResolver
from boardshelf.tasks import lookups

router = APIRouter(prefix="/players", tags=["Players"])


@router.get("", response_model=List[PlayerRead])
async def list_players(data: DataAccess = Depends(get_data_access)):
    return await lookups.list_entities(data, EntityKind.PLAYER)


@router.get("/{player_id}", response_model=PlayerRead)
async def get_player(player_id: int, data: DataAccess = Depends(get_data_access)):
    return await lookups.get_entity(data, EntityKind.PLAYER, player_id)


@router.post("", response_model=PlayerRead, status_code=status.HTTP_201_CREATED)
async def create_player(
    payload: PlayerCreate,
    response: Response,
    data: DataAccess = Depends(get_data_access),
    resolver: EntityResolver = Depends(get_resolver),
):
    player, created = await lookups.create_entity(data, resolver, EntityKind.PLAYER, payload.name)
    if not created:
        response.status_code = status.HTTP_200_OK
    return player


@router.put("/{player_id}", response_model=PlayerRead)
async def rename_player(player_id: int, payload: PlayerUpdate, data: DataAccess = Depends(get_data_access)):
    return await lookups.rename_entity(data, EntityKind.PLAYER, player_id, payload.name)


@router.delete("/{player_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_player(player_id: int, data: DataAccess = Depends(get_data_access)):
    await lookups.delete_entity(data, EntityKind.PLAYER, player_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# boardshelf/routes/play_sessions.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from boardshelf.dependencies import get_data_access, get_resolver
from boardshelf.schemas.play_session import SessionCreate, SessionRead, SessionUpdate
from boardshelf.services.data_access import DataAccess
from boardshelf.services.resolver import EntityResolver
from boardshelf.tasks import play_sessions

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.get("", response_model=List[SessionRead])
async def list_sessions(
    game_id: Optional[int] = Query(None, alias="gameId", description="Only sessions of this game"),
    data: DataAccess = Depends(get_data_access),
):
    return await play_sessions.list_sessions(data, game_id=game_id)


@router.get("/{session_id}", response_model=SessionRead)
async def get_session(session_id: int, data: DataAccess = Depends(get_data_access)):
    return await play_sessions.get_session(data, session_id)


@router.post("", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: SessionCreate,
    data: DataAccess = Depends(get_data_access),
    resolver: EntityResolver = Depends(get_resolver),
):
    return await play_sessions.create_session(data, resolver, payload)


@router.put("/{session_id}", response_model=SessionRead)
async def update_session(
    session_id: int,
    payload: SessionUpdate,
    data: DataAccess = Depends(get_data_access),
    resolver: EntityResolver = Depends(get_resolver),
):
    return await play_sessions.update_session(data, resolver, session_id, payload)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: int, data: DataAccess = Depends(get_data_access)):
    await play_sessions.delete_session(data, session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

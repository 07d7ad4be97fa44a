# boardshelf/routes/game_files.py

from typing import List

from fastapi import APIRouter, Depends, Response, status

from boardshelf.dependencies import get_data_access
from boardshelf.schemas.game_file import FileCreate, FileRead, FileUpdate
from boardshelf.services.data_access import DataAccess
from boardshelf.tasks import game_files

router = APIRouter(tags=["Files"])


@router.get("/games/{game_id}/files", response_model=List[FileRead])
async def list_files(game_id: int, data: DataAccess = Depends(get_data_access)):
    return await game_files.list_files(data, game_id)


@router.post("/games/{game_id}/files", response_model=FileRead, status_code=status.HTTP_201_CREATED)
async def create_file(game_id: int, payload: FileCreate, data: DataAccess = Depends(get_data_access)):
    return await game_files.create_file(data, game_id, payload)


@router.get("/files/{file_id}", response_model=FileRead)
async def get_file(file_id: int, data: DataAccess = Depends(get_data_access)):
    return await game_files.get_file(data, file_id)


@router.put("/files/{file_id}", response_model=FileRead)
async def update_file(file_id: int, payload: FileUpdate, data: DataAccess = Depends(get_data_access)):
    return await game_files.update_file(data, file_id, payload)


@router.delete("/files/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(file_id: int, data: DataAccess = Depends(get_data_access)):
    await game_files.delete_file(data, file_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

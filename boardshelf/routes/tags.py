from typing import List

from fastapi import APIRouter, Depends, Response, status

from boardshelf.dependencies import get_data_access, get_resolver
from boardshelf.schemas.tag import TagCreate, TagRead, TagUpdate
from boardshelf.services.data_access import DataAccess, EntityKind
from boardshelf.services.resolver import EntityResolver
from boardshelf.tasks import lookups

router = APIRouter(prefix="/tags", tags=["Tags"])


@router.get("", response_model=List[TagRead])
async def list_tags(data: DataAccess = Depends(get_data_access)):
    return await lookups.list_entities(data, EntityKind.TAG)


@router.get("/{tag_id}", response_model=TagRead)
async def get_tag(tag_id: int, data: DataAccess = Depends(get_data_access)):
    return await lookups.get_entity(data, EntityKind.TAG, tag_id)


@router.post("", response_model=TagRead, status_code=status.HTTP_201_CREATED)
async def create_tag(
    payload: TagCreate,
    response: Response,
    data: DataAccess = Depends(get_data_access),
    resolver: EntityResolver = Depends(get_resolver),
):
    """Get-or-create: 201 for a new tag, 200 when the title already existed."""
    tag, created = await lookups.create_entity(data, resolver, EntityKind.TAG, payload.title)
    if not created:
        response.status_code = status.HTTP_200_OK
    return tag


@router.put("/{tag_id}", response_model=TagRead)
async def rename_tag(tag_id: int, payload: TagUpdate, data: DataAccess = Depends(get_data_access)):
    return await lookups.rename_entity(data, EntityKind.TAG, tag_id, payload.title)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(tag_id: int, data: DataAccess = Depends(get_data_access)):
    await lookups.delete_entity(data, EntityKind.TAG, tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

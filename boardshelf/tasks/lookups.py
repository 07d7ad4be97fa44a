# boardshelf/tasks/lookups.py
"""CRUD for the label-keyed lookup tables (tags and players)."""

from typing import List, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from boardshelf.errors import Conflict, NotFound
from boardshelf.services.data_access import DataAccess, EntityKind
from boardshelf.services.resolver import EntityResolver


def _label(kind: EntityKind) -> str:
    return kind.model.__name__


async def list_entities(data: DataAccess, kind: EntityKind) -> List[object]:
    result = await data.execute(select(kind.model).order_by(kind.key_column.asc()), "list_entities")
    return list(result.scalars().all())


async def get_entity(data: DataAccess, kind: EntityKind, entity_id: int):
    entity = await data.get(kind.model, entity_id)
    if entity is None:
        raise NotFound(f"{_label(kind)} {entity_id} not found")
    return entity


async def create_entity(data: DataAccess, resolver: EntityResolver, kind: EntityKind, label: str) -> Tuple[object, bool]:
    """Idempotent: an existing entity with the same label is returned as is."""
    entity, created = await resolver.resolve_entity(kind, label)
    await data.commit()
    return entity, created


async def rename_entity(data: DataAccess, kind: EntityKind, entity_id: int, label: str):
    entity = await get_entity(data, kind, entity_id)
    setattr(entity, kind.key_name, label)
    try:
        await data.commit()
    except IntegrityError as exc:
        await data.rollback()
        raise Conflict(f"{_label(kind)} '{label}' already exists") from exc
    return entity


async def delete_entity(data: DataAccess, kind: EntityKind, entity_id: int) -> None:
    """Join rows are removed by ON DELETE CASCADE; the other side is untouched."""
    result = await data.execute(delete(kind.model).where(kind.model.id == entity_id), "delete_entity")
    if result.rowcount == 0:
        await data.rollback()
        raise NotFound(f"{_label(kind)} {entity_id} not found")
    await data.commit()

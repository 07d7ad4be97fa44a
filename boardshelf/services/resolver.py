# boardshelf/services/resolver.py

import logging
from typing import Iterable, List, Tuple

from boardshelf.errors import Conflict, InvalidInput
from boardshelf.services.data_access import DataAccess, EntityKind

logger = logging.getLogger(__name__)


class EntityResolver:
    """Get-or-create for tags and players, keyed by their exact label.

    The unique constraint on the label column is the backstop for concurrent
    requests: losing the insert race shows up as `Conflict`, which is answered
    by reading the row the other request just created.
    """

    def __init__(self, data: DataAccess) -> None:
        self._data = data

    async def resolve(self, kind: EntityKind, label: str) -> int:
        entity, _ = await self.resolve_entity(kind, label)
        return entity.id

    async def resolve_entity(self, kind: EntityKind, label: str) -> Tuple[object, bool]:
        """Return `(entity, created)`."""
        if not label or not label.strip():
            raise InvalidInput(f"{kind.model.__name__} {kind.key_name} must not be empty")

        existing = await self._data.find_entity_by_key(kind, label)
        if existing is not None:
            return existing, False

        try:
            entity = await self._data.create_entity(kind, label)
        except Conflict:
            logger.info("%s '%s' created concurrently, re-reading", kind.model.__name__, label)
            existing = await self._data.find_entity_by_key(kind, label)
            if existing is None:
                raise
            return existing, False

        logger.debug("Created %s '%s' (id=%s)", kind.model.__name__, label, entity.id)
        return entity, True

    async def resolve_many(self, kind: EntityKind, labels: Iterable[str]) -> List[object]:
        entities = []
        seen = set()
        for label in labels:
            if label in seen:
                continue
            seen.add(label)
            entity, _ = await self.resolve_entity(kind, label)
            entities.append(entity)
        return entities

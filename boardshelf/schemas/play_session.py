from datetime import datetime
from typing import List, Optional

from pydantic import Field

from boardshelf.schemas.common import CamelModel
from boardshelf.schemas.player import PlayerRead, PlayerRef

SESSION_WRITABLE_FIELDS = ("date", "notes")


class SessionCreate(CamelModel):
    game_id: int
    date: datetime
    notes: Optional[str] = None
    players: List[PlayerRef] = Field(default_factory=list)


class SessionUpdate(CamelModel):
    """Partial update. `players`, when sent, replaces the whole player list."""

    date: Optional[datetime] = None
    notes: Optional[str] = None
    players: Optional[List[PlayerRef]] = None


class SessionRead(CamelModel):
    id: int
    game_id: int
    date: datetime
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    players: List[PlayerRead] = []

from datetime import datetime
from typing import Optional

from pydantic import Field

from boardshelf.schemas.common import CamelModel
from boardshelf.schemas.game import GameRead


class WishlistCreate(CamelModel):
    reason: str = Field("", max_length=2000)


class WishlistUpdate(WishlistCreate):
    pass


class WishlistRead(CamelModel):
    id: int
    reason: Optional[str] = None
    game_id: int
    created_at: Optional[datetime] = None
    game: GameRead

# boardshelf/schemas/game.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field, model_validator

from boardshelf.schemas.common import CamelModel
from boardshelf.schemas.tag import TagRead, TagRef

# Columns a client may write; everything else is server-managed
GAME_WRITABLE_FIELDS = (
    "title",
    "description",
    "genre",
    "min_players",
    "max_players",
    "play_time",
    "publisher",
    "age",
    "rating",
    "cover_image",
    "is_owned",
    "my_rating",
)


class GameBase(CamelModel):
    description: Optional[str] = None
    genre: Optional[str] = None
    min_players: Optional[int] = Field(None, ge=1)
    max_players: Optional[int] = Field(None, ge=1)
    play_time: Optional[int] = Field(None, ge=0)
    publisher: Optional[str] = None
    age: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=10)
    cover_image: Optional[str] = None
    my_rating: Optional[int] = Field(None, ge=0, le=10)

    @model_validator(mode="after")
    def check_player_range(self):
        if self.min_players is not None and self.max_players is not None:
            if self.min_players > self.max_players:
                raise ValueError("minPlayers cannot be greater than maxPlayers")
        return self


class GameCreate(GameBase):
    title: str = Field(min_length=1)
    is_owned: bool = False
    tags: List[TagRef] = Field(default_factory=list)


class GameUpdate(GameBase):
    """Partial update. `tags`, when sent, replaces the whole tag list ([] clears it)."""

    title: Optional[str] = Field(None, min_length=1)
    is_owned: Optional[bool] = None
    tags: Optional[List[TagRef]] = None


class WishlistBrief(CamelModel):
    id: int
    reason: Optional[str] = None
    created_at: Optional[datetime] = None


class GameRead(GameBase):
    id: int
    title: str
    is_owned: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    tags: List[TagRead] = []
    wishlist: Optional[WishlistBrief] = None


class GameStats(CamelModel):
    count: int
    owned: int
    wishlisted: int
    last_update: str

from datetime import datetime
from typing import Optional

from pydantic import Field

from boardshelf.schemas.common import CamelModel

FILE_WRITABLE_FIELDS = ("title", "link")


class FileCreate(CamelModel):
    title: str = Field(min_length=1)
    link: str = Field(min_length=1)


class FileUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    link: Optional[str] = Field(None, min_length=1)


class FileRead(CamelModel):
    id: int
    game_id: int
    title: str
    link: str
    created_at: Optional[datetime] = None

from pydantic import ConfigDict, Field

from boardshelf.schemas.common import CamelModel


class PlayerRef(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)


class PlayerCreate(PlayerRef):
    pass


class PlayerUpdate(PlayerRef):
    pass


class PlayerRead(CamelModel):
    id: int
    name: str

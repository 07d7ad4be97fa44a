from pydantic import ConfigDict, Field

from boardshelf.schemas.common import CamelModel


class TagRef(CamelModel):
    """Tag as referenced from a game payload: only the label, resolved server-side."""

    # "  " must not pass as a label
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=100)


class TagCreate(TagRef):
    pass


class TagUpdate(TagRef):
    pass


class TagRead(CamelModel):
    id: int
    title: str

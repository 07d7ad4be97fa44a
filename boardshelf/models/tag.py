from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from boardshelf.database import Base
from boardshelf.models.game import game_tags


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, unique=True, nullable=False)

    games = relationship("Game", secondary=game_tags, back_populates="tags", passive_deletes=True)

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from boardshelf.database import Base
from boardshelf.models.play_session import session_players


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)

    sessions = relationship("PlaySession", secondary=session_players, back_populates="players", passive_deletes=True)

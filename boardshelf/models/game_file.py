from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from boardshelf.database import Base


class GameFile(Base):
    """Link to a rulebook, score sheet, etc. attached to a game."""

    __tablename__ = "files"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    link = Column(String, nullable=False)
    game_id = Column(Integer, ForeignKey("games.id", ondelete="RESTRICT"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    game = relationship("Game", back_populates="files")

# boardshelf/models/wishlist.py

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from boardshelf.database import Base


class Wishlist(Base):
    """Existence of this row is what makes a game "wishlisted".

    `game_id` is unique, so the database itself refuses a second entry for
    the same game.
    """

    __tablename__ = "wishlist"

    id = Column(Integer, primary_key=True, index=True)
    reason = Column(Text, nullable=True, default="")
    game_id = Column(Integer, ForeignKey("games.id", ondelete="RESTRICT"), unique=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    game = relationship("Game", back_populates="wishlist")

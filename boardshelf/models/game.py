# boardshelf/models/game.py

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from boardshelf.database import Base

# Pure join rows: removed with either side, never blocking a delete
game_tags = Table(
    "game_tags",
    Base.metadata,
    Column("game_id", Integer, ForeignKey("games.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Game(Base):
    __tablename__ = "games"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    genre = Column(String, nullable=True)
    min_players = Column(Integer, nullable=True)
    max_players = Column(Integer, nullable=True)
    play_time = Column(Integer, nullable=True)  # minutes
    publisher = Column(String, nullable=True)
    age = Column(String, nullable=True)  # e.g. "12+"
    rating = Column(Float, nullable=True)
    cover_image = Column(String, nullable=True)

    # Denormalized for filtering; a Wishlist row exists only while this is False
    is_owned = Column(Boolean, nullable=False, default=False, index=True)
    my_rating = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Children reference the game with ON DELETE RESTRICT; the ORM must not
    # try to null out or delete them on its own.
    wishlist = relationship("Wishlist", back_populates="game", uselist=False, passive_deletes="all")
    sessions = relationship("PlaySession", back_populates="game", passive_deletes="all")
    files = relationship("GameFile", back_populates="game", passive_deletes="all")

    tags = relationship("Tag", secondary=game_tags, back_populates="games", passive_deletes=True)

    def __repr__(self):
        return f"<Game(id={self.id}, title={self.title}, is_owned={self.is_owned})>"

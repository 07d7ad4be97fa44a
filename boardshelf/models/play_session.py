# boardshelf/models/play_session.py

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Table, Text
from sqlalchemy.orm import relationship

from boardshelf.database import Base

session_players = Table(
    "session_players",
    Base.metadata,
    Column("session_id", Integer, ForeignKey("sessions.id", ondelete="CASCADE"), primary_key=True),
    Column("player_id", Integer, ForeignKey("players.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class PlaySession(Base):
    """A single logged play of a game.

    Named PlaySession to keep it apart from SQLAlchemy's own Session; the
    table is still `sessions`.
    """

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(DateTime, nullable=False)
    notes = Column(Text, nullable=True)
    game_id = Column(Integer, ForeignKey("games.id", ondelete="RESTRICT"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    game = relationship("Game", back_populates="sessions")
    players = relationship("Player", secondary=session_players, back_populates="sessions", passive_deletes=True)

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from squash_tracker.core.database import Base


class Standing(Base):
    __tablename__ = "pool_standings"

    tournament_id = Column(String(32), ForeignKey("tournaments.id"), primary_key=True)
    pool_id = Column(String(20), primary_key=True)
    login = Column(String(50), primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    matches_played = Column(Integer, nullable=False, default=0)
    matches_won = Column(Integer, nullable=False, default=0)
    matches_lost = Column(Integer, nullable=False, default=0)
    games_won = Column(Integer, nullable=False, default=0)
    games_lost = Column(Integer, nullable=False, default=0)
    points_won = Column(Integer, nullable=False, default=0)
    points_lost = Column(Integer, nullable=False, default=0)
    points_diff = Column(Integer, nullable=False, default=0)
    last_played_at = Column(DateTime(timezone=True), nullable=True)

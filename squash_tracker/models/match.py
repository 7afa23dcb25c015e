from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String

from squash_tracker.core.database import Base


class Match(Base):
    __tablename__ = "matches"

    id = Column(String(32), primary_key=True, index=True)
    tournament_id = Column(String(32), ForeignKey("tournaments.id"), nullable=False, index=True)
    pool_id = Column(String(20), nullable=True, index=True)
    round = Column(Integer, nullable=True)
    player_a_login = Column(String(50), nullable=False)
    player_b_login = Column(String(50), nullable=False)
    # Ordered list of {"player_a_score": .., "player_b_score": ..}
    scores = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default="SCHEDULED")
    winner_login = Column(String(50), nullable=True)
    court = Column(String, nullable=True)
    scheduled_time = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    # Insertion order, so listings come back in schedule order
    position = Column(Integer, nullable=False, default=0)

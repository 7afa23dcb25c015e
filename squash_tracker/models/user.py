from sqlalchemy import Column, DateTime, Integer, String

from squash_tracker.core.database import Base


class User(Base):
    __tablename__ = "users"

    login = Column(String(50), primary_key=True, index=True)
    display_name = Column(String(100), nullable=False)
    full_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    club = Column(String, nullable=True)
    ranking = Column(Integer, nullable=True)
    handedness = Column(String(5), nullable=True)  # "Left" / "Right"
    preferred_court = Column(String, nullable=True)
    role = Column(String(10), nullable=False, default="PLAYER")
    created_at = Column(DateTime(timezone=True), nullable=False)

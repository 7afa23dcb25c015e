from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from squash_tracker.core.database import Base


class Tournament(Base):
    __tablename__ = "tournaments"

    id = Column(String(32), primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    start_date = Column(DateTime(timezone=True), nullable=False)
    type = Column(String(30), nullable=False)  # ROUND_ROBIN / SINGLE_ELIMINATION
    status = Column(String(20), nullable=False, default="Draft")  # Draft / Active / Completed
    pool_size = Column(Integer, nullable=False, default=4)
    rules = Column(JSON, nullable=False)
    # Participant logins in join order
    participants = Column(JSON, nullable=False, default=list)
    admin_login = Column(String(50), nullable=False, index=True)

from sqlalchemy import Column, DateTime, Integer, String, Text

from squash_tracker.core.database import Base


class AuditLogEntry(Base):
    __tablename__ = "audit_log"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, index=True, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    actor_login = Column(String(50), nullable=False)
    action = Column(String(10), nullable=False)  # CREATE / UPDATE / DELETE
    target_type = Column(String(20), nullable=False)  # MATCH / TOURNAMENT / USER
    target_id = Column(String(50), nullable=False, index=True)
    details = Column(Text, nullable=False, default="")

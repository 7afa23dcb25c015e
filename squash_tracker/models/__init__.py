from squash_tracker.core.database import Base

# Import all ORM models here to ensure they are registered with Base
from .user import User
from .tournament import Tournament
from .match import Match
from .standing import Standing
from .audit_log import AuditLogEntry

__all__ = ["Base", "User", "Tournament", "Match", "Standing", "AuditLogEntry"]

import logging
from typing import List, Optional

from squash_tracker.models.audit_model import AuditAction, AuditLog, AuditTargetType
from squash_tracker.repositories.base import Repository

logger = logging.getLogger(__name__)


class AuditService:
    def __init__(self, repository: Repository):
        self.repository = repository

    def record(
        self,
        actor_login: str,
        action: AuditAction,
        target_type: AuditTargetType,
        target_id: str,
        details: str = "",
    ) -> AuditLog:
        entry = AuditLog(
            actor_login=actor_login,
            action=action,
            target_type=target_type,
            target_id=target_id,
            details=details,
        )
        self.repository.add_audit_entry(entry)
        logger.debug("audit %s %s %s by %s", entry.action, entry.target_type, target_id, actor_login)
        return entry

    def list_entries(self, target_id: Optional[str] = None) -> List[AuditLog]:
        return self.repository.list_audit_entries(target_id)

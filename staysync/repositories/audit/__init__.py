from staysync.repositories.audit.audit_log_repository import AuditLogRepository

__all__ = ["AuditLogRepository"]
